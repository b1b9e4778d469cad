"""Security store commands."""

import click
from statex.domain.security import SecurityService


@click.command("securities")
@click.pass_context
def list_securities(ctx):
    """List securities created while extracting statements."""
    service = SecurityService(ctx.obj["db"])
    securities = service.list_securities()

    if not securities:
        click.echo("No securities found.")
        return

    click.echo(f"\nFound {len(securities)} securit{'ies' if len(securities) != 1 else 'y'}:")
    click.echo("-" * 90)
    click.echo(f"{'ID':<6} {'Name':<40} {'ISIN':<14} {'WKN/CUSIP':<12} {'Ticker':<8} {'Cur':<4}")
    click.echo("-" * 90)
    for security in securities:
        click.echo(
            f"{security.id:<6} {(security.name or '')[:40]:<40} {security.isin or '':<14} "
            f"{security.wkn or '':<12} {security.ticker_symbol or '':<8} {security.currency_code:<4}"
        )


def register_commands(cli):
    """Register security commands with main CLI."""
    cli.add_command(list_securities)
