"""Supported institutions command."""

import click
from statex.domain.security import SecurityService
from statex.extractors import default_extractors


@click.command("banks")
@click.pass_context
def list_banks(ctx):
    """List the institutions and statement types that can be extracted."""
    extractors = default_extractors(SecurityService(ctx.obj["db"]))

    click.echo(f"\nSupported institutions ({len(extractors)}):")
    click.echo("-" * 60)
    for extractor in extractors:
        click.echo(f"{extractor.label}")
        for document_type in extractor.document_types:
            click.echo(f"  {document_type.name}: {len(document_type.blocks)} transaction block(s)")


def register_commands(cli):
    """Register banks command with main CLI."""
    cli.add_command(list_banks)
