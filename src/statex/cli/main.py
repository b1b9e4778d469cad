"""Main CLI entry point."""

import logging

import click
from statex.cli.logging_config import configure_logging
from statex.database.factories import create_sqlite_database

# Import and register all commands at module level
from statex.cli.commands import banks, extract, securities


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to security database file (overrides STATEX_DB_PATH environment variable)",
    envvar="STATEX_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log block matches and classification details")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Statex - Extract transactions from bank and broker statements.

    Reads the text of converted PDF statements, recognizes the institution
    and lists the buys, sells, dividends, fees and cash movements found.
    """
    ctx.ensure_object(dict)
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
extract.register_commands(cli)
banks.register_commands(cli)
securities.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
