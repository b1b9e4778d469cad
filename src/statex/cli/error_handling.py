"""CLI error rendering for statement extraction."""

from typing import Optional

import click

from statex.domain.errors import DomainError


def format_error(error: DomainError | UnicodeDecodeError, source: Optional[str] = None) -> str:
    """Return the one-line message shown for a statement that could not be read."""
    if isinstance(error, UnicodeDecodeError):
        message = f"Statement is not UTF-8 text ({error.reason} at byte {error.start})"
    else:
        message = str(error)
    return f"Error: {source}: {message}" if source else f"Error: {message}"


def handle_domain_error(
    ctx: click.Context, error: DomainError | UnicodeDecodeError, source: Optional[str] = None
) -> None:
    """Render an error for source and exit with failure."""
    click.echo(format_error(error, source), err=True)
    ctx.exit(1)
