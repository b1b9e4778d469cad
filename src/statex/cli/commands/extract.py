"""Statement extraction command."""

import json
from pathlib import Path
from typing import Any

import click
from statex.cli.error_handling import format_error, handle_domain_error
from statex.cli.item_filters import resolve_item_filter
from statex.domain.entities import Document, ExtractionResult, Item, UnitType
from statex.domain.errors import DomainError
from statex.domain.extraction import ExtractionService
from statex.domain.security import SecurityService
from statex.extractors import default_extractors
from statex.utils.amount_parser import format_amount, format_shares


def item_to_dict(item: Item) -> dict[str, Any]:
    """Flatten an item for display and JSON output."""
    row: dict[str, Any] = {
        "line": item.line_number,
        "block": item.block,
        "type": None,
        "date": None,
        "security": None,
        "shares": None,
        "amount": None,
        "currency": None,
        "taxes": None,
        "failure": item.failure_message,
    }
    subject = item.subject
    if subject is None:
        return row

    taxes = sum(u.amount.amount for u in subject.units if u.type == UnitType.TAX)
    row.update(
        type=subject.type.value,
        date=subject.date_time.date().isoformat(),
        security=subject.security.name if subject.security else None,
        shares=format_shares(subject.shares) if subject.shares else None,
        amount=format_amount(subject.amount),
        currency=subject.currency_code,
        taxes=format_amount(taxes) if taxes else None,
    )
    return row


def _echo_table(result: ExtractionResult, items: list[Item]) -> None:
    click.echo(f"\n{result.source}: {result.extractor} ({result.document_type})")
    failed = sum(1 for item in items if item.failed)
    click.echo(f"Found {len(items)} item(s), {failed} failed:")
    click.echo("-" * 110)
    click.echo(
        f"{'Line':<6} {'Date':<12} {'Type':<18} {'Security':<32} {'Shares':>10} {'Amount':>14} {'Tax':>8}"
    )
    click.echo("-" * 110)
    for item in items:
        row = item_to_dict(item)
        if row["type"] is not None:
            security = (row["security"] or "")[:32]
            click.echo(
                f"{row['line']:<6} {row['date']:<12} {row['type']:<18} {security:<32} "
                f"{row['shares'] or '':>10} {row['amount'] + ' ' + row['currency']:>14} {row['taxes'] or '':>8}"
            )
        if item.failed:
            click.echo(f"  Line {item.line_number} ({item.block}): {item.failure_message}", err=True)


@click.command("extract")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print items as JSON")
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True, help="Statements parsed in parallel")
@click.option("--start-date", help="Only items on or after this date (YYYY-MM-DD, 'last month', ...)")
@click.option("--end-date", help="Only items on or before this date")
@click.option("--min-amount", help="Only items of at least this absolute amount")
@click.pass_context
def extract_statements(
    ctx,
    files: tuple[str, ...],
    as_json: bool,
    workers: int,
    start_date: str | None,
    end_date: str | None,
    min_amount: str | None,
):
    """Extract transactions from statement text files."""
    item_filter = resolve_item_filter(ctx, start_date=start_date, end_date=end_date, min_amount=min_amount)
    db = ctx.obj["db"]
    service = ExtractionService(default_extractors(SecurityService(db)))

    documents = []
    for path in files:
        try:
            text = Path(path).read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            handle_domain_error(ctx, e, source=path)
        documents.append(Document.from_text(text, source=path))
    results = service.extract_many(documents, max_workers=workers)

    output = []
    has_errors = False
    for document, result in zip(documents, results):
        if isinstance(result, DomainError):
            has_errors = True
            click.echo(format_error(result, document.source), err=True)
            continue
        items = [item for item in result.items if item_filter.accepts(item)]
        if as_json:
            output.append(
                {
                    "file": result.source,
                    "extractor": result.extractor,
                    "document_type": result.document_type,
                    "items": [item_to_dict(item) for item in items],
                }
            )
        else:
            _echo_table(result, items)

    if as_json:
        click.echo(json.dumps(output, indent=2))
    if has_errors:
        ctx.exit(1)


def register_commands(cli):
    """Register extract command with main CLI."""
    cli.add_command(extract_statements)
