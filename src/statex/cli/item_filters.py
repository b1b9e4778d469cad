"""CLI helpers for narrowing extracted items by date and amount."""

from dataclasses import dataclass
from datetime import date

import click

from statex.domain.entities import Item
from statex.utils.amount_parser import AMOUNT_FACTOR, parse_amount
from statex.utils.date_parser import parse_date


@dataclass(frozen=True)
class ItemFilter:
    """Date range and minimum amount; failed items always pass."""

    start: date | None = None
    end: date | None = None
    min_amount: int | None = None

    def accepts(self, item: Item) -> bool:
        subject = item.subject
        if item.failed or subject is None:
            return True
        day = subject.date_time.date()
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        if self.min_amount is not None and abs(subject.amount) < self.min_amount:
            return False
        return True


def resolve_item_filter(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    min_amount: str | None,
) -> ItemFilter:
    """Parse the filter options or exit with an error."""
    start = None
    end = None
    minimum = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    if min_amount:
        try:
            minimum = int(abs(parse_amount(min_amount)) * AMOUNT_FACTOR)
        except ValueError as e:
            click.echo(f"Error: Invalid minimum amount: {e}", err=True)
            ctx.exit(1)

    return ItemFilter(start=start, end=end, min_amount=minimum)
