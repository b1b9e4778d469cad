"""Utility functions for statex."""

from statex.utils.amount_parser import (
    as_amount,
    as_exchange_rate,
    as_shares,
    format_amount,
    format_shares,
    parse_amount,
    parse_number,
)
from statex.utils.date_parser import as_date, as_datetime, parse_date
from statex.utils.locale_profile import LocaleProfile, get_locale_profile

__all__ = [
    "as_amount",
    "as_exchange_rate",
    "as_shares",
    "format_amount",
    "format_shares",
    "parse_amount",
    "parse_number",
    "as_date",
    "as_datetime",
    "parse_date",
    "LocaleProfile",
    "get_locale_profile",
]
