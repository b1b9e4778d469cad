"""Date parsing utilities."""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from statex.domain.errors import MalformedDateError
from statex.utils.locale_profile import EN_US, LocaleProfile

# Month names as they appear on English and German statements
MONTHS = {
    "jan": 1, "january": 1, "januar": 1, "jän": 1, "jänner": 1,
    "feb": 2, "february": 2, "februar": 2,
    "mar": 3, "march": 3, "mär": 3, "märz": 3, "maerz": 3,
    "apr": 4, "april": 4,
    "may": 5, "mai": 5,
    "jun": 6, "june": 6, "juni": 6,
    "jul": 7, "july": 7, "juli": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10, "okt": 10, "oktober": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12, "dez": 12, "dezember": 12,
}

_TOKEN_SPLIT = re.compile(r"[\s./,-]+")
_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def month_number(name: str, token: Optional[str] = None) -> int:
    """Look up a month name or abbreviation ("Sep", "Sept.", "März").

    token is the full date being parsed, reported in the error.
    """
    key = name.strip().rstrip(".").lower()
    if key not in MONTHS:
        raise MalformedDateError(token or name, f"unknown month name '{name}'")
    return MONTHS[key]


def _year(token: str, original: str) -> int:
    if not token.isdigit() or len(token) not in (2, 4):
        raise MalformedDateError(original, f"invalid year '{token}'")
    year = int(token)
    return 2000 + year if len(token) == 2 else year


def as_date(token: str, profile: LocaleProfile = EN_US) -> date:
    """Parse a statement date.

    Dates that spell out the month ("16 Sep 2021", "Sep 16, 2021") are
    resolved through the fixed month table; the remaining day and year keep
    the order of the profile. Purely numeric dates ("09/16/2021",
    "16.09.2021", "2021-09-16") follow the profile's date order.

    Raises:
        MalformedDateError: If the token is not a valid date
    """
    if token is None or not token.strip():
        raise MalformedDateError(token or "")
    text = token.strip()

    if any(ch.isalpha() for ch in text):
        parts = [part for part in _TOKEN_SPLIT.split(text) if part]
        names = [part for part in parts if not part.isdigit()]
        numbers = [part for part in parts if part.isdigit()]
        if len(names) != 1 or len(numbers) != 2:
            raise MalformedDateError(token)
        month = month_number(names[0], token)
        order = [c for c in profile.date_order if c != "M"]
        if len(numbers[0]) == 4:
            order = ["Y", "D"]
        values = dict(zip(order, numbers))
        day, year = values["D"], _year(values["Y"], token)
        try:
            return date(year, month, int(day))
        except ValueError as e:
            raise MalformedDateError(token, str(e)) from None

    # ISO style dates lead with a four digit year whatever the profile says
    year_first = len(re.split(r"\D+", text)[0]) == 4 or profile.date_order.startswith("Y")
    try:
        return date_parser.parse(
            text,
            dayfirst=profile.date_order.startswith("D") and not year_first,
            yearfirst=year_first,
        ).date()
    except (ValueError, OverflowError) as e:
        raise MalformedDateError(token, str(e)) from None


def as_time(token: str) -> time:
    """Parse "HH:MM" or "HH:MM:SS"."""
    match = _TIME.match(token.strip()) if token else None
    if match is None:
        raise MalformedDateError(token or "", "invalid time")
    hour, minute, second = match.groups()
    try:
        return time(int(hour), int(minute), int(second or 0))
    except ValueError as e:
        raise MalformedDateError(token, str(e)) from None


def as_datetime(
    date_token: str, time_token: Optional[str] = None, profile: LocaleProfile = EN_US
) -> datetime:
    """Combine a date token and an optional time token (midnight if absent)."""
    day = as_date(date_token, profile)
    if time_token is None:
        return datetime.combine(day, time.min)
    return datetime.combine(day, as_time(time_token))


def parse_date(date_str: str) -> date:
    """Parse a date given on the command line.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative forms "today", "yesterday", "this month", "last month",
    "this year" and "last year".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
