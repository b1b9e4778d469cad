"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

from statex.domain.errors import MalformedNumberError
from statex.utils.locale_profile import EN_US, LocaleProfile

AMOUNT_DIGITS = 2
AMOUNT_FACTOR = 10**AMOUNT_DIGITS

SHARE_DIGITS = 8
SHARE_FACTOR = 10**SHARE_DIGITS

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")
_PLAIN_NUMBER = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def _grouped_integer(separator: str) -> re.Pattern:
    return re.compile(r"\d{1,3}(?:" + re.escape(separator) + r"\d{3})+")


def parse_number(token: str, profile: LocaleProfile = EN_US) -> Decimal:
    """Parse a locale formatted number into a Decimal.

    Handles:
    - "1,234.56" (grouping and decimal separators of the profile)
    - "$1,234.56" (currency symbols are ignored)
    - "-123.45", "+123.45" and "123.45-" (explicit signs)
    - "(123.45)" (negative in parentheses)

    Args:
        token: Raw token captured from a statement line
        profile: Locale profile describing the separators

    Returns:
        Decimal value

    Raises:
        MalformedNumberError: If the token is not a number in this profile
    """
    if token is None or not token.strip():
        raise MalformedNumberError(token or "")

    text = token.strip()
    is_negative = False

    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1].strip()

    text = _CURRENCY_SYMBOLS.sub("", text).strip()

    if text.startswith(("-", "+")):
        is_negative = is_negative != (text[0] == "-")
        text = text[1:].strip()
    elif text.endswith("-"):
        is_negative = not is_negative
        text = text[:-1].strip()

    integer_part, separator, fraction = text.partition(profile.decimal_separator)
    if profile.grouping_separator in integer_part:
        # grouping is only valid between blocks of three integer digits
        if not _grouped_integer(profile.grouping_separator).fullmatch(integer_part):
            raise MalformedNumberError(token)
        integer_part = integer_part.replace(profile.grouping_separator, "")
    text = integer_part + separator + fraction

    if profile.decimal_separator != ".":
        if "." in text:
            raise MalformedNumberError(token)
        text = text.replace(profile.decimal_separator, ".")

    if not _PLAIN_NUMBER.match(text):
        raise MalformedNumberError(token)

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise MalformedNumberError(token) from None
    return -value if is_negative else value


def _to_fixed_point(value: Decimal, factor: int) -> int:
    return int((value * factor).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def as_amount(token: str, profile: LocaleProfile = EN_US) -> int:
    """Parse a monetary amount into minor currency units ("1,132.39" -> 113239)."""
    return _to_fixed_point(parse_number(token, profile), AMOUNT_FACTOR)


def as_shares(token: str, profile: LocaleProfile = EN_US) -> int:
    """Parse a share quantity into fixed point shares with 8 decimal digits."""
    return _to_fixed_point(parse_number(token, profile), SHARE_FACTOR)


def as_exchange_rate(token: str, profile: LocaleProfile = EN_US) -> Decimal:
    """Parse an exchange rate, keeping its full decimal precision."""
    return parse_number(token, profile)


def _format_fixed_point(value: int, digits: int, profile: LocaleProfile, trim: bool) -> str:
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**digits)
    fraction_str = str(fraction).rjust(digits, "0")
    if trim:
        fraction_str = fraction_str.rstrip("0")
    whole_str = f"{whole:,}".replace(",", profile.grouping_separator)
    if fraction_str:
        return f"{sign}{whole_str}{profile.decimal_separator}{fraction_str}"
    return f"{sign}{whole_str}"


def format_amount(value: int, profile: LocaleProfile = EN_US) -> str:
    """Render minor currency units in the given profile (113239 -> "1,132.39")."""
    return _format_fixed_point(value, AMOUNT_DIGITS, profile, trim=False)


def format_shares(value: int, profile: LocaleProfile = EN_US) -> str:
    """Render fixed point shares, dropping trailing zero decimals."""
    return _format_fixed_point(value, SHARE_DIGITS, profile, trim=True)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a US formatted amount string into a Decimal.

    Args:
        amount_str: Amount string, e.g. "$1,234.56" or "(123.45)"

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")
    return parse_number(amount_str, EN_US)
