"""Locale profiles used when coercing statement tokens."""

from dataclasses import dataclass

from statex.domain.errors import ValidationError


@dataclass(frozen=True)
class LocaleProfile:
    """Number and date conventions of a statement.

    date_order is a permutation of "D", "M" and "Y" describing the order of
    the components in numeric dates (e.g. "MDY" for 09/15/2021).
    """

    name: str
    decimal_separator: str
    grouping_separator: str
    date_order: str = "DMY"


LOCALE_PROFILES = {
    "en_US": LocaleProfile("en_US", ".", ",", "MDY"),
    "en_GB": LocaleProfile("en_GB", ".", ",", "DMY"),
    "de_DE": LocaleProfile("de_DE", ",", ".", "DMY"),
    "de_CH": LocaleProfile("de_CH", ".", "'", "DMY"),
    "fr_FR": LocaleProfile("fr_FR", ",", " ", "DMY"),
}

EN_US = LOCALE_PROFILES["en_US"]


def get_locale_profile(name: str) -> LocaleProfile:
    """Return the profile registered under name.

    Raises:
        ValidationError: If no profile with that name exists
    """
    try:
        return LOCALE_PROFILES[name]
    except KeyError:
        raise ValidationError(
            f"Unknown locale profile '{name}'. Supported profiles: {', '.join(LOCALE_PROFILES)}"
        ) from None
