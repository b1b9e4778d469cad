"""Base class for institution specific statement extractors."""

import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from statex.domain.context import Context
from statex.domain.entities import Money, Security, SecurityIdentity, Unit, UnitType
from statex.domain.errors import BuilderError, ValidationError
from statex.domain.parser import DocumentType, FieldMap
from statex.domain.security import SecurityService
from statex.utils.amount_parser import as_amount, as_exchange_rate, as_shares
from statex.utils.date_parser import as_datetime
from statex.utils.locale_profile import LocaleProfile, get_locale_profile

_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def trim(value: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace; empty strings become None."""
    if value is None:
        return None
    value = " ".join(value.split())
    return value or None


class Extractor:
    """Bank identifiers, document types and coercion helpers of one institution.

    Subclasses set label and locale and register their document types in
    __init__. Builders use the helpers below so numbers and dates are read
    with the institution's locale profile.
    """

    label = ""
    locale = "en_US"

    def __init__(self, securities: SecurityService):
        self.securities = securities
        self.profile: LocaleProfile = get_locale_profile(self.locale)
        self.bank_identifiers: list[str] = []
        self.document_types: list[DocumentType] = []

    def add_bank_identifier(self, identifier: str) -> None:
        self.bank_identifiers.append(identifier)

    def add_document_type(self, document_type: DocumentType) -> None:
        self.document_types.append(document_type)

    def identifies(self, text: str) -> bool:
        """True if any bank identifier occurs in text (or none are declared)."""
        if not self.bank_identifiers:
            return True
        return any(identifier in text for identifier in self.bank_identifiers)

    def as_amount(self, value: str) -> int:
        return as_amount(value, self.profile)

    def as_shares(self, value: str) -> int:
        return as_shares(value, self.profile)

    def as_exchange_rate(self, value: str) -> Decimal:
        return as_exchange_rate(value, self.profile)

    def as_date(self, value: str, time: Optional[str] = None) -> datetime:
        return as_datetime(value, time, self.profile)

    def as_currency_code(self, value: Optional[str]) -> str:
        code = (value or "").strip().upper()
        if not _CURRENCY_CODE.match(code):
            raise ValidationError(f"Invalid currency code '{value}'")
        return code

    def get_or_create_security(self, fields: FieldMap, currency_code: str) -> Security:
        """Resolve the security described by the name/isin/wkn/ticker_symbol fields.

        A name spread over two lines is joined from name and name_continued.
        """
        name = trim(fields.get("name"))
        continued = trim(fields.get("name_continued"))
        if continued:
            name = f"{name} {continued}" if name else continued

        identity = SecurityIdentity(
            name=name,
            currency_code=currency_code,
            isin=trim(fields.get("isin")),
            wkn=trim(fields.get("wkn")),
            ticker_symbol=trim(fields.get("ticker_symbol")),
        )
        return self.securities.resolve(identity)

    def tax_unit(self, tax: Money, currency_code: str, context: Context) -> Optional[Unit]:
        """Return the TAX unit for tax withheld from a transaction in currency_code.

        Taxes in a foreign currency are converted with the document's
        exchange_rate (foreign units per transaction currency unit). Zero
        taxes yield no unit.

        Raises:
            BuilderError: If the tax is in a foreign currency and no rate is known
        """
        if tax.amount <= 0:
            return None
        if tax.currency_code == currency_code:
            return Unit(UnitType.TAX, tax)

        rate_value = context.get_optional("exchange_rate")
        if rate_value is None:
            raise BuilderError(
                f"Tax in {tax.currency_code} cannot be converted to {currency_code} without an exchange rate"
            )
        rate = self.as_exchange_rate(rate_value)
        converted = int((Decimal(tax.amount) / rate).quantize(Decimal(1), rounding=ROUND_HALF_UP))
        return Unit(UnitType.TAX, Money(currency_code, converted), forex=tax, exchange_rate=rate)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label!r})"
