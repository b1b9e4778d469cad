"""Tests for the shared extractor helpers."""

import pytest
from datetime import datetime
from decimal import Decimal

from statex.domain.context import Context
from statex.domain.entities import Money, UnitType
from statex.domain.errors import BuilderError, MalformedNumberError, ValidationError
from statex.extractors.base import Extractor, trim


class GermanExtractor(Extractor):
    label = "Beispielbank"
    locale = "de_DE"


@pytest.fixture
def extractor(security_service):
    return GermanExtractor(security_service)


def test_trim():
    """Test whitespace runs collapse and empty values become None."""
    assert trim("  Barrick   Gold Co  ") == "Barrick Gold Co"
    assert trim("   ") is None
    assert trim(None) is None


def test_locale_bound_coercion(extractor):
    """Test helpers read numbers and dates in the extractor's locale."""
    assert extractor.as_amount("1.234,56") == 123456
    assert extractor.as_shares("0,5") == 50_000_000
    assert extractor.as_exchange_rate("1,1825") == Decimal("1.1825")
    assert extractor.as_date("03.09.2021", "14:05") == datetime(2021, 9, 3, 14, 5)
    with pytest.raises(MalformedNumberError):
        extractor.as_amount("12a,50")


def test_as_currency_code(extractor):
    """Test currency codes are normalized and validated."""
    assert extractor.as_currency_code(" eur ") == "EUR"
    with pytest.raises(ValidationError):
        extractor.as_currency_code("Euro")
    with pytest.raises(ValidationError):
        extractor.as_currency_code(None)


def test_identifies(extractor):
    """Test bank identifiers are searched in the text."""
    assert extractor.identifies("any text")

    extractor.add_bank_identifier("Beispielbank AG")

    assert extractor.identifies("Beispielbank AG\nDepotauszug")
    assert not extractor.identifies("Andere Bank")


def test_get_or_create_security_joins_name(extractor):
    """Test names continued on the next line are joined."""
    security = extractor.get_or_create_security(
        {"name": "Vanguard Index Fds ", "name_continued": " S P 500 Etf Shs", "wkn": "922908363"},
        "USD",
    )

    assert security.name == "Vanguard Index Fds S P 500 Etf Shs"
    assert security.wkn == "922908363"
    assert security.currency_code == "USD"


class TestTaxUnit:
    """Tests for Extractor.tax_unit."""

    def test_same_currency(self, extractor):
        """Test taxes in the transaction currency are kept as is."""
        unit = extractor.tax_unit(Money("EUR", 250), "EUR", Context())

        assert unit.type == UnitType.TAX
        assert unit.amount == Money("EUR", 250)
        assert unit.forex is None

    def test_zero_tax(self, extractor):
        """Test zero taxes yield no unit."""
        assert extractor.tax_unit(Money("EUR", 0), "EUR", Context()) is None

    def test_foreign_currency(self, extractor):
        """Test foreign taxes are converted with the document exchange rate."""
        context = Context({"exchange_rate": "1,1825"})

        unit = extractor.tax_unit(Money("USD", 1000), "EUR", context)

        assert unit.amount == Money("EUR", 846)
        assert unit.forex == Money("USD", 1000)
        assert unit.exchange_rate == Decimal("1.1825")

    def test_foreign_currency_without_rate(self, extractor):
        """Test foreign taxes without an exchange rate fail the builder."""
        with pytest.raises(BuilderError):
            extractor.tax_unit(Money("USD", 1000), "EUR", Context())
