"""Tests for the Score Priority account statement extractor."""

import pytest
from datetime import datetime

from statex.domain.entities import (
    AccountTransaction,
    AccountTransactionType,
    BuySellEntry,
    Money,
    PortfolioTransaction,
    PortfolioTransactionType,
    Unit,
    UnitType,
)
from statex.domain.errors import MissingContextError
from statex.utils.amount_parser import SHARE_FACTOR

HEADER = (
    "Score Priority Corp.\n"
    "ACCOUNT STATEMENT\n"
    "John Doe STATEMENT PERIOD: September 1 - 30, 2021\n"
)


def extract(extraction_service, body):
    return extraction_service.extract(HEADER + body).items


class TestFullStatement:
    """Tests against the sample statement in tests/fixtures."""

    def test_items(self, extraction_service, statement_text):
        """Test all blocks of the statement are found in block order."""
        result = extraction_service.extract(statement_text)

        assert result.extractor == "Score Priority Corp. / Just2Trade US"
        assert result.document_type == "ACCOUNT STATEMENT"
        assert [(item.block, item.line_number) for item in result.items] == [
            ("buy/sell", 6),
            ("buy/sell", 8),
            ("dividend", 10),
            ("dividend", 12),
            ("dividend", 14),
            ("security journal", 16),
            ("spin-off fee", 18),
            ("spin-off fee", 19),
            ("cash allocation", 20),
            ("deposit", 22),
            ("interest", 23),
        ]
        assert [item.line_number for item in result.failures] == [18]
        assert len(result.transactions) == 10

    def test_same_security_resolved_once(self, extraction_service, statement_text, security_service):
        """Test both Barrick dividends reference the same security."""
        items = extraction_service.extract(statement_text).items
        barrick = [item.subject.security for item in items if item.line_number in (12, 14)]

        assert barrick[0] == barrick[1]
        assert barrick[0].wkn == "067901108"
        assert barrick[0].name == "Barrick Gold Co"
        # Netflix, Vanguard, Tyson, Barrick, 2seventy, Onl, Merck
        assert len(security_service.list_securities()) == 7

    def test_extraction_is_deterministic(self, extraction_service, statement_text):
        """Test parsing the same document twice yields identical items."""
        first = extraction_service.extract(statement_text)
        second = extraction_service.extract(statement_text)

        assert first == second
        assert repr(first.items) == repr(second.items)


class TestBuySell:
    """Tests for buy and sell lines."""

    def test_buy(self, extraction_service):
        """Test a buy with parenthesized settlement amount."""
        items = extract(
            extraction_service,
            "Sep 15 Vanguard Index Fds 922908363 Buy 4 409.61 (1,638.44)\nS P 500 Etf Shs\n",
        )

        assert len(items) == 1
        entry = items[0].subject
        assert isinstance(entry, BuySellEntry)
        assert entry.type == PortfolioTransactionType.BUY
        assert entry.date_time == datetime(2021, 9, 15)
        assert entry.shares == 4 * SHARE_FACTOR
        assert entry.amount == 163844
        assert entry.currency_code == "USD"
        assert entry.security.wkn == "922908363"
        assert entry.security.name == "Vanguard Index Fds S P 500 Etf Shs"

    def test_sell(self, extraction_service):
        """Test a sell switches the transaction type."""
        items = extract(
            extraction_service,
            "Sep 02 Netflix Inc 64110L106 Sell 2 566.20 1,132.39\nCom\n",
        )

        entry = items[0].subject
        assert entry.type == PortfolioTransactionType.SELL
        assert entry.date_time == datetime(2021, 9, 2)
        assert entry.shares == 2 * SHARE_FACTOR
        assert entry.amount == 113239
        assert entry.security.name == "Netflix Inc Com"

    def test_sell_without_continuation_line(self, extraction_service):
        """Test a trade on the last line keeps the name from its own line."""
        items = extract(extraction_service, "Sep 02 Netflix Inc 64110L106 Sell 2 566.20 1,132.39")

        assert len(items) == 1
        assert not items[0].failed
        assert items[0].subject.security.name == "Netflix Inc"

    def test_consecutive_trades(self, extraction_service):
        """Test a trade directly followed by another keeps both trades apart."""
        items = extract(
            extraction_service,
            "Sep 02 Netflix Inc 64110L106 Sell 2 566.20 1,132.39\n"
            "Sep 15 Vanguard Index Fds 922908363 Buy 4 409.61 (1,638.44)\n"
            "S P 500 Etf Shs\n",
        )

        assert [item.line_number for item in items] == [4, 5]
        assert not any(item.failed for item in items)
        sell, buy = (item.subject for item in items)
        assert sell.type == PortfolioTransactionType.SELL
        assert sell.security.name == "Netflix Inc"
        assert buy.type == PortfolioTransactionType.BUY
        assert buy.amount == 163844
        assert buy.security.name == "Vanguard Index Fds S P 500 Etf Shs"


class TestDividend:
    """Tests for dividends with and without withholding tax."""

    def test_dividend_with_foreign_withholding(self, extraction_service):
        """Test the withholding line is netted and recorded as tax."""
        items = extract(
            extraction_service,
            "Sep 16 Barrick Gold Co             14 067901108 Dividend 1.97\n"
            "Sep 17 For Sec Withhold: Div   .25000 067901108 Foreign Withholding (0.31)\n",
        )

        assert len(items) == 1
        dividend = items[0].subject
        assert isinstance(dividend, AccountTransaction)
        assert dividend.type == AccountTransactionType.DIVIDENDS
        assert dividend.amount == 166
        assert dividend.units == (Unit(UnitType.TAX, Money("USD", 31)),)
        assert dividend.shares == 14 * SHARE_FACTOR
        assert dividend.date_time == datetime(2021, 9, 16)

    def test_dividend_without_withholding(self, extraction_service):
        """Test the plain dividend alternative when no tax line follows."""
        items = extract(
            extraction_service,
            "Sep 16 Barrick Gold Co             14 067901108 Dividend 1.97\n",
        )

        dividend = items[0].subject
        assert dividend.amount == 197
        assert dividend.units == ()

    def test_qualified_dividend_with_nra_withholding(self, extraction_service):
        """Test qualified dividends and NRA withholding."""
        items = extract(
            extraction_service,
            "Sep 15 Tyson Foods Inc              6 902494103 Qualified Dividend 2.67\n"
            "Sep 15 Nra Withhold: Dividend 902494103 NRA Withhold (0.80)\n",
        )

        dividend = items[0].subject
        assert dividend.amount == 187
        assert dividend.units[0].amount == Money("USD", 80)
        assert dividend.security.wkn == "902494103"
        assert dividend.security.name == "Tyson Foods Inc"

    def test_unknown_month(self, extraction_service):
        """Test a month name outside the month table fails the item."""
        items = extract(
            extraction_service,
            "Xyz 16 Barrick Gold Co             14 067901108 Dividend 1.97\n",
        )

        assert items[0].failed
        assert "Xyz" in items[0].failure_message


class TestOtherBlocks:
    """Tests for deliveries, fees and cash movements."""

    def test_security_journal_delivery(self, extraction_service):
        """Test inbound deliveries have shares but no amount."""
        items = extract(
            extraction_service,
            "Nov 05 2seventy Bio Inc 901384107 Security Journal 5\nCommon Stock\n",
        )

        delivery = items[0].subject
        assert isinstance(delivery, PortfolioTransaction)
        assert delivery.type == PortfolioTransactionType.DELIVERY_INBOUND
        assert delivery.shares == 5 * SHARE_FACTOR
        assert delivery.amount == 0
        assert delivery.date_time == datetime(2021, 11, 5)
        assert delivery.security.name == "2seventy Bio Inc Common Stock"

    def test_fee_with_invalid_cusip(self, extraction_service, security_service):
        """Test a short CUSIP fails the item without resolving a security."""
        items = extract(extraction_service, "Nov 05 Ca Fee_spinoff_blue Tsvt 09609 Journal (30.00)\n")

        assert len(items) == 1
        item = items[0]
        assert item.failed
        assert "Tsvt" in item.failure_message
        assert item.subject.type == AccountTransactionType.FEES
        assert item.subject.security is None
        assert item.subject.amount == 3000
        assert security_service.list_securities() == []

    def test_fee_with_cusip(self, extraction_service):
        """Test a complete spin-off fee."""
        items = extract(extraction_service, "Nov 15 Ca Fee_spinoff_o Onl 756109104 Journal (30.00)\n")

        fee = items[0].subject
        assert not items[0].failed
        assert fee.type == AccountTransactionType.FEES
        assert fee.amount == 3000
        assert fee.security.wkn == "756109104"
        assert fee.security.name == "Onl"

    def test_cash_allocation(self, extraction_service):
        """Test cash allocations are dividends without shares."""
        items = extract(
            extraction_service,
            "Jun 23 Cil Allocation 58933Y105 Journal 29.98\n Merck & Co Inc New\n",
        )

        allocation = items[0].subject
        assert allocation.type == AccountTransactionType.DIVIDENDS
        assert allocation.shares == 0
        assert allocation.amount == 2998
        assert allocation.security.name == "Merck & Co Inc New"
        assert allocation.security.wkn == "58933Y105"

    def test_deposit(self, extraction_service):
        """Test incoming wires are deposits."""
        items = extract(extraction_service, "Dec 29 Incoming Wire Abccdd Doe Journal 71,000.00\n")

        deposit = items[0].subject
        assert deposit.type == AccountTransactionType.DEPOSIT
        assert deposit.amount == 7100000
        assert deposit.security is None
        assert deposit.date_time == datetime(2021, 12, 29)

    def test_interest(self, extraction_service):
        """Test credit interest."""
        items = extract(
            extraction_service,
            "Dec 31 .05000% 3 Days,Bal=   $71000 Credit Interest 0.30\n",
        )

        interest = items[0].subject
        assert interest.type == AccountTransactionType.INTEREST
        assert interest.amount == 30

    def test_statement_without_period(self, extraction_service):
        """Test a statement without year is rejected as a whole."""
        with pytest.raises(MissingContextError):
            extraction_service.extract(
                "Score Priority Corp.\nACCOUNT STATEMENT\n"
                "Dec 31 .05000% 3 Days,Bal=   $71000 Credit Interest 0.30\n"
            )

    def test_no_activity_without_period(self, extraction_service):
        """Test the year is only required once a transaction line is found."""
        result = extraction_service.extract(
            "Score Priority Corp.\nACCOUNT STATEMENT\nNo activity this period\n"
        )

        assert result.items == ()

    def test_no_transactions(self, extraction_service):
        """Test a recognized statement without activity."""
        assert extract(extraction_service, "No activity this period\n") == ()
