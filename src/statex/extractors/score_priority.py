"""Score Priority Corp. / Just2Trade US account statements.

Score Priority is a US based broker; all amounts and securities are in USD.
The CUSIP printed on the statement is stored as WKN. Dividends are reported
gross, withholding taxes appear on a separate line.

Statement lines look like

    Date | Effective Description | CUSIP | Type of Activity | Quantity Market Price | Net Settlement Amount
    Sep 15 Vanguard Index Fds 922908363 Buy 4 409.61 (1,638.44)
    S P 500 Etf Shs

and carry only month and day. The year comes from the statement period.
"""

from statex.domain.context import Context
from statex.domain.entities import (
    AccountTransaction,
    AccountTransactionType,
    BuySellEntry,
    Money,
    PortfolioTransaction,
    PortfolioTransactionType,
)
from statex.domain.errors import BuilderError, invalid_security_identifier
from statex.domain.parser import (
    Block,
    DocumentType,
    FieldMap,
    TransactionRule,
    context_rule,
    one_of,
    section,
)
from statex.domain.security import SecurityService
from statex.extractors.base import Extractor, trim

USD = "USD"


class ScorePriorityExtractor(Extractor):
    """Extractor for Score Priority / Just2Trade account statements."""

    label = "Score Priority Corp. / Just2Trade US"
    locale = "en_US"

    def __init__(self, securities: SecurityService):
        super().__init__(securities)
        self.add_bank_identifier("Score Priority")
        self.add_account_statement()

    def _date(self, fields: FieldMap):
        return self.as_date(f"{fields['day']} {fields['month']} {fields['year']}")

    def add_account_statement(self) -> None:
        document_type = DocumentType("ACCOUNT STATEMENT")

        # John Doe STATEMENT PERIOD: September 1 - 30, 2021
        document_type.add_context_rule(
            context_rule(r"^.* STATEMENT PERIOD: .*, (?P<year>[\d]{4})$")
        )

        # Sep 15 Vanguard Index Fds 922908363 Buy 4 409.61 (1,638.44)
        # S P 500 Etf Shs
        # Sep 02 Netflix Inc 64110L106 Sell 2 566.20 1,132.39
        # Com
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} .* [\w]{9} (Buy|Sell) [\.,\d]+ [\.,\d]+ (\()?[\.,\d]+(\))?$",
                TransactionRule(
                    sections=(
                        section(
                            r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) (?P<name>.*) (?P<wkn>[\w]{9}) "
                            r"(?P<type>(Buy|Sell)) (?P<shares>[\.,\d]+) [\.,\d]+ (\()?(?P<amount>[\.,\d]+)(\))?$",
                        ),
                        section(r"(?P<name_continued>.*)", optional=True),
                    ),
                    builder=self.build_buy_sell,
                    context_keys=("year",),
                ),
                name="buy/sell",
            )
        )

        # Sep 16 Barrick Gold Co             14 067901108 Dividend 1.97
        #
        # Sep 17 Barrick Gold Co             14 067901108 Dividend 1.26
        # Sep 17 For Sec Withhold: Div   .25000 067901108 Foreign Withholding (0.31)
        #
        # Sep 15 Tyson Foods Inc              6 902494103 Qualified Dividend 2.67
        # Sep 15 Nra Withhold: Dividend 902494103 NRA Withhold (0.80)
        dividend_line = (
            r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) (?P<name>.*) (?P<shares>[\.,\d]+) "
            r"(?P<wkn>(?!Qualified).{9}) (Qualified )?Dividend (?P<amount>[\.,\d]+)$"
        )
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} .* (?!Qualified).{9} (Qualified )?Dividend [\.,\d]+$",
                TransactionRule(
                    sections=(
                        one_of(
                            section(
                                dividend_line,
                                r"^[\w]{3} [\d]{2} .* [\w]{9} (NRA Withhold|Foreign Withholding) \((?P<tax>[\.,\d]+)\)$",
                                name="dividend with withholding tax",
                            ),
                            section(dividend_line, name="dividend"),
                        ),
                    ),
                    builder=self.build_dividend,
                    context_keys=("year",),
                ),
                name="dividend",
            )
        )

        # Nov 05 2seventy Bio Inc 901384107 Security Journal 5
        # Common Stock
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} .* [\w]{9} Security Journal [\.,\d]+$",
                TransactionRule(
                    sections=(
                        section(
                            r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) (?P<name>.*) (?P<wkn>[\w]{9}) Security Journal (?P<shares>[\.,\d]+)$",
                        ),
                        section(r"(?P<name_continued>.*)", optional=True),
                    ),
                    builder=self.build_delivery_inbound,
                    context_keys=("year",),
                ),
                name="security journal",
            )
        )

        # Nov 05 Ca Fee_spinoff_blue Tsvt 09609 Journal (30.00)
        # Nov 15 Ca Fee_spinoff_o Onl 756109104 Journal (30.00)
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} Ca Fee_spinoff.* Journal \([\.,\d]+\)$",
                TransactionRule(
                    sections=(
                        section(
                            r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) Ca Fee_spinoff.* (?P<name>.*) (?P<wkn>.*) Journal \((?P<amount>[\.,\d]+)\)$",
                        ),
                    ),
                    builder=self.build_fee,
                    context_keys=("year",),
                ),
                name="spin-off fee",
            )
        )

        # Jun 23 Cil Allocation 58933Y105 Journal 29.98
        #  Merck & Co Inc New
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} .* Allocation [\w]{9} Journal [\.,\d]+$",
                TransactionRule(
                    sections=(
                        section(
                            r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) .* Allocation (?P<wkn>[\w]{9}) Journal (?P<amount>[\.,\d]+)$",
                            r"^(?P<name>.*)$",
                        ),
                    ),
                    builder=self.build_cash_allocation,
                    context_keys=("year",),
                ),
                name="cash allocation",
            )
        )

        # Dec 29 Incoming Wire Abccdd Doe Journal 71,000.00
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} Incoming Wire .* [\.,\d]+$",
                TransactionRule(
                    sections=(
                        section(r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) Incoming Wire .* (?P<amount>[\.,\d]+)$"),
                    ),
                    builder=self.build_cash_movement(AccountTransactionType.DEPOSIT),
                    context_keys=("year",),
                ),
                name="deposit",
            )
        )

        # Dec 31 .05000% 3 Days,Bal=   $71000 Credit Interest 0.30
        document_type.add_block(
            Block(
                r"^[\w]{3} [\d]{2} .* Credit Interest [\.,\d]+$",
                TransactionRule(
                    sections=(
                        section(r"^(?P<month>[\w]{3}) (?P<day>[\d]{2}) .* Credit Interest (?P<amount>[\.,\d]+)$"),
                    ),
                    builder=self.build_cash_movement(AccountTransactionType.INTEREST),
                    context_keys=("year",),
                ),
                name="interest",
            )
        )

        self.add_document_type(document_type)

    def build_buy_sell(self, fields: FieldMap, context: Context) -> BuySellEntry:
        if fields["type"] == "Sell":
            transaction_type = PortfolioTransactionType.SELL
        else:
            transaction_type = PortfolioTransactionType.BUY

        return BuySellEntry(
            type=transaction_type,
            date_time=self._date(fields),
            security=self.get_or_create_security(fields, USD),
            shares=self.as_shares(fields["shares"]),
            amount=self.as_amount(fields["amount"]),
            currency_code=USD,
        )

    def build_dividend(self, fields: FieldMap, context: Context) -> AccountTransaction:
        amount = self.as_amount(fields["amount"])
        units = ()
        if "tax" in fields:
            tax = Money(USD, self.as_amount(fields["tax"]))
            amount -= tax.amount
            unit = self.tax_unit(tax, USD, context)
            if unit is not None:
                units = (unit,)

        return AccountTransaction(
            type=AccountTransactionType.DIVIDENDS,
            date_time=self._date(fields),
            amount=amount,
            currency_code=USD,
            security=self.get_or_create_security(fields, USD),
            shares=self.as_shares(fields["shares"]),
            units=units,
        )

    def build_delivery_inbound(self, fields: FieldMap, context: Context) -> PortfolioTransaction:
        return PortfolioTransaction(
            type=PortfolioTransactionType.DELIVERY_INBOUND,
            date_time=self._date(fields),
            security=self.get_or_create_security(fields, USD),
            shares=self.as_shares(fields["shares"]),
            amount=0,
            currency_code=USD,
        )

    def build_fee(self, fields: FieldMap, context: Context) -> AccountTransaction:
        transaction = AccountTransaction(
            type=AccountTransactionType.FEES,
            date_time=self._date(fields),
            amount=self.as_amount(fields["amount"]),
            currency_code=USD,
        )

        # A CUSIP always has 9 characters; statements sometimes print a truncated one
        wkn = trim(fields["wkn"]) or ""
        if len(wkn) < 9:
            raise BuilderError(invalid_security_identifier(trim(fields["name"]) or ""), subject=transaction)

        return AccountTransaction(
            type=transaction.type,
            date_time=transaction.date_time,
            amount=transaction.amount,
            currency_code=USD,
            security=self.get_or_create_security(fields, USD),
        )

    def build_cash_allocation(self, fields: FieldMap, context: Context) -> AccountTransaction:
        return AccountTransaction(
            type=AccountTransactionType.DIVIDENDS,
            date_time=self._date(fields),
            amount=self.as_amount(fields["amount"]),
            currency_code=USD,
            security=self.get_or_create_security(fields, USD),
            shares=0,
        )

    def build_cash_movement(self, transaction_type: AccountTransactionType):
        """Return a builder for cash-only movements of the given type."""

        def build(fields: FieldMap, context: Context) -> AccountTransaction:
            return AccountTransaction(
                type=transaction_type,
                date_time=self._date(fields),
                amount=self.as_amount(fields["amount"]),
                currency_code=USD,
            )

        return build
