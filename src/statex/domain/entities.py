"""Domain model entities for statex.

These are pure data classes representing statements and the transactions
read from them, independent of the database schema used for securities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class Document:
    """Plain text of one statement as ordered lines (line numbers start at 1)."""

    lines: tuple[str, ...]
    source: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, source: Optional[str] = None) -> "Document":
        return cls(tuple(line.rstrip() for line in text.splitlines()), source)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class Money:
    """Amount in minor currency units."""

    currency_code: str
    amount: int


class UnitType(Enum):
    GROSS_VALUE = "GROSS_VALUE"
    TAX = "TAX"
    FEE = "FEE"


@dataclass(frozen=True)
class Unit:
    """A tax, fee or gross value component of a transaction."""

    type: UnitType
    amount: Money
    forex: Optional[Money] = None
    exchange_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class SecurityIdentity:
    """Identity fields read from a statement, used to resolve a security."""

    name: Optional[str]
    currency_code: str
    isin: Optional[str] = None
    wkn: Optional[str] = None
    ticker_symbol: Optional[str] = None


@dataclass(frozen=True)
class Security:
    """Security (instrument) domain entity."""

    id: int
    name: Optional[str]
    currency_code: str
    isin: Optional[str] = None
    wkn: Optional[str] = None
    ticker_symbol: Optional[str] = None
    created_at: Optional[datetime] = None


class PortfolioTransactionType(Enum):
    BUY = "BUY"
    SELL = "SELL"
    DELIVERY_INBOUND = "DELIVERY_INBOUND"
    DELIVERY_OUTBOUND = "DELIVERY_OUTBOUND"


class AccountTransactionType(Enum):
    DEPOSIT = "DEPOSIT"
    REMOVAL = "REMOVAL"
    INTEREST = "INTEREST"
    INTEREST_CHARGE = "INTEREST_CHARGE"
    DIVIDENDS = "DIVIDENDS"
    FEES = "FEES"
    FEES_REFUND = "FEES_REFUND"
    TAXES = "TAXES"
    TAX_REFUND = "TAX_REFUND"


@dataclass(frozen=True)
class BuySellEntry:
    """Purchase or sale of a security settled against the cash account."""

    type: PortfolioTransactionType
    date_time: datetime
    security: Optional[Security]
    shares: int
    amount: int
    currency_code: str
    units: tuple[Unit, ...] = ()
    note: Optional[str] = None


@dataclass(frozen=True)
class AccountTransaction:
    """Cash movement: dividend, deposit, interest, fee, tax."""

    type: AccountTransactionType
    date_time: datetime
    amount: int
    currency_code: str
    security: Optional[Security] = None
    shares: int = 0
    units: tuple[Unit, ...] = ()
    note: Optional[str] = None


@dataclass(frozen=True)
class PortfolioTransaction:
    """Security movement without cash settlement (inbound/outbound delivery)."""

    type: PortfolioTransactionType
    date_time: datetime
    security: Optional[Security]
    shares: int
    amount: int
    currency_code: str
    units: tuple[Unit, ...] = ()
    note: Optional[str] = None


TransactionRecord = Union[BuySellEntry, AccountTransaction, PortfolioTransaction]


@dataclass(frozen=True)
class Item:
    """Result of one block match: a transaction, a failure, or both.

    When failure_message is set the item is failed; a subject attached to a
    failed item is incomplete and must not be imported as is.
    """

    subject: Optional[TransactionRecord]
    line_number: int
    block: str = ""
    failure_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.failure_message is not None


@dataclass(frozen=True)
class ExtractionResult:
    """All items read from one document, in discovery order."""

    extractor: str
    document_type: str
    items: tuple[Item, ...] = field(default_factory=tuple)
    source: Optional[str] = None

    @property
    def transactions(self) -> list[TransactionRecord]:
        return [item.subject for item in self.items if not item.failed and item.subject is not None]

    @property
    def failures(self) -> list[Item]:
        return [item for item in self.items if item.failed]
