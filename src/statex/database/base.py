"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from statex.domain.entities import Security


class Database(ABC):
    """Abstract database interface for the security store."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def create_security(
        self,
        name: Optional[str],
        currency_code: str,
        isin: Optional[str] = None,
        wkn: Optional[str] = None,
        ticker_symbol: Optional[str] = None,
    ) -> int:
        """Create a security. Returns security ID."""
        pass

    @abstractmethod
    def get_security(self, security_id: int) -> Optional[Security]:
        """Get security by ID."""
        pass

    @abstractmethod
    def find_security(
        self,
        isin: Optional[str] = None,
        wkn: Optional[str] = None,
        ticker_symbol: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[Security]:
        """Find the first security matching all given (non-None) fields."""
        pass

    @abstractmethod
    def list_securities(self) -> list[Security]:
        """List all securities ordered by name."""
        pass
