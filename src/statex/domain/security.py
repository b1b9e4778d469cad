"""Security lookup-or-create service."""

import logging
import threading
from typing import Optional, TYPE_CHECKING

from statex.domain.entities import Security, SecurityIdentity
from statex.domain.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    # statex.database imports the domain entities
    from statex.database.base import Database

logger = logging.getLogger(__name__)


class SecurityService:
    """Resolves identity fields read from statements to stored securities.

    Lookups go by ISIN, then WKN/CUSIP, then ticker symbol. Only identities
    without any identifier are looked up by name. Unknown securities are
    created. Resolving the same identity twice returns the same security.
    """

    def __init__(self, db: "Database"):
        """Initialize security service.

        Args:
            db: Database instance
        """
        self.db = db
        self._cache: dict[SecurityIdentity, Security] = {}
        self._lock = threading.Lock()

    def resolve(self, identity: SecurityIdentity) -> Security:
        """Return the security for identity, creating it if needed.

        Raises:
            ValidationError: If the identity has neither identifier nor name
        """
        if not (identity.isin or identity.wkn or identity.ticker_symbol or identity.name):
            raise ValidationError("Cannot resolve a security without name or identifier")

        with self._lock:
            cached = self._cache.get(identity)
            if cached is not None:
                return cached

            security = self._lookup(identity)
            if security is None:
                security_id = self.db.create_security(
                    name=identity.name,
                    currency_code=identity.currency_code,
                    isin=identity.isin,
                    wkn=identity.wkn,
                    ticker_symbol=identity.ticker_symbol,
                )
                security = self.db.get_security(security_id)
                logger.info("Created security %s (%s)", identity.name, identity.isin or identity.wkn or identity.ticker_symbol)

            self._cache[identity] = security
            return security

    def _lookup(self, identity: SecurityIdentity) -> Optional[Security]:
        if identity.isin:
            found = self.db.find_security(isin=identity.isin)
            if found is not None:
                return found
        if identity.wkn:
            found = self.db.find_security(wkn=identity.wkn)
            if found is not None:
                return found
        if identity.ticker_symbol:
            found = self.db.find_security(ticker_symbol=identity.ticker_symbol)
            if found is not None:
                return found
        if not (identity.isin or identity.wkn or identity.ticker_symbol):
            return self.db.find_security(name=identity.name)
        return None

    def get_security(self, security_id: int) -> Security:
        """Get security by ID.

        Raises:
            NotFoundError: If no such security exists
        """
        security = self.db.get_security(security_id)
        if security is None:
            raise NotFoundError(f"Security {security_id} not found")
        return security

    def list_securities(self) -> list[Security]:
        return self.db.list_securities()
