"""Mapper functions to convert between domain models and SQLAlchemy models."""

from statex.domain import entities as domain
from statex.database.models import Security as ORMSecurity


def security_to_domain(orm_security: ORMSecurity) -> domain.Security:
    """Convert SQLAlchemy Security model to domain Security entity."""
    return domain.Security(
        id=orm_security.id,
        name=orm_security.name,
        currency_code=orm_security.currency_code,
        isin=orm_security.isin,
        wkn=orm_security.wkn,
        ticker_symbol=orm_security.ticker_symbol,
        created_at=orm_security.created_at,
    )
