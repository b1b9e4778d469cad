"""SQLAlchemy models for the statex database."""

from datetime import datetime, UTC
from sqlalchemy import Column, Integer, String, DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Security(Base):
    """Security (instrument) master data model."""

    __tablename__ = "securities"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=True)
    currency_code = Column(String(3), nullable=False)
    isin = Column(String(12), nullable=True, index=True)
    wkn = Column(String, nullable=True, index=True)
    ticker_symbol = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are shared by extraction worker threads behind a lock
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
