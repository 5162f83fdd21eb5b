"""SQLAlchemy models for smartledger storage."""

from datetime import datetime, UTC
from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class StoredSnapshot(Base):
    """One full ledger snapshot per storage key, as a JSON document."""

    __tablename__ = "snapshots"

    key = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)
    saved_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
