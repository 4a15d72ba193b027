"""SQLAlchemy models for the relational store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Numeric,
    JSON,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, default="")
    tax_id = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Transaction model. Amount is unsigned; ``kind`` carries polarity."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True)
    kind = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False)
    entity = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")
    account = Column(String, nullable=True)
    observation = Column(String, nullable=True)
    client_id = Column(String, nullable=True)
    supplier = Column(String, nullable=True)
    attachment_ids = Column(JSON, nullable=False, default=list)
    code = Column(String, nullable=True)


class StoredFile(Base):
    """File registry model."""

    __tablename__ = "files"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    mime_class = Column(String, nullable=False)
    size_label = Column(String, nullable=False, default="")
    date = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    associated_client = Column(String, nullable=True)
    associated_transaction_id = Column(String, nullable=True)


class Setting(Base):
    """Key/value settings row; values are JSON."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)


def create_engine_for(database_url: str) -> Engine:
    """Create an engine for a database URL."""
    return create_engine(database_url, echo=False)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create tables if needed and return a session factory."""
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
