"""Store factory functions."""

from pathlib import Path
from typing import Optional

from nexus.config import get_data_dir, get_database_url
from nexus.database.base import Store
from nexus.database.local_store import LocalStore
from nexus.database.sqlalchemy_db import SQLAlchemyStore
from nexus.logger import get_logger

logger = get_logger(__name__)


def create_store(database_url: Optional[str] = None, data_dir: Optional[str] = None) -> Store:
    """Create the store selected by configuration.

    Args:
        database_url: SQLAlchemy URL of the relational store. If None, checks
            NEXUS_DATABASE_URL; when that is unset too the local store is used.
        data_dir: Directory for the local store. If None, checks
            NEXUS_DATA_DIR, then defaults to ~/.nexus

    Returns:
        SQLAlchemyStore when a database URL is configured, LocalStore otherwise
    """
    if database_url is None:
        database_url = get_database_url()

    if database_url:
        logger.info("Using relational store")
        return SQLAlchemyStore(database_url)

    directory = Path(data_dir) if data_dir else get_data_dir()
    logger.info("Using local store at %s", directory)
    return LocalStore(directory)


def create_sqlite_store(database_path: str) -> SQLAlchemyStore:
    """Create a relational store on a SQLite file."""
    return SQLAlchemyStore(f"sqlite:///{database_path}")
