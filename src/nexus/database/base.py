"""Abstract store interface."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence, Union

# Import entities directly to avoid circular import through domain/__init__.py
from nexus.domain.entities import AppSettings, Client, StoredFile, Transaction

Record = Union[Client, Transaction, StoredFile]


class Collection(str, Enum):
    """Record collections held by every store."""

    CLIENTS = "clients"
    TRANSACTIONS = "transactions"
    FILES = "files"


RECORD_TYPES: dict[Collection, type] = {
    Collection.CLIENTS: Client,
    Collection.TRANSACTIONS: Transaction,
    Collection.FILES: StoredFile,
}


class Store(ABC):
    """Persistence capability used by the import pipeline.

    Implementations must honor the same contract: upserts are keyed by
    record id, a failed bulk upsert leaves the store unchanged and raises
    ``PersistenceError``, and deleting an unknown id raises ``NotFoundError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create tables or files if they do not exist."""
        pass

    @abstractmethod
    def bulk_upsert(self, collection: Collection, records: Sequence[Record]) -> None:
        """Insert or replace many records in one batch."""
        pass

    @abstractmethod
    def upsert(self, collection: Collection, record: Record) -> None:
        """Insert or replace one record."""
        pass

    @abstractmethod
    def delete(self, collection: Collection, record_id: str) -> None:
        """Delete a record by id."""
        pass

    @abstractmethod
    def get_all(self, collection: Collection) -> list[Record]:
        """Return every record of a collection."""
        pass

    @abstractmethod
    def get_settings(self) -> AppSettings:
        """Return the stored settings, or defaults when none were saved."""
        pass

    @abstractmethod
    def save_settings(self, settings: AppSettings) -> None:
        """Replace the stored settings."""
        pass

    def get(self, collection: Collection, record_id: str) -> Record | None:
        """Return one record by id, or None."""
        for record in self.get_all(collection):
            if record.id == record_id:
                return record
        return None

    @staticmethod
    def check_records(collection: Collection, records: Sequence[Record]) -> None:
        expected = RECORD_TYPES[collection]
        for record in records:
            if not isinstance(record, expected):
                raise TypeError(
                    f"{collection.value} expects {expected.__name__}, got {type(record).__name__}"
                )
