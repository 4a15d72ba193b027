"""Local JSON-file implementation of the store.

Each collection is one JSON array in the data directory (``clients.json``,
``transactions.json``, ``files.json``) and settings live in
``settings.json``. Writes go to a temporary file that replaces the original,
so a failed write never leaves a half-written collection behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Sequence

from nexus.database.base import Collection, Record, Store
from nexus.database.mappers import (
    dict_to_record,
    dict_to_settings,
    record_to_dict,
    settings_to_dict,
)
from nexus.domain.entities import AppSettings, DEFAULT_SETTINGS
from nexus.domain.errors import NotFoundError, PersistenceError, record_not_found
from nexus.logger import get_logger

logger = get_logger(__name__)

SETTINGS_FILE = "settings.json"


class LocalStore(Store):
    """Store backed by JSON files in a local directory."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def _path(self, name: str) -> Path:
        return self.data_dir / name

    def _collection_path(self, collection: Collection) -> Path:
        return self._path(f"{collection.value}.json")

    def _read(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def _write(self, path: Path, data: Any) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def _load(self, collection: Collection) -> list[dict[str, Any]]:
        return self._read(self._collection_path(collection), [])

    def connect(self) -> None:
        """Nothing to connect; files are opened per call."""
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        """Create the data directory."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not create {self.data_dir}: {e}") from e

    def bulk_upsert(self, collection: Collection, records: Sequence[Record]) -> None:
        """Replace records with matching ids, append the rest, write once."""
        self.check_records(collection, records)
        if not records:
            return
        stored = self._load(collection)
        positions = {item["id"]: index for index, item in enumerate(stored)}
        for record in records:
            data = record_to_dict(record)
            if record.id in positions:
                stored[positions[record.id]] = data
            else:
                positions[record.id] = len(stored)
                stored.append(data)
        self._write(self._collection_path(collection), stored)
        logger.debug("Upserted %d record(s) into %s", len(records), collection.value)

    def upsert(self, collection: Collection, record: Record) -> None:
        self.bulk_upsert(collection, [record])

    def delete(self, collection: Collection, record_id: str) -> None:
        stored = self._load(collection)
        remaining = [item for item in stored if item["id"] != record_id]
        if len(remaining) == len(stored):
            raise NotFoundError(record_not_found(collection.value, record_id))
        self._write(self._collection_path(collection), remaining)

    def get_all(self, collection: Collection) -> list[Record]:
        stored = self._load(collection)
        try:
            return [dict_to_record(collection, item) for item in stored]
        except (KeyError, ValueError, ArithmeticError) as e:
            raise PersistenceError(f"Corrupt {collection.value} collection: {e}") from e

    def get_settings(self) -> AppSettings:
        data = self._read(self._path(SETTINGS_FILE), None)
        if not data:
            return DEFAULT_SETTINGS
        return dict_to_settings(data)

    def save_settings(self, settings: AppSettings) -> None:
        self._write(self._path(SETTINGS_FILE), settings_to_dict(settings))
