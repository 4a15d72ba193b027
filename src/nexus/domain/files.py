"""File registry domain service."""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from nexus.database.base import Collection, Store
from nexus.domain.entities import MimeClass, StoredFile
from nexus.domain.errors import NotFoundError, ValidationError, record_not_found
from nexus.utils.text import format_size


class FileService:
    """Service for the stored-file registry."""

    def __init__(self, store: Store):
        """Initialize file service.

        Args:
            store: Store instance
        """
        self.store = store

    def register_file(
        self,
        name: str,
        size_bytes: int,
        media_type: Optional[str] = None,
        associated_client: Optional[str] = None,
    ) -> StoredFile:
        """Add a file entry to the registry.

        Raises:
            ValidationError: If the name is empty
        """
        name = Path(name or "").name.strip()
        if not name:
            raise ValidationError("File name cannot be empty")
        stored_file = StoredFile(
            id=str(uuid.uuid4()),
            name=name,
            mime_class=MimeClass.from_media_type(media_type),
            size_label=format_size(size_bytes),
            date=datetime.now(),
            associated_client=associated_client or None,
        )
        self.store.upsert(Collection.FILES, stored_file)
        return stored_file

    def list_files(self, mime_class: Optional[MimeClass] = None) -> list[StoredFile]:
        files = self.store.get_all(Collection.FILES)
        if mime_class is not None:
            files = [stored for stored in files if stored.mime_class is mime_class]
        return sorted(files, key=lambda stored: stored.date, reverse=True)

    def delete_file(self, file_id: str) -> None:
        """Delete a registry entry.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        if self.store.get(Collection.FILES, file_id) is None:
            raise NotFoundError(record_not_found(Collection.FILES.value, file_id))
        self.store.delete(Collection.FILES, file_id)
