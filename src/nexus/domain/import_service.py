"""Import pipeline facade used by the CLI."""

import mimetypes
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from nexus.ai.client import GenerativeClient
from nexus.config import get_log_capacity
from nexus.database.base import Collection, Store
from nexus.domain.activity_log import ImportLog
from nexus.domain.delimited import decode_text, parse_delimited
from nexus.domain.entities import MimeClass, Polarity, StoredFile
from nexus.domain.errors import DomainError, ParseError, too_few_lines
from nexus.domain.extraction import ExtractionOrchestrator
from nexus.domain.import_executor import ImportExecutor, ImportKind, ImportResult
from nexus.domain.import_lock import ImportLock
from nexus.domain.settings import SettingsService
from nexus.logger import get_logger
from nexus.utils.text import format_size

logger = get_logger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def guess_media_type(path: Path) -> str:
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type or DEFAULT_MEDIA_TYPE


class ImportService:
    """Runs spreadsheet and document imports one at a time.

    Every import runs under the lock, streams progress into ``log`` and, on
    failure, appends a terminal ``error`` entry before re-raising. New
    categories and entities reported by the executor are merged into the
    settings after the batch is stored.
    """

    def __init__(
        self,
        store: Store,
        generative_client: Optional[GenerativeClient] = None,
        log: Optional[ImportLog] = None,
        lock: Optional[ImportLock] = None,
    ):
        """Initialize import service.

        Args:
            store: Store instance
            generative_client: Client for document imports; created on first
                use when not given
            log: Activity log; a fresh one sized by NEXUS_LOG_CAPACITY if None
            lock: Import lock, shared between services that must not overlap
        """
        self.store = store
        self.log = log if log is not None else ImportLog(capacity=get_log_capacity())
        self.lock = lock if lock is not None else ImportLock()
        self._generative_client = generative_client
        self.settings_service = SettingsService(store, self.log)

    @property
    def generative_client(self) -> GenerativeClient:
        if self._generative_client is None:
            self._generative_client = GenerativeClient()
        return self._generative_client

    def import_delimited(
        self,
        text: str,
        kind: ImportKind = ImportKind.TRANSACTIONS,
        polarity: Polarity = Polarity.AUTO,
    ) -> ImportResult:
        """Import clients or transactions from comma/semicolon-delimited text.

        Raises:
            BusyError: If another import is running
            ParseError: If the text has no header plus data row
            PersistenceError: If the store rejects the batch
        """
        with self.lock:
            try:
                return self._import_text(text, kind, polarity)
            except DomainError as e:
                self.log.error(f"Import failed: {e}")
                raise

    def import_csv_file(
        self,
        path: str | Path,
        kind: ImportKind = ImportKind.TRANSACTIONS,
        polarity: Polarity = Polarity.AUTO,
    ) -> ImportResult:
        """Read a delimited file and import it.

        UTF-8 with or without BOM is read directly; other encodings are
        detected.

        Raises:
            BusyError: If another import is running
            ParseError: If the file cannot be decoded or has no data row
            PersistenceError: If the store rejects the batch
        """
        path = Path(path)
        with self.lock:
            try:
                self.log.info(f"Reading '{path.name}'...")
                text = decode_text(path.read_bytes())
                return self._import_text(text, kind, polarity)
            except (DomainError, OSError) as e:
                self.log.error(f"Import failed: {e}")
                raise

    def import_document(
        self,
        path: str | Path,
        polarity: Polarity = Polarity.AUTO,
        media_type: Optional[str] = None,
    ) -> tuple[ImportResult, ImportResult]:
        """Extract clients and transactions from a document with the AI.

        The document is registered as a stored file and attached to every
        imported transaction.

        Returns:
            (client result, transaction result)

        Raises:
            BusyError: If another import is running
            GenerativeServiceError: If the AI call fails
            ExtractionFailure: If the AI output cannot be repaired
            PersistenceError: If the store rejects a batch
        """
        path = Path(path)
        media_type = media_type or guess_media_type(path)
        with self.lock:
            try:
                document = path.read_bytes()
                stored_file = self._register_file(path, media_type, len(document))
                settings = self.store.get_settings()

                orchestrator = ExtractionOrchestrator(self.generative_client, self.log)
                extraction = orchestrator.extract(
                    document, media_type, path.name, polarity=polarity, banks=settings.banks
                )

                executor = ImportExecutor(self.store, self.log, settings)
                clients = executor.import_records(extraction.clients, ImportKind.CLIENTS)
                transactions = executor.import_records(
                    extraction.transactions,
                    ImportKind.TRANSACTIONS,
                    polarity,
                    attachment_ids=(stored_file.id,),
                )
                self.settings_service.merge_enumerations(
                    transactions.new_categories, transactions.new_entities
                )
                return clients, transactions
            except DomainError as e:
                self.log.error(f"Document import failed: {e}")
                raise

    def convert_document(
        self,
        path: str | Path,
        output_path: str | Path,
        polarity: Polarity = Polarity.AUTO,
        media_type: Optional[str] = None,
    ) -> ImportResult:
        """Convert a document to the seven-column CSV, then import that CSV.

        The CSV is written to ``output_path`` before anything is imported and
        stays there whatever the import outcome.

        Raises:
            BusyError: If another import is running
            GenerativeServiceError: If the AI call fails
            ParseError: If the AI returned no usable CSV
            PersistenceError: If the store rejects the batch
        """
        path = Path(path)
        output_path = Path(output_path)
        media_type = media_type or guess_media_type(path)
        with self.lock:
            try:
                document = path.read_bytes()
                self._register_file(path, media_type, len(document))

                orchestrator = ExtractionOrchestrator(self.generative_client, self.log)
                csv_text = orchestrator.convert_to_csv(document, media_type, path.name, polarity)
                output_path.write_text(csv_text, encoding="utf-8")
                self.log.success(f"CSV saved to '{output_path}'")

                return self._import_text(csv_text, ImportKind.TRANSACTIONS, polarity)
            except DomainError as e:
                self.log.error(f"Conversion failed: {e}")
                raise

    def _import_text(self, text: str, kind: ImportKind, polarity: Polarity) -> ImportResult:
        table = parse_delimited(text)
        if table.is_empty:
            raise ParseError(too_few_lines())

        delimiter_name = "semicolon" if table.delimiter == ";" else "comma"
        self.log.info(
            f"Read {len(table.rows)} row(s) with {len(table.headers)} column(s) ({delimiter_name}-delimited)"
        )

        executor = ImportExecutor(self.store, self.log, self.store.get_settings())
        result = executor.import_records(table.rows, kind, polarity)
        if kind is ImportKind.TRANSACTIONS:
            self.settings_service.merge_enumerations(result.new_categories, result.new_entities)
        return result

    def _register_file(self, path: Path, media_type: str, size: int) -> StoredFile:
        stored_file = StoredFile(
            id=str(uuid.uuid4()),
            name=path.name,
            mime_class=MimeClass.from_media_type(media_type),
            size_label=format_size(size),
            date=datetime.now(),
        )
        self.store.upsert(Collection.FILES, stored_file)
        self.log.info(f"Registered file '{stored_file.name}' ({stored_file.size_label})")
        return stored_file
