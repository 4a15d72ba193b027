"""Turns classified import rows into clients and transactions and stores them."""

import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Optional, Sequence

from nexus.database.base import Collection, Record, Store
from nexus.domain.activity_log import ImportLog
from nexus.domain.entities import (
    AppSettings,
    Client,
    DEFAULT_SETTINGS,
    Polarity,
    Transaction,
    TransactionKind,
)
from nexus.domain.import_record import ImportRecord, SemanticField
from nexus.utils.amount_parser import parse_amount
from nexus.utils.date_parser import try_parse_date

DEFAULT_CATEGORY = "Geral"
DEFAULT_ENTITY = "Geral"
DEFAULT_DESCRIPTION = "Imported transaction"

CENTS = Decimal("0.01")

# Namespace for content-derived transaction ids
TRANSACTION_NAMESPACE = uuid.UUID("6f1c2a8e-3b7d-4e5f-9a0b-1c2d3e4f5a6b")


class ImportKind(str, Enum):
    """What an import batch creates."""

    CLIENTS = "clients"
    TRANSACTIONS = "transactions"


@dataclass
class ImportResult:
    """Outcome of one import batch.

    ``new_categories`` and ``new_entities`` are values seen in the rows but
    missing from the settings; merging them is left to the caller.
    """

    kind: ImportKind
    created: int = 0
    warnings: list[str] = field(default_factory=list)
    new_categories: set[str] = field(default_factory=set)
    new_entities: set[str] = field(default_factory=set)
    records: list[Record] = field(default_factory=list)


def resolve_kind(record: ImportRecord, amount: Decimal, polarity: Polarity) -> TransactionKind:
    """Decide income vs expense for one row.

    Priority: a row-level polarity flag, then a negative amount, then the
    operator's hint, then income.
    """
    if record.force_expense and not record.force_income:
        return TransactionKind.EXPENSE
    if record.force_income and not record.force_expense:
        return TransactionKind.INCOME
    if amount < 0:
        return TransactionKind.EXPENSE
    if polarity is Polarity.FORCE_EXPENSE:
        return TransactionKind.EXPENSE
    return TransactionKind.INCOME


class ImportExecutor:
    """Validates rows, builds entities and bulk-upserts them in one batch."""

    def __init__(
        self,
        store: Store,
        log: ImportLog,
        settings: AppSettings = DEFAULT_SETTINGS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize import executor.

        Args:
            store: Store receiving the batch
            log: Activity log of the running import
            settings: Settings snapshot used for category/entity lookups
            clock: Source of creation timestamps
        """
        self.store = store
        self.log = log
        self.settings = settings
        self.clock = clock

    def import_records(
        self,
        records: Sequence[ImportRecord],
        kind: ImportKind,
        polarity: Polarity = Polarity.AUTO,
        attachment_ids: Sequence[str] = (),
    ) -> ImportResult:
        """Import a batch of rows.

        Args:
            records: Rows from the delimited parser or the AI extraction
            kind: Whether the rows are clients or transactions
            polarity: Operator hint for transactions without a clearer signal
            attachment_ids: Stored files to attach to every transaction

        Returns:
            ImportResult

        Raises:
            PersistenceError: If the store rejects the batch; nothing from the
                batch is reported as created
        """
        result = ImportResult(kind=kind)
        if kind is ImportKind.CLIENTS:
            entities: list[Record] = self._build_clients(records, result)
            collection = Collection.CLIENTS
        else:
            entities = self._build_transactions(records, result, polarity, tuple(attachment_ids))
            collection = Collection.TRANSACTIONS

        if entities:
            self.log.info(f"Saving {len(entities)} {kind.value}...")
            self.store.bulk_upsert(collection, entities)

        result.created = len(entities)
        result.records = entities
        self.log.success(
            f"Imported {result.created} {kind.value}; {len(result.warnings)} row(s) skipped"
        )
        return result

    def _warn(self, result: ImportResult, message: str) -> None:
        result.warnings.append(message)
        self.log.warning(message)

    def _build_clients(self, records: Sequence[ImportRecord], result: ImportResult) -> list[Record]:
        clients: list[Record] = []
        for record in records:
            name = record.get(SemanticField.NAME, "")
            tax_id = record.get(SemanticField.TAX_ID, "")
            if not name and not tax_id:
                self._warn(result, f"Row {record.row_number}: skipped client without name or tax id")
                continue

            client = Client(
                id=str(uuid.uuid4()),
                name=name,
                tax_id=tax_id,
                phone=record.get(SemanticField.PHONE, ""),
                email=record.get(SemanticField.EMAIL, ""),
                created_at=self.clock(),
            )
            clients.append(client)
            self.log.success(f"Row {record.row_number}: client '{name or tax_id}'")
        return clients

    def _build_transactions(
        self,
        records: Sequence[ImportRecord],
        result: ImportResult,
        polarity: Polarity,
        attachment_ids: tuple[str, ...],
    ) -> list[Record]:
        transactions: list[Record] = []
        seen: Counter[str] = Counter()
        for record in records:
            raw_amount = record.get(SemanticField.AMOUNT, "")
            amount = parse_amount(raw_amount)
            if amount == 0:
                self._warn(
                    result,
                    f"Row {record.row_number}: skipped transaction with zero or invalid amount "
                    f"'{raw_amount}'",
                )
                continue

            kind = resolve_kind(record, amount, polarity)
            txn_date = self._resolve_date(record)
            description = record.get(SemanticField.DESCRIPTION, DEFAULT_DESCRIPTION)
            category = self._resolve_category(record, result)
            entity = self._resolve_entity(record, result)
            account = record.get(SemanticField.ACCOUNT)
            code = record.get(SemanticField.CODE)
            value = abs(amount).quantize(CENTS, rounding=ROUND_HALF_UP)

            fingerprint = "|".join(
                [kind.value, txn_date.isoformat(), description, str(value), entity, category,
                 account or "", code or ""]
            )
            occurrence = seen[fingerprint]
            seen[fingerprint] += 1

            transaction = Transaction(
                id=str(uuid.uuid5(TRANSACTION_NAMESPACE, f"{fingerprint}#{occurrence}")),
                kind=kind,
                description=description,
                amount=value,
                date=txn_date,
                entity=entity,
                category=category,
                account=account,
                supplier=record.get(SemanticField.NAME) if kind is TransactionKind.EXPENSE else None,
                attachment_ids=attachment_ids,
                code=code,
            )
            transactions.append(transaction)
            self.log.success(
                f"Row {record.row_number}: {kind.value} {value} on {txn_date.isoformat()} ({description})"
            )
        return transactions

    def _resolve_date(self, record: ImportRecord) -> date:
        raw_date = record.get(SemanticField.DATE)
        parsed: Optional[date] = try_parse_date(raw_date)
        if parsed is not None:
            return parsed
        today = self.clock().date()
        if raw_date:
            self.log.info(f"Row {record.row_number}: date '{raw_date}' not recognized, using {today}")
        return today

    def _resolve_category(self, record: ImportRecord, result: ImportResult) -> str:
        category = record.get(SemanticField.CATEGORY)
        if category is None:
            return DEFAULT_CATEGORY
        if category not in self.settings.categories and category not in result.new_categories:
            result.new_categories.add(category)
            self.log.new(f"New category found: '{category}'")
        return category

    def _resolve_entity(self, record: ImportRecord, result: ImportResult) -> str:
        entity = record.get(SemanticField.ENTITY)
        if entity is None:
            return self.settings.entities[0] if self.settings.entities else DEFAULT_ENTITY
        if entity not in self.settings.entities and entity not in result.new_entities:
            result.new_entities.add(entity)
            self.log.new(f"New entity found: '{entity}'")
        return entity
