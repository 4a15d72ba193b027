"""Tests for the import merge executor."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from nexus.database.base import Collection
from nexus.database.local_store import LocalStore
from nexus.domain.entities import DEFAULT_SETTINGS, Polarity, Severity, TransactionKind
from nexus.domain.errors import PersistenceError
from nexus.domain.import_executor import ImportExecutor, ImportKind, resolve_kind
from nexus.domain.import_record import ImportRecord, SemanticField

FIXED_NOW = datetime(2024, 5, 1, 12, 0)


def transaction_record(row_number: int = 2, **fields) -> ImportRecord:
    force_income = fields.pop("force_income", False)
    force_expense = fields.pop("force_expense", False)
    defaults = {
        SemanticField.DATE: "05/03/2024",
        SemanticField.DESCRIPTION: "Aluguel sala",
        SemanticField.AMOUNT: "150,00",
    }
    defaults.update({SemanticField(key): value for key, value in fields.items()})
    return ImportRecord(
        row_number=row_number,
        fields=defaults,
        force_income=force_income,
        force_expense=force_expense,
    )


@pytest.fixture
def executor(store, import_log):
    return ImportExecutor(store, import_log, DEFAULT_SETTINGS, clock=lambda: FIXED_NOW)


def test_clients_are_created(executor, store):
    records = [
        ImportRecord(2, fields={SemanticField.NAME: "Ana Souza", SemanticField.EMAIL: "ana@example.com"}),
        ImportRecord(3, fields={SemanticField.TAX_ID: "987.654.321-00"}),
    ]

    result = executor.import_records(records, ImportKind.CLIENTS)

    assert result.created == 2
    assert result.warnings == []
    clients = store.get_all(Collection.CLIENTS)
    assert sorted(client.name for client in clients) == ["", "Ana Souza"]
    assert all(client.created_at == FIXED_NOW for client in clients)


def test_client_without_name_or_tax_id_is_skipped(executor, import_log):
    records = [ImportRecord(4, fields={SemanticField.EMAIL: "ghost@example.com"})]

    result = executor.import_records(records, ImportKind.CLIENTS)

    assert result.created == 0
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Row 4:")
    assert len(import_log.by_severity(Severity.WARNING)) == 1


def test_zero_amount_is_dropped_with_one_warning(executor, store, import_log):
    records = [transaction_record(2, amount="0,00"), transaction_record(3, amount="R$ 10,00")]

    result = executor.import_records(records, ImportKind.TRANSACTIONS)

    assert result.created == 1
    warnings = import_log.by_severity(Severity.WARNING)
    assert len(warnings) == 1
    assert "Row 2" in warnings[0].message
    assert len(store.get_all(Collection.TRANSACTIONS)) == 1


def test_amount_is_absolute_and_rounded_to_cents(executor, store):
    result = executor.import_records(
        [transaction_record(amount="-1.234,565")], ImportKind.TRANSACTIONS
    )

    transaction = result.records[0]
    assert transaction.kind is TransactionKind.EXPENSE
    assert transaction.amount == Decimal("1234.57")
    assert store.get_all(Collection.TRANSACTIONS)[0].amount == Decimal("1234.57")


def test_defaults_for_missing_fields(executor):
    record = ImportRecord(2, fields={SemanticField.AMOUNT: "50"})

    transaction = executor.import_records([record], ImportKind.TRANSACTIONS).records[0]

    assert transaction.entity == DEFAULT_SETTINGS.entities[0]
    assert transaction.category == "Geral"
    assert transaction.description == "Imported transaction"
    assert transaction.date == FIXED_NOW.date()


def test_unparseable_date_falls_back_to_today_with_info(executor, import_log):
    transaction = executor.import_records(
        [transaction_record(7, date="amanhã cedo")], ImportKind.TRANSACTIONS
    ).records[0]

    assert transaction.date == date(2024, 5, 1)
    assert any(
        "Row 7" in entry.message and "amanhã cedo" in entry.message
        for entry in import_log.by_severity(Severity.INFO)
    )
    assert import_log.by_severity(Severity.WARNING) == []


def test_new_categories_and_entities_are_reported_not_saved(executor, store):
    records = [
        transaction_record(2, category="Marketing", entity="CMG"),
        transaction_record(3, category="marketing", entity="Filial Sul"),
        transaction_record(4, category="Aluguel"),
    ]

    result = executor.import_records(records, ImportKind.TRANSACTIONS)

    assert result.new_categories == {"marketing", "Aluguel"}
    assert result.new_entities == {"Filial Sul"}
    assert store.get_settings() == DEFAULT_SETTINGS


def test_supplier_only_for_expenses(executor):
    records = [
        transaction_record(2, name="Imobiliária Centro", force_expense=True),
        transaction_record(3, name="Ana Souza", force_income=True),
    ]

    expense, income = executor.import_records(records, ImportKind.TRANSACTIONS).records

    assert expense.supplier == "Imobiliária Centro"
    assert income.supplier is None


def test_reimport_upserts_instead_of_duplicating(executor, store):
    records = [
        transaction_record(2),
        transaction_record(3, description="Tarifa", amount="12,90"),
    ]

    executor.import_records(records, ImportKind.TRANSACTIONS)
    executor.import_records(records, ImportKind.TRANSACTIONS)

    assert len(store.get_all(Collection.TRANSACTIONS)) == 2


def test_identical_rows_in_one_batch_are_both_kept(executor, store):
    records = [transaction_record(2), transaction_record(3)]

    result = executor.import_records(records, ImportKind.TRANSACTIONS)

    assert result.created == 2
    assert len({transaction.id for transaction in result.records}) == 2
    assert len(store.get_all(Collection.TRANSACTIONS)) == 2


def test_attachments_are_linked(executor):
    result = executor.import_records(
        [transaction_record()], ImportKind.TRANSACTIONS, attachment_ids=("file-1",)
    )

    assert result.records[0].attachment_ids == ("file-1",)


class FailingStore(LocalStore):
    def bulk_upsert(self, collection, records):
        raise PersistenceError("disk full")


def test_persistence_failure_propagates(tmp_path, import_log):
    executor = ImportExecutor(FailingStore(tmp_path), import_log)

    with pytest.raises(PersistenceError):
        executor.import_records([transaction_record()], ImportKind.TRANSACTIONS)

    assert import_log.by_severity(Severity.SUCCESS)


@pytest.mark.parametrize(
    "amount, force_income, force_expense, polarity, expected",
    [
        # Row flag wins over sign and hint
        ("10", False, True, Polarity.FORCE_INCOME, TransactionKind.EXPENSE),
        ("-10", True, False, Polarity.AUTO, TransactionKind.INCOME),
        # Both flags cancel out; the sign decides
        ("-10", True, True, Polarity.AUTO, TransactionKind.EXPENSE),
        ("10", True, True, Polarity.AUTO, TransactionKind.INCOME),
        # Negative sign wins over the hint
        ("-10", False, False, Polarity.FORCE_INCOME, TransactionKind.EXPENSE),
        # Hint decides positive amounts
        ("10", False, False, Polarity.FORCE_EXPENSE, TransactionKind.EXPENSE),
        ("10", False, False, Polarity.FORCE_INCOME, TransactionKind.INCOME),
        ("10", False, False, Polarity.AUTO, TransactionKind.INCOME),
    ],
)
def test_resolve_kind(amount, force_income, force_expense, polarity, expected):
    record = ImportRecord(2, force_income=force_income, force_expense=force_expense)

    assert resolve_kind(record, Decimal(amount), polarity) is expected
