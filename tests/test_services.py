"""Tests for client, transaction and file services."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from nexus.database.base import Collection
from nexus.domain.client import ClientService
from nexus.domain.entities import Client, MimeClass, Transaction, TransactionKind
from nexus.domain.errors import NotFoundError, ValidationError
from nexus.domain.files import FileService
from nexus.domain.transaction import TransactionService


@pytest.fixture
def sample_clients(store):
    clients = [
        Client("c1", "Ana Souza", "123", "", "ana@example.com", datetime(2024, 1, 1)),
        Client("c2", "Bruno Lima", "456", "", "bruno@example.com", datetime(2024, 2, 1)),
    ]
    store.bulk_upsert(Collection.CLIENTS, clients)
    return clients


@pytest.fixture
def sample_transactions(store):
    transactions = [
        Transaction("t1", TransactionKind.INCOME, "Consulta", Decimal("300.00"), date(2024, 3, 1), "CMG", "Serviços"),
        Transaction("t2", TransactionKind.EXPENSE, "Aluguel", Decimal("1500.00"), date(2024, 3, 5), "CMG", "Operacional"),
        Transaction("t3", TransactionKind.EXPENSE, "Anúncio", Decimal("150.00"), date(2024, 4, 2), "Everton Guerra", "Marketing"),
    ]
    store.bulk_upsert(Collection.TRANSACTIONS, transactions)
    return transactions


def test_list_clients_newest_first(store, sample_clients):
    service = ClientService(store)

    assert [client.id for client in service.list_clients()] == ["c2", "c1"]
    assert [client.id for client in service.list_clients(search="ANA")] == ["c1"]
    assert [client.id for client in service.list_clients(search="456")] == ["c2"]


def test_delete_client(store, sample_clients):
    service = ClientService(store)

    service.delete_client("c1")

    assert service.get_client("c1") is None
    with pytest.raises(NotFoundError):
        service.delete_client("c1")


def test_list_transactions_filters(store, sample_transactions):
    service = TransactionService(store)

    assert [txn.id for txn in service.list_transactions()] == ["t3", "t2", "t1"]
    assert [txn.id for txn in service.list_transactions(kind=TransactionKind.EXPENSE)] == ["t3", "t2"]
    assert [
        txn.id
        for txn in service.list_transactions(start_date=date(2024, 3, 2), end_date=date(2024, 3, 31))
    ] == ["t2"]
    assert [txn.id for txn in service.list_transactions(entity="Everton Guerra")] == ["t3"]
    assert [txn.id for txn in service.list_transactions(category="Serviços")] == ["t1"]


def test_transaction_totals(store, sample_transactions):
    totals = TransactionService.totals(sample_transactions)

    assert totals == {
        "income": Decimal("300.00"),
        "expense": Decimal("1650.00"),
        "balance": Decimal("-1350.00"),
    }


def test_delete_transaction(store, sample_transactions):
    service = TransactionService(store)

    service.delete_transaction("t2")

    assert service.get_transaction("t2") is None
    with pytest.raises(NotFoundError):
        service.delete_transaction("t2")


def test_register_and_list_files(store):
    service = FileService(store)

    stored = service.register_file("/tmp/scans/recibo.jpg", 2 * 1024 * 1024, "image/jpeg", "Ana Souza")
    service.register_file("contrato.pdf", 1024, "application/pdf")

    assert stored.name == "recibo.jpg"
    assert stored.size_label == "2.00 MB"
    assert stored.mime_class is MimeClass.IMAGE
    assert stored.associated_client == "Ana Souza"
    assert len(service.list_files()) == 2
    assert [f.name for f in service.list_files(MimeClass.PDF)] == ["contrato.pdf"]

    service.delete_file(stored.id)
    assert len(service.list_files()) == 1


def test_register_file_requires_name(store):
    with pytest.raises(ValidationError):
        FileService(store).register_file("", 10)


@pytest.mark.parametrize(
    "media_type, expected",
    [
        ("application/pdf", MimeClass.PDF),
        ("image/png", MimeClass.IMAGE),
        ("video/mp4", MimeClass.VIDEO),
        ("text/csv", MimeClass.OTHER),
        (None, MimeClass.OTHER),
    ],
)
def test_mime_class_from_media_type(media_type, expected):
    assert MimeClass.from_media_type(media_type) is expected
