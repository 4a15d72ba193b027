"""Tests for CSV export."""

import csv
import io
from datetime import date, datetime
from decimal import Decimal

from nexus.database.base import Collection
from nexus.domain.entities import Client, Transaction, TransactionKind
from nexus.domain.export import export_collection, export_filename, records_to_csv


def test_export_clients(store):
    store.upsert(
        Collection.CLIENTS,
        Client("c1", 'Ana "Aninha" Souza', "123", "", "ana@example.com", datetime(2024, 1, 1, 8, 0)),
    )

    text = export_collection(store, Collection.CLIENTS)

    lines = text.splitlines()
    assert lines[0] == '"id","name","taxId","phone","email","createdAt"'
    rows = list(csv.DictReader(io.StringIO(text)))
    assert rows[0]["name"] == 'Ana "Aninha" Souza'
    assert rows[0]["createdAt"] == "2024-01-01T08:00:00"


def test_export_transactions_amount_unquoted():
    transaction = Transaction(
        "t1", TransactionKind.EXPENSE, "Aluguel", Decimal("1500.50"), date(2024, 3, 5), "CMG", "Operacional"
    )

    text = records_to_csv(Collection.TRANSACTIONS, [transaction])

    data_line = text.splitlines()[1]
    assert '"expense"' in data_line
    assert ",1500.5," in data_line


def test_export_empty_collection_has_header(store):
    assert export_collection(store, Collection.FILES).splitlines() == [
        '"id","name","type","size","date","associatedClient"'
    ]


def test_export_filename():
    assert export_filename(Collection.CLIENTS, date(2024, 5, 1)) == "nexus_clients_2024-05-01.csv"
