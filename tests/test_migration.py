"""Tests for the attachment-columns migration script."""

import importlib.util
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect, text

MIGRATION_PATH = Path(__file__).parent.parent / "migrations" / "migrate_add_attachment_columns.py"


@pytest.fixture
def migration():
    spec = importlib.util.spec_from_file_location("migrate_add_attachment_columns", MIGRATION_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def old_database(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'old.db'}"
    engine = create_engine(database_url)
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE transactions (id VARCHAR PRIMARY KEY, kind VARCHAR, description VARCHAR, "
                "amount NUMERIC(14, 2), date DATE, entity VARCHAR, category VARCHAR, account VARCHAR, "
                "observation VARCHAR, client_id VARCHAR, supplier VARCHAR)"
            )
        )
        conn.execute(
            text(
                "CREATE TABLE files (id VARCHAR PRIMARY KEY, name VARCHAR, mime_class VARCHAR, "
                "size_label VARCHAR, date DATETIME)"
            )
        )
    engine.dispose()
    return database_url


def test_migration_adds_missing_columns(migration, old_database):
    added = migration.migrate_database(old_database)

    assert sorted(added) == [
        "files.associated_client",
        "files.associated_transaction_id",
        "transactions.attachment_ids",
        "transactions.code",
    ]
    engine = create_engine(old_database)
    columns = {col["name"] for col in inspect(engine).get_columns("transactions")}
    engine.dispose()
    assert {"attachment_ids", "code"} <= columns


def test_migration_is_repeatable(migration, old_database):
    migration.migrate_database(old_database)

    assert migration.migrate_database(old_database) == []


def test_migrated_database_accepts_imports(migration, old_database):
    from nexus.database.sqlalchemy_db import SQLAlchemyStore
    from nexus.domain.activity_log import ImportLog
    from nexus.domain.import_service import ImportService

    migration.migrate_database(old_database)
    store = SQLAlchemyStore(old_database)
    try:
        result = ImportService(store, log=ImportLog()).import_delimited(
            "Código;Data;Descrição;Valor\nA1;05/03/2024;Tarifa;-12,90\n"
        )
    finally:
        store.disconnect()

    assert result.created == 1
