"""Shared pytest fixtures for nexus tests."""

from pathlib import Path

import pytest

from nexus.database.factories import create_sqlite_store
from nexus.database.local_store import LocalStore
from nexus.domain.activity_log import ImportLog


class FakeGenerativeClient:
    """Stands in for the AI client; returns a canned response."""

    def __init__(self, response: str = "", error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sqlite_store(tmp_path):
    """Create a relational store on a temporary SQLite file."""
    store = create_sqlite_store(str(tmp_path / "nexus.db"))
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def local_store(tmp_path):
    """Create a local JSON store in a temporary directory."""
    store = LocalStore(tmp_path / "data")
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture(params=["sqlite", "local"])
def store(request):
    """Run the test once against each store backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def import_log():
    """Create an empty activity log."""
    return ImportLog(capacity=500)


@pytest.fixture
def fake_ai():
    """Factory for fake generative clients."""
    return FakeGenerativeClient


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def clean_env(monkeypatch):
    """Make sure no store or AI settings leak in from the environment."""
    for name in ("NEXUS_DATABASE_URL", "NEXUS_DATA_DIR", "OPENAI_API_KEY", "OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
