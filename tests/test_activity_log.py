"""Tests for the import activity log."""

from nexus.domain.activity_log import ImportLog
from nexus.domain.entities import Severity


def test_entries_are_appended_in_order():
    log = ImportLog()
    log.info("reading")
    log.success("saved")
    log.warning("skipped")

    assert [entry.message for entry in log.entries] == ["reading", "saved", "skipped"]
    assert [entry.severity for entry in log.entries] == [
        Severity.INFO,
        Severity.SUCCESS,
        Severity.WARNING,
    ]
    ids = [entry.id for entry in log.entries]
    assert ids == sorted(ids)


def test_capacity_discards_oldest():
    log = ImportLog(capacity=3)
    for index in range(5):
        log.info(f"line {index}")

    assert len(log) == 3
    assert [entry.message for entry in log.entries] == ["line 2", "line 3", "line 4"]


def test_listeners_receive_every_entry():
    received = []
    log = ImportLog(listeners=[received.append])
    log.new("New category found: 'Aluguel'")
    log.error("Import failed")

    assert [entry.severity for entry in received] == [Severity.NEW, Severity.ERROR]


def test_by_severity_and_clear():
    log = ImportLog()
    log.warning("a")
    log.info("b")
    log.warning("c")

    assert [entry.message for entry in log.by_severity(Severity.WARNING)] == ["a", "c"]

    log.clear()
    assert log.entries == []
