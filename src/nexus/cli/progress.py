"""Streams activity log entries to the terminal while an import runs."""

import click

from nexus.domain.activity_log import ImportLog
from nexus.domain.entities import ImportLogEntry, Severity

SEVERITY_STYLES = {
    Severity.INFO: {"fg": "blue"},
    Severity.SUCCESS: {"fg": "green"},
    Severity.WARNING: {"fg": "yellow"},
    Severity.ERROR: {"fg": "red", "bold": True},
    Severity.NEW: {"fg": "magenta"},
}


def format_entry(entry: ImportLogEntry) -> str:
    tag = click.style(f"[{entry.severity.value.upper():7s}]", **SEVERITY_STYLES[entry.severity])
    return f"{entry.timestamp:%H:%M:%S} {tag} {entry.message}"


def echo_entry(entry: ImportLogEntry) -> None:
    click.echo(format_entry(entry), err=entry.severity is Severity.ERROR)


def create_import_log(ctx: click.Context, quiet: bool = False) -> ImportLog:
    """Activity log for a CLI import, echoing entries unless ``quiet``."""
    log = ImportLog(capacity=ctx.obj["log_capacity"])
    if not quiet:
        log.subscribe(echo_entry)
    return log
