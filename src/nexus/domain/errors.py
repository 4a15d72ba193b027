"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class ParseError(DomainError):
    """Input could not be turned into rows or structured data."""


class ExtractionFailure(ParseError):
    """Model output could not be repaired into valid JSON."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class PersistenceError(DomainError):
    """The store rejected a read or write."""


class GenerativeServiceError(DomainError):
    """The generative-text service failed or is not configured."""


class BusyError(DomainError):
    """Another import is already running."""


def record_not_found(collection: str, record_id: str) -> str:
    """Return message for a missing record."""
    return f"No record with id '{record_id}' in {collection}"


def too_few_lines() -> str:
    """Return message for delimited input without data rows."""
    return "File must contain a header line and at least one data row"


def undecodable_file(encoding: str | None = None) -> str:
    """Return message for file bytes that cannot be read as text."""
    if encoding:
        return f"File is not valid {encoding} text; save it as UTF-8 and retry"
    return "Could not detect the file encoding; save it as UTF-8 and retry"


def import_already_running() -> str:
    """Return message when the import slot is taken."""
    return "An import is already running; wait for it to finish"


def missing_columns(columns: list[str]) -> str:
    """Return message pointing the operator at the schema migration."""
    return (
        f"Database schema is missing column(s): {', '.join(columns) or 'unknown'}. "
        "Run 'python migrations/migrate_add_attachment_columns.py --db-url <URL>' "
        "to update the schema, then retry the import."
    )
