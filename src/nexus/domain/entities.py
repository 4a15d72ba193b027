"""Domain model entities for nexus.

These are pure data classes representing business records, independent of
the store that persists them. Both store backends convert to and from these
classes in ``nexus.database.mappers``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    """Polarity of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class Polarity(str, Enum):
    """Operator hint for the polarity of imported transactions."""

    AUTO = "auto"
    FORCE_INCOME = "force-income"
    FORCE_EXPENSE = "force-expense"


class MimeClass(str, Enum):
    """Coarse media class shown in the file registry."""

    PDF = "pdf"
    IMAGE = "image"
    VIDEO = "video"
    OTHER = "other"

    @classmethod
    def from_media_type(cls, media_type: Optional[str]) -> "MimeClass":
        media_type = (media_type or "").lower()
        if "pdf" in media_type:
            return cls.PDF
        if "image" in media_type:
            return cls.IMAGE
        if "video" in media_type:
            return cls.VIDEO
        return cls.OTHER


class Severity(str, Enum):
    """Severity tag of an activity log entry."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    NEW = "new"


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: str
    name: str
    tax_id: str
    phone: str
    email: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always non-negative; ``kind`` carries the sign.
    """

    id: str
    kind: TransactionKind
    description: str
    amount: Decimal
    date: date
    entity: str
    category: str
    account: Optional[str] = None
    observation: Optional[str] = None
    client_id: Optional[str] = None
    supplier: Optional[str] = None
    attachment_ids: tuple[str, ...] = ()
    code: Optional[str] = None


@dataclass(frozen=True)
class StoredFile:
    """File registry entry."""

    id: str
    name: str
    mime_class: MimeClass
    size_label: str
    date: datetime
    associated_client: Optional[str] = None
    associated_transaction_id: Optional[str] = None


@dataclass(frozen=True)
class AppSettings:
    """Company settings and the open enumerations used during import."""

    company_name: str = "Nexus Enterprise"
    tax_id: str = ""
    entities: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    banks: tuple[str, ...] = ()


DEFAULT_SETTINGS = AppSettings(
    company_name="Nexus Enterprise",
    entities=("CMG", "Everton Guerra"),
    categories=("Operacional", "Marketing", "Pessoal"),
    banks=("Banco do Brasil", "Nubank"),
)


@dataclass(frozen=True)
class ImportLogEntry:
    """One line of the import activity log."""

    id: int
    severity: Severity
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
