"""Transient row representation shared by the CSV and AI import paths."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SemanticField(str, Enum):
    """Canonical import target fields that spreadsheet columns map onto."""

    NAME = "name"
    TAX_ID = "tax_id"
    EMAIL = "email"
    PHONE = "phone"
    AMOUNT = "amount"
    DESCRIPTION = "description"
    DATE = "date"
    CODE = "code"
    ACCOUNT = "account"
    CATEGORY = "category"
    ENTITY = "entity"


@dataclass
class ImportRecord:
    """One row of an import batch.

    ``values`` holds the row keyed by its raw header, ``fields`` the same
    row keyed by semantic field, so ``record["Nome"]`` and
    ``record.get(SemanticField.NAME)`` both work.
    """

    row_number: int
    values: dict[str, str] = field(default_factory=dict)
    fields: dict[SemanticField, str] = field(default_factory=dict)
    force_income: bool = False
    force_expense: bool = False

    def __getitem__(self, header: str) -> str:
        return self.values[header]

    def get(self, semantic_field: SemanticField, default: Optional[str] = None) -> Optional[str]:
        value = self.fields.get(semantic_field)
        if value is None or value == "":
            return default
        return value
