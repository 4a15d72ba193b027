"""Settings domain service."""

from dataclasses import replace
from typing import Iterable, Optional

from nexus.database.base import Store
from nexus.domain.activity_log import ImportLog
from nexus.domain.entities import AppSettings
from nexus.domain.errors import ValidationError


class SettingsService:
    """Service for reading and updating company settings.

    This is the only writer of the open enumerations (categories, entities,
    banks). Imports report new values and the caller merges them here.
    """

    def __init__(self, store: Store, log: Optional[ImportLog] = None):
        """Initialize settings service.

        Args:
            store: Store instance
            log: Activity log receiving a ``new`` entry per merged value
        """
        self.store = store
        self.log = log

    def get_settings(self) -> AppSettings:
        return self.store.get_settings()

    def merge_enumerations(
        self, new_categories: Iterable[str] = (), new_entities: Iterable[str] = ()
    ) -> AppSettings:
        """Append unseen categories and entities and persist the result.

        Values are compared case-sensitively. Settings are only written when
        something was actually added.

        Returns:
            The settings after the merge
        """
        settings = self.store.get_settings()
        categories = _append_unique(settings.categories, new_categories)
        entities = _append_unique(settings.entities, new_entities)

        added_categories = categories[len(settings.categories):]
        added_entities = entities[len(settings.entities):]
        if not added_categories and not added_entities:
            return settings

        updated = replace(settings, categories=categories, entities=entities)
        self.store.save_settings(updated)
        if self.log is not None:
            for category in added_categories:
                self.log.new(f"Category '{category}' added to settings")
            for entity in added_entities:
                self.log.new(f"Entity '{entity}' added to settings")
        return updated

    def add_category(self, name: str) -> AppSettings:
        """Add one category.

        Raises:
            ValidationError: If the name is empty or already present
        """
        name = _require_name(name, "Category")
        if name in self.store.get_settings().categories:
            raise ValidationError(f"Category '{name}' already exists")
        return self.merge_enumerations(new_categories=[name])

    def add_entity(self, name: str) -> AppSettings:
        """Add one entity.

        Raises:
            ValidationError: If the name is empty or already present
        """
        name = _require_name(name, "Entity")
        if name in self.store.get_settings().entities:
            raise ValidationError(f"Entity '{name}' already exists")
        return self.merge_enumerations(new_entities=[name])

    def add_bank(self, name: str) -> AppSettings:
        """Add one bank account name offered to document extraction.

        Raises:
            ValidationError: If the name is empty or already present
        """
        name = _require_name(name, "Bank")
        settings = self.store.get_settings()
        if name in settings.banks:
            raise ValidationError(f"Bank '{name}' already exists")
        updated = replace(settings, banks=settings.banks + (name,))
        self.store.save_settings(updated)
        return updated

    def update_company(self, company_name: Optional[str] = None, tax_id: Optional[str] = None) -> AppSettings:
        settings = self.store.get_settings()
        updated = replace(
            settings,
            company_name=settings.company_name if company_name is None else company_name.strip(),
            tax_id=settings.tax_id if tax_id is None else tax_id.strip(),
        )
        self.store.save_settings(updated)
        return updated


def _append_unique(existing: tuple[str, ...], additions: Iterable[str]) -> tuple[str, ...]:
    values = list(existing)
    for value in sorted(set(additions)):
        if value and value not in values:
            values.append(value)
    return tuple(values)


def _require_name(name: str, label: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{label} name cannot be empty")
    return name
