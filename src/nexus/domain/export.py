"""CSV export of stored records."""

import csv
import io
from datetime import date
from typing import Any, Sequence

from nexus.database.base import Collection, Record, Store
from nexus.database.mappers import record_to_dict

EXPORT_COLUMNS = {
    Collection.CLIENTS: ["id", "name", "taxId", "phone", "email", "createdAt"],
    Collection.TRANSACTIONS: [
        "id", "type", "date", "description", "amount", "entity", "category",
        "account", "code", "supplier", "clientId", "observation",
    ],
    Collection.FILES: ["id", "name", "type", "size", "date", "associatedClient"],
}


def export_filename(collection: Collection, today: date | None = None) -> str:
    """Default export name, e.g. ``nexus_clients_2024-05-01.csv``."""
    today = today or date.today()
    return f"nexus_{collection.value}_{today.isoformat()}.csv"


def _export_value(column: str, value: Any) -> Any:
    if value is None:
        return ""
    if column == "amount":
        return float(value)
    return value


def records_to_csv(collection: Collection, records: Sequence[Record]) -> str:
    """Render records as comma-separated text.

    Header is the field names; text values are quoted, amounts are not.
    """
    columns = EXPORT_COLUMNS[collection]
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        data = record_to_dict(record)
        writer.writerow([_export_value(column, data.get(column)) for column in columns])
    return buffer.getvalue()


def export_collection(store: Store, collection: Collection) -> str:
    """Export every record of a collection as CSV text."""
    return records_to_csv(collection, store.get_all(collection))
