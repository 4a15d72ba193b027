#!/usr/bin/env python3
"""Migration script to add the attachment and code columns.

Databases created before files could be attached to transactions lack:
- transactions.attachment_ids (JSON list of stored file ids, default [])
- transactions.code (TEXT, nullable) - the "Código" column of imported CSVs
- files.associated_client (TEXT, nullable)
- files.associated_transaction_id (TEXT, nullable)

Imports into such a database fail with a "missing column" error that
points here. Columns that already exist are left alone, so the script can
be run more than once.

Usage:
    python migrations/migrate_add_attachment_columns.py --db-url URL
"""

import sys
from pathlib import Path

# Add src to path so we can import nexus modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import create_engine, inspect, text
from nexus.config import get_database_url, load_environment

# table -> [(column, DDL type and default)]
COLUMNS_TO_ADD = {
    "transactions": [
        ("attachment_ids", "JSON DEFAULT '[]'"),
        ("code", "VARCHAR"),
    ],
    "files": [
        ("associated_client", "VARCHAR"),
        ("associated_transaction_id", "VARCHAR"),
    ],
}


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table.

    Args:
        engine: SQLAlchemy engine or connection
        table_name: Name of the table
        column_name: Name of the column

    Returns:
        True if column exists, False otherwise
    """
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_url: str) -> list[str]:
    """Add any missing attachment/code columns.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Names of the columns that were added, as "table.column"

    Raises:
        Exception: If a table is missing or an ALTER fails
    """
    engine = create_engine(database_url)
    added = []
    try:
        inspector = inspect(engine)
        tables = inspector.get_table_names()
        for table_name in COLUMNS_TO_ADD:
            if table_name not in tables:
                raise Exception(
                    f"Table '{table_name}' does not exist. Run any nexus command once to create the schema."
                )

        print("Starting migration: adding attachment columns...")
        with engine.begin() as conn:
            for table_name, columns in COLUMNS_TO_ADD.items():
                for column_name, ddl in columns:
                    if column_exists(conn, table_name, column_name):
                        print(f"  Already present: {table_name}.{column_name}")
                        continue
                    conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
                    added.append(f"{table_name}.{column_name}")
                    print(f"  Added column: {table_name}.{column_name}")

        if added:
            print("Migration completed successfully!")
        else:
            print("Migration already applied: all columns exist")
        return added
    finally:
        engine.dispose()


def main():
    """Main entry point for migration script."""
    import argparse

    load_environment()
    parser = argparse.ArgumentParser(
        description="Migrate database to add attachment and code columns"
    )
    parser.add_argument(
        "--db-url",
        type=str,
        default=get_database_url(),
        help="SQLAlchemy database URL (defaults to NEXUS_DATABASE_URL environment variable)",
    )
    args = parser.parse_args()
    if not args.db_url:
        print("No database URL given; pass --db-url or set NEXUS_DATABASE_URL", file=sys.stderr)
        return 1

    try:
        migrate_database(args.db_url)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
