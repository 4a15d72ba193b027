"""Main CLI entry point."""

import click

from nexus.config import get_log_capacity, load_environment
from nexus.database.factories import create_store
from nexus.logger import setup_logging

# Import and register all commands at module level
from nexus.cli.commands import (
    client,
    convert,
    export,
    extract,
    files,
    import_cmd,
    settings,
    transaction,
)


@click.group()
@click.option(
    "--db-url",
    help="SQLAlchemy database URL (overrides NEXUS_DATABASE_URL environment variable)",
    envvar="NEXUS_DATABASE_URL",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    help="Directory of the local store, used when no database URL is set "
    "(overrides NEXUS_DATA_DIR environment variable)",
    envvar="NEXUS_DATA_DIR",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Diagnostic log level (overrides LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_url: str | None, data_dir: str | None, log_level: str | None):
    """Nexus - Client and finance records with spreadsheet and AI import.

    Import clients and transactions from CSV files or let the AI read bank
    statements, invoices and receipts for you.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_store(database_url=db_url, data_dir=data_dir)
        store.connect()
        store.initialize_schema()
        ctx.call_on_close(store.disconnect)
        ctx.obj["store"] = store
        ctx.obj["log_capacity"] = get_log_capacity()


# Register all commands
import_cmd.register_commands(cli)
extract.register_commands(cli)
convert.register_commands(cli)
client.register_commands(cli)
transaction.register_commands(cli)
files.register_commands(cli)
settings.register_commands(cli)
export.register_commands(cli)


def main():
    """Main entry point for CLI."""
    load_environment()
    cli()


if __name__ == "__main__":
    main()
