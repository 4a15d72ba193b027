"""CSV import command."""

import click

from nexus.cli.error_handling import handle_domain_error
from nexus.cli.progress import create_import_log
from nexus.domain.entities import Polarity
from nexus.domain.errors import DomainError
from nexus.domain.import_executor import ImportKind, ImportResult
from nexus.domain.import_service import ImportService

POLARITY_CHOICE = click.Choice([polarity.value for polarity in Polarity])


def echo_result(result: ImportResult) -> None:
    """Print the summary of one import batch."""
    click.echo(f"\nImport complete ({result.kind.value}):")
    click.echo(f"  Imported: {result.created}")
    click.echo(f"  Skipped: {len(result.warnings)}")
    if result.new_categories:
        click.echo(f"  New categories: {', '.join(sorted(result.new_categories))}")
    if result.new_entities:
        click.echo(f"  New entities: {', '.join(sorted(result.new_entities))}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in ImportKind]),
    default=ImportKind.TRANSACTIONS.value,
    show_default=True,
    help="What the rows describe",
)
@click.option(
    "--polarity",
    type=POLARITY_CHOICE,
    default=Polarity.AUTO.value,
    show_default=True,
    help="Treat every transaction as income or expense when the file is one-sided",
)
@click.option("--quiet", "-q", is_flag=True, help="Only print the final summary")
@click.pass_context
def import_csv(ctx, csv_file: str, kind: str, polarity: str, quiet: bool):
    """Import clients or transactions from a CSV file.

    The delimiter (comma or semicolon) is detected from the header line and
    columns are matched by name, e.g. "Nome", "CPF", "Valor", "Data".

    Examples:
        nexus import clientes.csv --kind clients
        nexus import extrato.csv --polarity force-expense
    """
    store = ctx.obj["store"]
    service = ImportService(store, log=create_import_log(ctx, quiet))

    try:
        result = service.import_csv_file(
            csv_file, kind=ImportKind(kind), polarity=Polarity(polarity)
        )
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
        return

    echo_result(result)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
