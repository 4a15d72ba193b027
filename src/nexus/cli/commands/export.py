"""CSV export command."""

from pathlib import Path

import click

from nexus.cli.error_handling import handle_domain_error
from nexus.database.base import Collection
from nexus.domain.errors import DomainError
from nexus.domain.export import export_collection, export_filename


@click.command("export")
@click.argument("collection", type=click.Choice([collection.value for collection in Collection]))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file (defaults to nexus_<collection>_<date>.csv; '-' for stdout)",
)
@click.pass_context
def export_records(ctx, collection: str, output: str | None):
    """Export clients, transactions or files to CSV.

    Examples:
        nexus export clients
        nexus export transactions -o movimentos.csv
    """
    target = Collection(collection)
    try:
        text = export_collection(ctx.obj["store"], target)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if output == "-":
        click.echo(text, nl=False)
        return

    output_path = Path(output) if output else Path(export_filename(target))
    output_path.write_text(text, encoding="utf-8")
    click.echo(f"Exported {target.value} to {output_path}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_records)
