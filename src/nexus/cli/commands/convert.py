"""AI document-to-CSV conversion command."""

from pathlib import Path

import click

from nexus.cli.commands.import_cmd import POLARITY_CHOICE, echo_result
from nexus.cli.error_handling import handle_domain_error
from nexus.cli.progress import create_import_log
from nexus.domain.entities import Polarity
from nexus.domain.errors import DomainError
from nexus.domain.import_service import ImportService


@click.command("convert")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Where to write the CSV (defaults to DOCUMENT with a .csv suffix)",
)
@click.option(
    "--polarity",
    type=POLARITY_CHOICE,
    default=Polarity.AUTO.value,
    show_default=True,
    help="Treat every transaction as income or expense",
)
@click.option("--media-type", help="Media type of the document (guessed from the name if omitted)")
@click.option("--quiet", "-q", is_flag=True, help="Only print the final summary")
@click.pass_context
def convert_document(
    ctx, document: str, output: str | None, polarity: str, media_type: str | None, quiet: bool
):
    """Convert a document to CSV with the AI and import the result.

    The CSV uses the columns Código;Conta;Categoria;Entidade;Descrição;Data;Valor
    and is kept on disk even if the import fails, so it can be fixed by hand
    and imported again with 'nexus import'.

    Examples:
        nexus convert fatura.pdf
        nexus convert fatura.pdf -o fatura_maio.csv --polarity force-expense
    """
    store = ctx.obj["store"]
    service = ImportService(store, log=create_import_log(ctx, quiet))
    output_path = Path(output) if output else Path(document).with_suffix(".csv")
    if output_path.resolve() == Path(document).resolve():
        click.echo("Error: Output path would overwrite the document", err=True)
        ctx.exit(1)

    try:
        result = service.convert_document(
            document, output_path, polarity=Polarity(polarity), media_type=media_type
        )
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
        return

    echo_result(result)
    click.echo(f"  CSV: {output_path}")


def register_commands(cli):
    """Register convert command with main CLI."""
    cli.add_command(convert_document)
