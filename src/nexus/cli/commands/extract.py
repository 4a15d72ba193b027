"""AI document extraction command."""

import click

from nexus.cli.commands.import_cmd import POLARITY_CHOICE, echo_result
from nexus.cli.error_handling import handle_domain_error
from nexus.cli.progress import create_import_log
from nexus.domain.entities import Polarity
from nexus.domain.errors import DomainError
from nexus.domain.import_service import ImportService


@click.command("extract")
@click.argument("document", type=click.Path(exists=True, dir_okay=False))
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
def extract_document(ctx, document: str, polarity: str, media_type: str | None, quiet: bool):
    """Extract clients and transactions from a document with the AI.

    Works with PDFs, images and text files. Requires OPENAI_API_KEY.

    Examples:
        nexus extract extrato_maio.pdf
        nexus extract nota.jpg --polarity force-expense
    """
    store = ctx.obj["store"]
    service = ImportService(store, log=create_import_log(ctx, quiet))

    try:
        clients, transactions = service.import_document(
            document, polarity=Polarity(polarity), media_type=media_type
        )
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
        return

    echo_result(clients)
    echo_result(transactions)


def register_commands(cli):
    """Register extract command with main CLI."""
    cli.add_command(extract_document)
