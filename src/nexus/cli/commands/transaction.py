"""Transaction management commands."""

import click

from nexus.cli.error_handling import handle_domain_error
from nexus.domain.entities import TransactionKind
from nexus.domain.errors import DomainError
from nexus.domain.transaction import TransactionService
from nexus.utils.date_parser import try_parse_date


def _parse_filter_date(ctx, label: str, value: str | None):
    if not value:
        return None
    parsed = try_parse_date(value)
    if parsed is None:
        click.echo(f"Error: Invalid {label} date: {value}", err=True)
        ctx.exit(1)
    return parsed


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or DD/MM/YYYY)")
@click.option("--end-date", help="End date (YYYY-MM-DD or DD/MM/YYYY)")
@click.option("--type", "kind", type=click.Choice([kind.value for kind in TransactionKind]))
@click.option("--category", help="Exact category name")
@click.option("--entity", help="Exact entity name")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    kind: str | None,
    category: str | None,
    entity: str | None,
):
    """View transactions with optional filters."""
    service = TransactionService(ctx.obj["store"])
    start = _parse_filter_date(ctx, "start", start_date)
    end = _parse_filter_date(ctx, "end", end_date)

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        kind=TransactionKind(kind) if kind else None,
        category=category,
        entity=entity,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    for txn in transactions:
        sign = "+" if txn.kind is TransactionKind.INCOME else "-"
        amount = click.style(
            f"{sign}{txn.amount:>12,.2f}",
            fg="green" if txn.kind is TransactionKind.INCOME else "red",
        )
        click.echo(
            f"{txn.date} | {amount} | {txn.description[:35]:35s} | "
            f"{txn.category[:15]:15s} | {txn.entity[:15]:15s} | {txn.id}"
        )

    totals = service.totals(transactions)
    click.echo("-" * 110)
    click.echo(
        f"Income: {totals['income']:,.2f}  Expense: {totals['expense']:,.2f}  "
        f"Balance: {totals['balance']:,.2f}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str):
    """Delete a transaction by ID."""
    service = TransactionService(ctx.obj["store"])

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
