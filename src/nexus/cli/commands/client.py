"""Client management commands."""

import click

from nexus.cli.error_handling import handle_domain_error
from nexus.domain.client import ClientService
from nexus.domain.errors import DomainError


@click.group()
def client_group():
    """Manage clients."""
    pass


@client_group.command("list")
@click.option("--search", help="Filter by name, tax id or email")
@click.pass_context
def list_clients(ctx, search: str | None):
    """List clients, newest first."""
    service = ClientService(ctx.obj["store"])

    clients = service.list_clients(search=search)
    if not clients:
        click.echo("No clients found.")
        return

    click.echo(f"\nFound {len(clients)} client(s):")
    click.echo("-" * 100)
    for client in clients:
        click.echo(
            f"{client.id} | {client.name[:30]:30s} | {client.tax_id:18s} | "
            f"{client.email[:25]:25s} | {client.phone}"
        )


@client_group.command("delete")
@click.argument("client_id")
@click.pass_context
def delete_client(ctx, client_id: str):
    """Delete a client by ID."""
    service = ClientService(ctx.obj["store"])

    try:
        service.delete_client(client_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted client {client_id}")


def register_commands(cli):
    """Register client commands with main CLI."""
    cli.add_command(client_group, name="client")
