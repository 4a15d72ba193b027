"""Settings commands."""

import click

from nexus.cli.error_handling import handle_domain_error
from nexus.domain.errors import DomainError
from nexus.domain.settings import SettingsService


@click.group()
def settings_group():
    """Show and edit company settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show company settings and enumerations."""
    settings = SettingsService(ctx.obj["store"]).get_settings()

    click.echo(f"Company:    {settings.company_name}")
    click.echo(f"Tax ID:     {settings.tax_id or '-'}")
    click.echo(f"Entities:   {', '.join(settings.entities) or '-'}")
    click.echo(f"Categories: {', '.join(settings.categories) or '-'}")
    click.echo(f"Banks:      {', '.join(settings.banks) or '-'}")


@settings_group.command("add-category")
@click.argument("name")
@click.pass_context
def add_category(ctx, name: str):
    """Add a transaction category."""
    try:
        SettingsService(ctx.obj["store"]).add_category(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added category '{name.strip()}'")


@settings_group.command("add-entity")
@click.argument("name")
@click.pass_context
def add_entity(ctx, name: str):
    """Add an entity (business unit or person)."""
    try:
        SettingsService(ctx.obj["store"]).add_entity(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added entity '{name.strip()}'")


@settings_group.command("add-bank")
@click.argument("name")
@click.pass_context
def add_bank(ctx, name: str):
    """Add a bank account name the AI can recognise in documents."""
    try:
        SettingsService(ctx.obj["store"]).add_bank(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added bank '{name.strip()}'")


@settings_group.command("set-company")
@click.option("--name", help="Company name")
@click.option("--tax-id", help="Company tax id (CNPJ)")
@click.pass_context
def set_company(ctx, name: str | None, tax_id: str | None):
    """Update the company name or tax id."""
    if name is None and tax_id is None:
        click.echo("Error: Provide --name and/or --tax-id", err=True)
        ctx.exit(1)

    settings = SettingsService(ctx.obj["store"]).update_company(company_name=name, tax_id=tax_id)
    click.echo(f"Company: {settings.company_name} ({settings.tax_id or 'no tax id'})")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
