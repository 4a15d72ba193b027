"""File registry commands."""

from pathlib import Path

import click

from nexus.cli.error_handling import handle_domain_error
from nexus.domain.entities import MimeClass
from nexus.domain.errors import DomainError
from nexus.domain.files import FileService
from nexus.domain.import_service import guess_media_type


@click.group()
def files_group():
    """Manage the file registry."""
    pass


@files_group.command("list")
@click.option("--type", "mime_class", type=click.Choice([mime.value for mime in MimeClass]))
@click.pass_context
def list_files(ctx, mime_class: str | None):
    """List registered files, newest first."""
    service = FileService(ctx.obj["store"])

    stored_files = service.list_files(MimeClass(mime_class) if mime_class else None)
    if not stored_files:
        click.echo("No files found.")
        return

    for stored in stored_files:
        client = f" | client: {stored.associated_client}" if stored.associated_client else ""
        click.echo(
            f"{stored.date:%Y-%m-%d %H:%M} | {stored.mime_class.value:5s} | "
            f"{stored.size_label:>10s} | {stored.name}{client} | {stored.id}"
        )


@files_group.command("add")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--client", "client_name", help="Client the file belongs to")
@click.pass_context
def add_file(ctx, path: str, client_name: str | None):
    """Register a file without importing it."""
    service = FileService(ctx.obj["store"])
    file_path = Path(path)

    try:
        stored = service.register_file(
            name=file_path.name,
            size_bytes=file_path.stat().st_size,
            media_type=guess_media_type(file_path),
            associated_client=client_name,
        )
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Registered '{stored.name}' ({stored.mime_class.value}, {stored.size_label}) as {stored.id}")


@files_group.command("delete")
@click.argument("file_id")
@click.pass_context
def delete_file(ctx, file_id: str):
    """Remove a file from the registry."""
    service = FileService(ctx.obj["store"])

    try:
        service.delete_file(file_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted file {file_id}")


def register_commands(cli):
    """Register file commands with main CLI."""
    cli.add_command(files_group, name="files")
