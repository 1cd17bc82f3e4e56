"""CLI commands for reading the persisted inventory."""

from __future__ import annotations

from pathlib import Path

import click

from ims.application.inventory_store import InventoryStore
from ims.domain.exceptions import DomainException, PersistenceError
from ims.infrastructure.bootstrap import record_repository
from ims.infrastructure.config import state_file_in

_cache_option = click.option(
    "-c", "--cache", "cache_dir",
    required=True,
    envvar="IMS_CACHE",
    type=click.Path(file_okay=False, path_type=Path),
    help="Cache directory holding the inventory state.",
)


def _open_store(cache_dir: Path) -> InventoryStore:
    try:
        return InventoryStore(cache_dir, record_repository(state_file_in(cache_dir)))
    except PersistenceError as exc:
        raise click.ClickException(str(exc))


@click.command("list")
@_cache_option
def inventory_list(cache_dir: Path) -> None:
    """List all inventory items."""
    records = _open_store(cache_dir).list_all()

    if not records:
        click.echo("No inventory items found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Photo':<6} Description")
    click.echo("-" * 60)
    for r in records:
        photo = "yes" if r.photo_path else "no"
        click.echo(f"{r.id:<6} {r.name:<20} {photo:<6} {r.description}")


@click.command("show")
@_cache_option
@click.option("--id", "record_id", required=True, type=int, help="Item ID.")
def inventory_show(cache_dir: Path, record_id: int) -> None:
    """Show one inventory item."""
    try:
        record = _open_store(cache_dir).get(record_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{record.id}")
    click.echo(f"Name:        {record.name}")
    click.echo(f"Description: {record.description or '-'}")
    click.echo(f"Photo:       {record.photo_path or '-'}")
