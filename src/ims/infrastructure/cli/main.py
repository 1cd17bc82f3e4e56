import logging

import click

from ims.infrastructure.cli.inventory_commands import inventory_list, inventory_show
from ims.infrastructure.cli.serve_command import serve


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """IMS — Inventory Management Service"""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def inventory() -> None:
    """Inspect persisted inventory."""


# Register subcommands
cli.add_command(serve)
inventory.add_command(inventory_list)
inventory.add_command(inventory_show)
