"""CLI command that runs the HTTP service."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import uvicorn

from ims.domain.exceptions import PersistenceError
from ims.infrastructure.bootstrap import ensure_cache_dir, inventory_store, photo_store
from ims.infrastructure.config import ServiceConfig
from ims.infrastructure.http.app import create_app

LOGGER = logging.getLogger(__name__)


@click.command("serve")
@click.option("-h", "--host", required=True, envvar="IMS_HOST", help="Server host.")
@click.option("-p", "--port", required=True, type=int, envvar="IMS_PORT", help="Server port.")
@click.option(
    "-c", "--cache", "cache_dir",
    required=True,
    envvar="IMS_CACHE",
    type=click.Path(file_okay=False, path_type=Path),
    help="Cache directory for photos and inventory state.",
)
@click.option("--no-persist", is_flag=True, help="Keep inventory in memory only.")
def serve(host: str, port: int, cache_dir: Path, no_persist: bool) -> None:
    """Start the inventory HTTP service."""
    config = ServiceConfig(
        host=host, port=port, cache_dir=cache_dir, persist=not no_persist
    )
    ensure_cache_dir(config.cache_dir)

    try:
        store = inventory_store(config)
    except PersistenceError as exc:
        LOGGER.error("Refusing to start: %s", exc)
        raise click.ClickException(str(exc))

    app = create_app(store, photo_store(config))
    LOGGER.info("Server starting on http://%s:%d", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
