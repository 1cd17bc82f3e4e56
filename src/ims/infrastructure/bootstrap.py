"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ims.application.inventory_store import InventoryStore
from ims.infrastructure.config import ServiceConfig
from ims.infrastructure.persistence.json_record_repository import (
    JsonRecordRepository,
)
from ims.infrastructure.storage.photo_store import PhotoStore

LOGGER = logging.getLogger(__name__)


def ensure_cache_dir(cache_dir: Path) -> Path:
    if not cache_dir.exists():
        cache_dir.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Created cache directory: %s", cache_dir)
    return cache_dir


def record_repository(state_file: Path) -> JsonRecordRepository:
    return JsonRecordRepository(state_file)


def inventory_store(config: ServiceConfig) -> InventoryStore:
    repo = record_repository(config.state_file) if config.persist else None
    return InventoryStore(config.cache_dir, repo)


def photo_store(config: ServiceConfig) -> PhotoStore:
    return PhotoStore(config.cache_dir)
