"""Runtime configuration for the service."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

STATE_FILE_NAME = "inventory.json"


def state_file_in(cache_dir: Path) -> Path:
    return cache_dir / STATE_FILE_NAME


@dataclass(frozen=True)
class ServiceConfig:
    host: str
    port: int
    cache_dir: Path
    persist: bool = True

    @property
    def state_file(self) -> Path:
        return state_file_in(self.cache_dir)
