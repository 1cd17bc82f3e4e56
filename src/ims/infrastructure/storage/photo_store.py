"""Photo Store — lands uploaded photos in the cache directory.

Knows nothing about inventory records: it stores bytes under a fresh
name and hands that name back.
"""

from __future__ import annotations

import logging
import re
import shutil
import time
from pathlib import Path, PurePosixPath
from typing import BinaryIO

LOGGER = logging.getLogger(__name__)

PHOTO_URL_PREFIX = "/inventory-photo/"

# <nanosecond timestamp>[.<extension>]
_GENERATED_NAME = re.compile(r"^\d+(\.[A-Za-z0-9]+)?$")


class PhotoStore:

    def __init__(self, cache_dir: Path) -> None:
        self._cache_dir = cache_dir

    def save(self, stream: BinaryIO, original_filename: str | None) -> str:
        """Copy ``stream`` into a new file and return its generated name.

        The name keeps the original file's extension. Files are opened in
        exclusive-create mode, so an existing asset is never overwritten.
        """
        suffix = _suffix_of(original_filename)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

        while True:
            file_name = f"{time.time_ns()}{suffix}"
            try:
                with (self._cache_dir / file_name).open("xb") as out:
                    shutil.copyfileobj(stream, out)
            except FileExistsError:
                continue
            break

        LOGGER.debug("Stored photo %s (from %r)", file_name, original_filename)
        return file_name

    def discard(self, file_name: str) -> None:
        """Remove a photo that was saved but never attached to a record."""
        (self._cache_dir / PurePosixPath(file_name).name).unlink(missing_ok=True)
        LOGGER.debug("Discarded photo %s", file_name)

    @staticmethod
    def reference_for(file_name: str) -> str:
        return PHOTO_URL_PREFIX + file_name

    def resolve(self, file_name: str) -> Path | None:
        """Map a requested photo name to a stored file, or None.

        Only generated names are accepted, so nothing else in the cache
        directory (the state file included) is reachable this way.
        """
        name = PurePosixPath(file_name.replace("\\", "/")).name
        if not _GENERATED_NAME.match(name):
            return None
        path = self._cache_dir / name
        return path if path.is_file() else None


def _suffix_of(original_filename: str | None) -> str:
    if not original_filename:
        return ""
    suffix = PurePosixPath(original_filename.replace("\\", "/")).suffix.lower()
    return suffix if re.fullmatch(r"\.[a-z0-9]+", suffix) else ""
