"""Application service: the Inventory Record Store.

The store is the single owner of the record collection and the id
counter. Every operation runs under one lock so a mutation (including
its full-collection persistence write) never interleaves with another
operation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path, PurePosixPath

from ims.application.dto import RecordDTO, RecordUpdate
from ims.domain.exceptions import (
    EntityNotFoundError,
    NoPhotoAssociatedError,
    PhotoFileMissingError,
)
from ims.domain.model.record import InventoryRecord
from ims.domain.repository.record_repository import RecordRepository

LOGGER = logging.getLogger(__name__)


class InventoryStore:

    def __init__(
        self,
        cache_dir: Path,
        repository: RecordRepository | None = None,
    ) -> None:
        """Load the persisted collection, if any.

        ``repository=None`` keeps everything in memory only.
        """
        self._cache_dir = cache_dir
        self._repository = repository
        self._lock = threading.RLock()
        self._records: dict[int, InventoryRecord] = {}

        if repository is not None:
            for record in repository.load_all():
                self._records[record.id] = record
        self._next_id = max(self._records, default=0) + 1

        LOGGER.info(
            "Inventory store ready with %d record(s), next id %d",
            len(self._records), self._next_id,
        )

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    # --- Commands -------------------------------------------------------------

    def create(
        self,
        name: str | None,
        description: str | None = None,
        photo_path: str | None = None,
    ) -> RecordDTO:
        """Register a new item and assign it the next id."""
        with self._mutation():
            record = InventoryRecord.register(
                self._next_id, name, description, photo_path
            )
            self._records[record.id] = record
            self._next_id += 1

        LOGGER.debug("Registered inventory item #%d '%s'", record.id, record.name)
        return RecordDTO.from_record(record)

    def update_fields(self, record_id: int, update: RecordUpdate) -> RecordDTO:
        """Apply a partial update; omitted fields keep their values."""
        with self._mutation():
            record = self._require(record_id)
            if update.name is not None:
                record.rename(update.name)
            if update.description is not None:
                record.describe(update.description)

        LOGGER.debug("Updated fields of inventory item #%d", record_id)
        return RecordDTO.from_record(record)

    def update_photo(self, record_id: int, photo_path: str | None) -> RecordDTO:
        with self._mutation():
            record = self._require(record_id)
            record.attach_photo(photo_path)

        LOGGER.debug("Attached photo %s to inventory item #%d", photo_path, record_id)
        return RecordDTO.from_record(record)

    def delete(self, record_id: int) -> RecordDTO:
        """Remove a record and return it. Its photo file stays on disk."""
        with self._mutation():
            record = self._require(record_id)
            del self._records[record_id]

        LOGGER.debug("Deleted inventory item #%d", record_id)
        return RecordDTO.from_record(record)

    # --- Queries --------------------------------------------------------------

    def list_all(self) -> list[RecordDTO]:
        with self._lock:
            return [RecordDTO.from_record(r) for r in self._records.values()]

    def get(self, record_id: int) -> RecordDTO:
        with self._lock:
            return RecordDTO.from_record(self._require(record_id))

    def find_photo_path(self, record_id: int) -> Path:
        """Resolve a record's photo reference to a file in the cache directory.

        Only the base name of the stored reference is used, so a reference
        can never point outside the cache directory.
        """
        with self._lock:
            record = self._require(record_id)
            if not record.photo_path:
                raise NoPhotoAssociatedError(
                    f"Inventory item #{record_id} has no photo"
                )

            file_name = PurePosixPath(record.photo_path.replace("\\", "/")).name
            path = self._cache_dir / file_name
            if file_name in ("", ".", "..") or not path.is_file():
                LOGGER.warning(
                    "Photo file for inventory item #%d is missing: %s",
                    record_id, record.photo_path,
                )
                raise PhotoFileMissingError(
                    f"Photo file for inventory item #{record_id} is missing"
                )
            return path.resolve()

    def search(self, record_id: int, include_photo: bool = False) -> RecordDTO | Path:
        """Look a record up by id, optionally returning its photo instead."""
        if include_photo:
            return self.find_photo_path(record_id)
        return self.get(record_id)

    # --- Internals ------------------------------------------------------------

    def _require(self, record_id: int) -> InventoryRecord:
        record = self._records.get(record_id)
        if record is None:
            raise EntityNotFoundError(f"Inventory item #{record_id} not found")
        return record

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        """Hold the lock across a change and its persistence write.

        If either fails, the collection and counter are restored.
        """
        with self._lock:
            snapshot = {rid: replace(r) for rid, r in self._records.items()}
            next_id = self._next_id
            try:
                yield
                self._persist()
            except Exception:
                self._records = snapshot
                self._next_id = next_id
                raise

    def _persist(self) -> None:
        if self._repository is None:
            return
        self._repository.replace_all(list(self._records.values()))
