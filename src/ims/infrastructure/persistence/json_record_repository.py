"""JSON-file-backed implementation of RecordRepository.

The whole record set lives in one flat JSON array and is rewritten in
full on every save.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from ims.domain.exceptions import MissingRequiredFieldError, PersistenceError
from ims.domain.model.record import InventoryRecord
from ims.domain.repository.record_repository import RecordRepository

LOGGER = logging.getLogger(__name__)


class JsonRecordRepository(RecordRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- RecordRepository interface -------------------------------------------

    def load_all(self) -> list[InventoryRecord]:
        if not self._file_path.exists():
            LOGGER.info("No state file at %s, starting empty", self._file_path)
            return []

        try:
            records = [self._to_domain(raw) for raw in self._load_raw()]
        except (
            AttributeError, KeyError, TypeError, ValueError, MissingRequiredFieldError
        ) as exc:
            # json.JSONDecodeError is a ValueError
            raise PersistenceError(
                f"State file {self._file_path} is not a valid record array: {exc}"
            ) from exc

        if len({r.id for r in records}) != len(records):
            raise PersistenceError(f"State file {self._file_path} has duplicate ids")
        return records

    def replace_all(self, records: list[InventoryRecord]) -> None:
        self._persist_raw([self._to_raw(r) for r in records])
        LOGGER.debug("Wrote %d record(s) to %s", len(records), self._file_path)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: InventoryRecord) -> dict:
        return {
            "id": record.id,
            "inventory_name": record.name,
            "description": record.description,
            "photoPath": record.photo_path,
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryRecord:
        record_id = raw["id"]
        if not isinstance(record_id, int) or isinstance(record_id, bool) or record_id < 1:
            raise ValueError(f"invalid record id {record_id!r}")
        name = raw["inventory_name"]
        if not isinstance(name, str):
            raise ValueError(f"invalid inventory_name {name!r} for record {record_id}")
        description = raw.get("description", "")
        if not isinstance(description, str):
            raise ValueError(f"invalid description {description!r} for record {record_id}")
        photo_path = raw.get("photoPath")
        if photo_path is not None and (not isinstance(photo_path, str) or not photo_path):
            raise ValueError(f"invalid photoPath {photo_path!r} for record {record_id}")
        return InventoryRecord.register(
            record_id=record_id,
            name=name,
            description=description,
            photo_path=photo_path,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        data = json.loads(self._file_path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("top-level value is not an array")
        return data

    def _persist_raw(self, records: list[dict]) -> None:
        """Write to a temp file next to the target, then rename over it."""
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(records, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
