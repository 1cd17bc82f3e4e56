"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the store and the HTTP/CLI layers without
handing out the live records the store owns.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.model.record import InventoryRecord


@dataclass(frozen=True)
class RecordUpdate:
    """Input: a partial update. ``None`` means "leave unchanged"."""

    name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class RecordDTO:
    """Output: a single record as shown to clients."""

    id: int
    name: str
    description: str
    photo_path: str | None

    @classmethod
    def from_record(cls, record: InventoryRecord) -> RecordDTO:
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            photo_path=record.photo_path,
        )

    def as_dict(self) -> dict:
        """Wire shape, shared with the persisted state file."""
        return {
            "id": self.id,
            "inventory_name": self.name,
            "description": self.description,
            "photoPath": self.photo_path,
        }
