"""InventoryRecord entity — one tracked item.

Identity is assigned by the InventoryStore; the entity itself only
guards its own field rules.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.exceptions import MissingRequiredFieldError, NoPhotoSuppliedError


@dataclass
class InventoryRecord:
    """A registered inventory item.

    Invariants:
    - ``name`` is never blank
    - ``photo_path`` is either ``None`` or a non-empty reference
    """

    id: int
    name: str
    description: str = ""
    photo_path: str | None = None

    @classmethod
    def register(
        cls,
        record_id: int,
        name: str | None,
        description: str | None = None,
        photo_path: str | None = None,
    ) -> InventoryRecord:
        """Build a new record, rejecting a missing or blank name."""
        return cls(
            id=record_id,
            name=require_name(name),
            description=description or "",
            photo_path=photo_path or None,
        )

    def rename(self, name: str | None) -> None:
        self.name = require_name(name)

    def describe(self, description: str | None) -> None:
        self.description = description or ""

    def attach_photo(self, photo_path: str | None) -> None:
        """Point the record at a new photo.

        The previous photo file is left where it is.
        """
        if not photo_path:
            raise NoPhotoSuppliedError("No photo was supplied")
        self.photo_path = photo_path


def require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise MissingRequiredFieldError("Inventory name is required")
    return name
