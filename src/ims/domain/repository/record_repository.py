"""Abstract repository for the inventory record set.

Defined in the domain layer so the domain never depends on
infrastructure. The store owns the live collection; a repository only
holds its durable form and is always written as a whole.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.model.record import InventoryRecord


class RecordRepository(ABC):

    @abstractmethod
    def load_all(self) -> list[InventoryRecord]:
        """Return every persisted record in insertion order ([] if none)."""

    @abstractmethod
    def replace_all(self, records: list[InventoryRecord]) -> None:
        """Overwrite the durable form with exactly ``records``."""
