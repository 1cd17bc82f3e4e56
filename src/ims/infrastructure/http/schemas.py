"""Request/response bodies for the HTTP API (also drive the generated docs)."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InventoryItemOut(BaseModel):
    id: int = Field(examples=[1])
    inventory_name: str = Field(examples=["Drill"])
    description: str = Field(examples=["Cordless drill"])
    photoPath: str | None = Field(
        default=None, examples=["/inventory-photo/1729350000123456789.jpg"]
    )


class InventoryItemUpdate(BaseModel):
    """Partial update; omitted (or null) fields keep their current value."""

    inventory_name: str | None = None
    description: str | None = None


class DeletedOut(BaseModel):
    message: str
    id: int


class ErrorOut(BaseModel):
    detail: str
