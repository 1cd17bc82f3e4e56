"""HTTP request handlers.

Handlers stay thin: pull inputs out of the request, call the store or
the photo store, and shape the result. Domain errors are turned into
status codes by the exception handler registered in ``app.py``.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from fastapi import APIRouter, Body, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse

from ims.application.dto import RecordDTO, RecordUpdate
from ims.application.inventory_store import InventoryStore
from ims.domain.exceptions import EntityNotFoundError, NoPhotoSuppliedError
from ims.domain.model.record import require_name
from ims.infrastructure.http.schemas import (
    DeletedOut,
    ErrorOut,
    InventoryItemOut,
    InventoryItemUpdate,
)
from ims.infrastructure.storage.photo_store import PHOTO_URL_PREFIX, PhotoStore

LOGGER = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

_NOT_FOUND = {404: {"model": ErrorOut, "description": "Item, photo or file not found"}}
_BAD_REQUEST = {400: {"model": ErrorOut, "description": "Required input missing"}}
_PHOTO = {200: {"content": {"image/jpeg": {}}, "description": "Photo bytes"}}

_TRUTHY = {"on", "true", "1", "yes"}

router = APIRouter()


# --- Helpers ------------------------------------------------------------------


def _store(request: Request) -> InventoryStore:
    return request.app.state.inventory_store


def _photos(request: Request) -> PhotoStore:
    return request.app.state.photo_store


def _parse_id(raw: str | None) -> int:
    """Path/form ids that are not positive integers can never match a record."""
    try:
        record_id = int(raw) if raw is not None else 0
    except ValueError:
        record_id = 0
    if record_id < 1:
        raise EntityNotFoundError(f"Inventory item '{raw}' not found")
    return record_id


def _has_upload(photo: UploadFile | None) -> bool:
    return photo is not None and bool(photo.filename)


def _store_upload(request: Request, photo: UploadFile) -> str:
    photos = _photos(request)
    file_name = photos.save(photo.file, photo.filename)
    return photos.reference_for(file_name)


def _photo_response(path: Path) -> FileResponse:
    media_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    return FileResponse(path, media_type=media_type)


def _out(dto: RecordDTO) -> dict:
    return dto.as_dict()


# --- Inventory ----------------------------------------------------------------


@router.post(
    "/register",
    status_code=201,
    response_model=InventoryItemOut,
    responses=_BAD_REQUEST,
    tags=["inventory"],
    summary="Register a new inventory item",
)
def register_item(
    request: Request,
    inventory_name: str | None = Form(None),
    description: str | None = Form(None),
    photo: UploadFile | None = File(None),
):
    """Create an item from a multipart form; the photo is optional."""
    name = require_name(inventory_name)
    if not _has_upload(photo):
        dto = _store(request).create(name=name, description=description)
    else:
        photos = _photos(request)
        file_name = photos.save(photo.file, photo.filename)
        try:
            dto = _store(request).create(
                name=name,
                description=description,
                photo_path=photos.reference_for(file_name),
            )
        except Exception:
            photos.discard(file_name)
            raise
    LOGGER.info("Registered inventory item #%d", dto.id)
    return _out(dto)


@router.get(
    "/inventory",
    response_model=list[InventoryItemOut],
    tags=["inventory"],
    summary="List all inventory items",
)
def list_items(request: Request):
    return [_out(dto) for dto in _store(request).list_all()]


@router.get(
    "/inventory/{item_id}",
    response_model=InventoryItemOut,
    responses=_NOT_FOUND,
    tags=["inventory"],
    summary="Get one inventory item",
)
def get_item(request: Request, item_id: str):
    return _out(_store(request).get(_parse_id(item_id)))


@router.put(
    "/inventory/{item_id}",
    response_model=InventoryItemOut,
    responses=_NOT_FOUND,
    tags=["inventory"],
    summary="Update an item's name and/or description",
)
def update_item(
    request: Request,
    item_id: str,
    payload: InventoryItemUpdate | None = Body(None),
):
    update = RecordUpdate()
    if payload is not None:
        update = RecordUpdate(
            name=payload.inventory_name, description=payload.description
        )
    return _out(_store(request).update_fields(_parse_id(item_id), update))


@router.delete(
    "/inventory/{item_id}",
    response_model=DeletedOut,
    responses=_NOT_FOUND,
    tags=["inventory"],
    summary="Delete an inventory item",
)
def delete_item(request: Request, item_id: str):
    dto = _store(request).delete(_parse_id(item_id))
    LOGGER.info("Deleted inventory item #%d", dto.id)
    return {"message": f"Inventory item #{dto.id} deleted", "id": dto.id}


# --- Photos -------------------------------------------------------------------


@router.get(
    "/inventory/{item_id}/photo",
    response_class=FileResponse,
    responses={**_PHOTO, **_NOT_FOUND},
    tags=["photos"],
    summary="Download an item's photo",
)
def get_item_photo(request: Request, item_id: str):
    return _photo_response(_store(request).find_photo_path(_parse_id(item_id)))


@router.put(
    "/inventory/{item_id}/photo",
    response_model=InventoryItemOut,
    responses={**_NOT_FOUND, **_BAD_REQUEST},
    tags=["photos"],
    summary="Replace an item's photo",
)
def update_item_photo(
    request: Request,
    item_id: str,
    photo: UploadFile | None = File(None),
):
    store = _store(request)
    record_id = _parse_id(item_id)
    store.get(record_id)  # unknown id is 404 even when no photo was sent
    if not _has_upload(photo):
        raise NoPhotoSuppliedError("No photo was supplied")
    return _out(store.update_photo(record_id, _store_upload(request, photo)))


@router.get(
    PHOTO_URL_PREFIX + "{file_name}",
    response_class=FileResponse,
    responses={**_PHOTO, **_NOT_FOUND},
    tags=["photos"],
    summary="Serve a stored photo by file name",
)
def serve_photo(request: Request, file_name: str):
    path = _photos(request).resolve(file_name)
    if path is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    return _photo_response(path)


# --- Search -------------------------------------------------------------------


@router.post(
    "/search",
    responses={
        200: {
            "model": InventoryItemOut,
            "content": {"image/jpeg": {}},
            "description": "The item, or its photo when requested",
        },
        **_NOT_FOUND,
    },
    tags=["inventory"],
    summary="Find an item by id, optionally returning its photo",
)
def search_item(
    request: Request,
    id: str | None = Form(None),
    includePhoto: str | None = Form(None),
    has_photo: str | None = Form(None),
):
    flag = includePhoto if includePhoto is not None else has_photo
    include_photo = (flag or "").strip().lower() in _TRUTHY
    result = _store(request).search(_parse_id(id), include_photo=include_photo)
    if isinstance(result, Path):
        return _photo_response(result)
    return _out(result)


# --- Forms --------------------------------------------------------------------


@router.get("/RegisterForm.html", response_class=FileResponse, include_in_schema=False)
def register_form():
    return FileResponse(STATIC_DIR / "RegisterForm.html", media_type="text/html")


@router.get("/SearchForm.html", response_class=FileResponse, include_in_schema=False)
def search_form():
    return FileResponse(STATIC_DIR / "SearchForm.html", media_type="text/html")
