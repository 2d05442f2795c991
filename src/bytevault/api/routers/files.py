"""
bytevault.api.routers.files

Programmatic file API (Basic auth or session cookie).

Responsibilities:
- Upload a multipart file into the object store.
- List stored objects.
- Delete a stored object by its derived name.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from bytevault.api.deps import object_store, settings_dep
from bytevault.auth.deps import get_principal
from bytevault.auth.models import Principal
from bytevault.errors import EmptyUpload
from bytevault.services.object_store import ObjectStore
from bytevault.settings import Settings

router = APIRouter(tags=["files"])


class UploadResponse(BaseModel):
    message: str = "File uploaded successfully"
    filename: str
    size: int
    mimetype: str | None = None


class StoredObjectOut(BaseModel):
    name: str
    size: int
    created: datetime
    modified: datetime


class MessageResponse(BaseModel):
    message: str


@router.post("/upload", response_model=UploadResponse)
async def upload(
    file: UploadFile | None = File(default=None),
    principal: Principal = Depends(get_principal),
    store: ObjectStore = Depends(object_store),
    settings: Settings = Depends(settings_dep),
) -> UploadResponse:
    if file is None:
        raise EmptyUpload()
    try:
        obj = await store.put(
            original_name=file.filename,
            chunks=_read_chunks(file, settings.upload_chunk_size),
            content_type=file.content_type,
        )
    finally:
        await file.close()
    return UploadResponse(filename=obj.name, size=obj.size, mimetype=obj.content_type)


@router.get("/files", response_model=list[StoredObjectOut])
async def list_files(
    principal: Principal = Depends(get_principal),
    store: ObjectStore = Depends(object_store),
) -> list[StoredObjectOut]:
    return [
        StoredObjectOut(name=o.name, size=o.size, created=o.created_at, modified=o.modified_at)
        for o in await store.list()
    ]


@router.delete("/files/{name}", response_model=MessageResponse)
async def delete_file(
    name: str,
    principal: Principal = Depends(get_principal),
    store: ObjectStore = Depends(object_store),
) -> MessageResponse:
    await store.delete(name)
    return MessageResponse(message="File deleted successfully")


async def _read_chunks(file: UploadFile, chunk_size: int) -> AsyncIterator[bytes]:
    while chunk := await file.read(chunk_size):
        yield chunk


# --- Module Notes -----------------------------------------------------------
# Role is available on `principal` but every authenticated caller gets the same rights.
