"""
bytevault.services.object_store

Object lifecycle service (transaction + blob owner).

Responsibilities:
- put: stream an upload into a temp blob, derive its name, publish and index it.
- list: return every committed index row.
- delete: remove the index row and its blob as one unit.
- recover: reconcile leftovers from a crashed process at startup.

A blob is only published while its index row is being committed. Failures
roll both back, and a cancelled caller waits for an in-flight publish and
commit to settle, so callers never see an indexed object without its blob.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bytevault.db.models import StoredObject
from bytevault.db.repositories.objects import ObjectRepo
from bytevault.errors import EmptyUpload, NotFound, StorageFailure
from bytevault.observability.logging import get_logger
from bytevault.storage.blobs import BlobStore
from bytevault.storage.locks import KeyedLocks
from bytevault.storage.naming import NameAllocator, safe_basename

log = get_logger(__name__)


class ObjectStore:
    def __init__(
        self,
        *,
        session: AsyncSession,
        blobs: BlobStore,
        names: NameAllocator,
        locks: KeyedLocks,
    ) -> None:
        self._session = session
        self._blobs = blobs
        self._names = names
        self._locks = locks
        self._repo = ObjectRepo(session)

    async def put(
        self,
        *,
        original_name: str | None,
        chunks: AsyncIterator[bytes],
        content_type: str | None = None,
    ) -> StoredObject:
        try:
            temp, size = await self._blobs.receive(chunks)
        except OSError as e:
            log.error("upload_write_failed", error=str(e))
            raise StorageFailure("File upload failed") from e

        if size == 0:
            self._blobs.discard(temp)
            raise EmptyUpload()

        marker, name = self._names.derive(original_name)
        obj = await _run_to_completion(
            self._publish_and_index(
                temp=temp,
                name=name,
                marker=marker,
                original_name=safe_basename(original_name),
                size=size,
                content_type=content_type,
            )
        )
        log.info("object_stored", name=name, size=size)
        return obj

    async def _publish_and_index(
        self,
        *,
        temp: Path,
        name: str,
        marker: int,
        original_name: str,
        size: int,
        content_type: str | None,
    ) -> StoredObject:
        published: Path | None = None
        committed = False
        # The name is fresh, so this only orders put against a delete of the same name.
        async with self._locks.hold(name):
            try:
                published = await asyncio.to_thread(self._blobs.publish, temp, name)
                obj = await self._repo.add(
                    name=name,
                    marker=marker,
                    original_name=original_name,
                    size=size,
                    content_type=content_type,
                    created_at=_marker_time(marker),
                    modified_at=self._blobs.modified_at(name),
                )
                await self._session.commit()
                committed = True
            except (OSError, SQLAlchemyError) as e:
                log.error("upload_store_failed", name=name, error=str(e))
                raise StorageFailure("File upload failed") from e
            finally:
                if not committed:
                    await self._session.rollback()
                    self._blobs.discard(published)
                    self._blobs.discard(temp)
        return obj

    async def list(self) -> list[StoredObject]:
        try:
            return await self._repo.list_all()
        except SQLAlchemyError as e:
            log.error("list_failed", error=str(e))
            raise StorageFailure("Error listing files") from e

    async def delete(self, name: str) -> None:
        async with self._locks.hold(name):
            try:
                obj = await self._repo.get(name)
            except SQLAlchemyError as e:
                raise StorageFailure("Error deleting file") from e
            if obj is None:
                raise NotFound()
            stashed = await _run_to_completion(self._unindex(obj))

        try:
            self._blobs.discard(stashed)
        except OSError as e:
            # The object is gone from the index; recover() reaps the stash later.
            log.warning("stash_cleanup_failed", name=name, error=str(e))
        log.info("object_deleted", name=name)

    async def _unindex(self, obj: StoredObject) -> Path | None:
        name = obj.name
        stashed: Path | None = None
        committed = False
        try:
            stashed = await asyncio.to_thread(self._blobs.stash, name)
            await self._repo.delete(obj)
            await self._session.commit()
            committed = True
        except (OSError, SQLAlchemyError) as e:
            log.error("delete_failed", name=name, error=str(e))
            raise StorageFailure("Error deleting file") from e
        finally:
            if not committed:
                await self._session.rollback()
                if stashed is not None:
                    self._blobs.restore(stashed, name)
        return stashed

    async def recover(self) -> None:
        """Drop orphan temp files, settle stashed blobs, reap unindexed blobs, seed names."""
        self._blobs.ensure_root()
        temps, stashed = self._blobs.leftovers()
        for temp in temps:
            self._blobs.discard(temp)

        indexed = await self._repo.names()
        for path, name in stashed:
            if name in indexed and not self._blobs.path_for(name).exists():
                # Delete never committed; put the blob back.
                self._blobs.restore(path, name)
            else:
                self._blobs.discard(path)

        orphans = [path for path in self._blobs.published() if path.name not in indexed]
        for path in orphans:
            self._blobs.discard(path)

        self._names.seed(await self._repo.max_marker())
        log.info(
            "object_store_recovered",
            objects=len(indexed),
            temp_files_removed=len(temps),
            stashes_settled=len(stashed),
            orphans_removed=len(orphans),
        )


async def _run_to_completion(coro):
    """
    Await `coro` in its own task that caller cancellation cannot interrupt.

    Blob moves and index commits must land together; if the caller is
    cancelled, wait for the task to settle before propagating.
    """

    task = asyncio.ensure_future(coro)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        await asyncio.wait({task})
        if not task.cancelled():
            # Retrieve any failure so it is not reported as unhandled.
            task.exception()
        raise


def _marker_time(marker: int) -> datetime:
    return datetime.fromtimestamp(marker / 1000, tz=UTC).replace(tzinfo=None)


# --- Module Notes -----------------------------------------------------------
# One ObjectStore is built per request around that request's AsyncSession; the
# blob store, allocator and lock table are process-wide (see `bytevault.state`).
