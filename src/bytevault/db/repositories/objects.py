"""
bytevault.db.repositories.objects

Repository for `StoredObject` index rows.

Responsibilities:
- Insert, fetch, list and delete index rows.
- Report the largest marker so name allocation survives restarts.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bytevault.db.models import StoredObject


class ObjectRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        name: str,
        marker: int,
        original_name: str,
        size: int,
        content_type: str | None,
        created_at: datetime,
        modified_at: datetime,
    ) -> StoredObject:
        obj = StoredObject(
            name=name,
            marker=marker,
            original_name=original_name,
            size=size,
            content_type=content_type,
            created_at=created_at,
            modified_at=modified_at,
        )
        self._session.add(obj)
        await self._session.flush()
        return obj

    async def get(self, name: str) -> StoredObject | None:
        return await self._session.get(StoredObject, name)

    async def list_all(self) -> list[StoredObject]:
        stmt = select(StoredObject).order_by(StoredObject.marker, StoredObject.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def names(self) -> set[str]:
        return set((await self._session.execute(select(StoredObject.name))).scalars().all())

    async def delete(self, obj: StoredObject) -> None:
        await self._session.delete(obj)
        await self._session.flush()

    async def max_marker(self) -> int:
        stmt = select(func.max(StoredObject.marker))
        return int((await self._session.execute(stmt)).scalar_one_or_none() or 0)
