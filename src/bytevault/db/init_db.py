"""
bytevault.db.init_db

DB initialization helpers.

Responsibilities:
- Create the index table on startup when the schema is missing.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from bytevault.db import models  # noqa: F401  # registers tables on Base.metadata
from bytevault.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Bootstrap: create tables if they don't exist.
    """

    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Controlled by `Settings.auto_create_schema`.
