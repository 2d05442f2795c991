"""
bytevault.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the process-wide `VaultState` held on app.state.
- Provide request-scoped DB sessions and object store services.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bytevault.services.object_store import ObjectStore
from bytevault.settings import Settings
from bytevault.state import VaultState


def vault_state(request: Request) -> VaultState:
    # Built in the app lifespan (`bytevault.api.app.create_app`).
    return request.app.state.vault  # type: ignore[attr-defined]


def settings_dep(state: VaultState = Depends(vault_state)) -> Settings:
    return state.settings


async def db_session(state: VaultState = Depends(vault_state)) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed by the object store.
    async with state.sessionmaker() as session:
        yield session


def object_store(
    session: AsyncSession = Depends(db_session),
    state: VaultState = Depends(vault_state),
) -> ObjectStore:
    return state.object_store(session)
