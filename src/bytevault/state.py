"""
bytevault.state

Process-wide vault state.

Responsibilities:
- Build the credential store, session store, auth gate, blob store, name
  allocator, lock table and DB engine once per process.
- Dispose of them on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bytevault.auth.credentials import CredentialStore
from bytevault.auth.gate import AuthGate
from bytevault.auth.sessions import SessionStore
from bytevault.db.init_db import init_db
from bytevault.db.session import create_engine, create_sessionmaker
from bytevault.services.object_store import ObjectStore
from bytevault.settings import Settings
from bytevault.storage.blobs import BlobStore
from bytevault.storage.locks import KeyedLocks
from bytevault.storage.naming import NameAllocator


@dataclass(slots=True)
class VaultState:
    settings: Settings
    credentials: CredentialStore
    sessions: SessionStore
    gate: AuthGate
    blobs: BlobStore
    names: NameAllocator
    locks: KeyedLocks
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]

    def object_store(self, session: AsyncSession) -> ObjectStore:
        return ObjectStore(session=session, blobs=self.blobs, names=self.names, locks=self.locks)

    async def close(self) -> None:
        # Dispose the engine to close pools/FDs gracefully.
        await self.engine.dispose()


def build_state(settings: Settings) -> VaultState:
    """Construct state without touching disk or DB; see `open_state`."""
    credentials = CredentialStore.from_settings(settings)
    sessions = SessionStore(ttl=timedelta(seconds=settings.session_ttl_seconds))
    engine = create_engine(settings)
    return VaultState(
        settings=settings,
        credentials=credentials,
        sessions=sessions,
        gate=AuthGate(credentials=credentials, sessions=sessions),
        blobs=BlobStore(settings.storage_dir),
        names=NameAllocator(),
        locks=KeyedLocks(),
        engine=engine,
        sessionmaker=create_sessionmaker(engine),
    )


async def open_state(settings: Settings) -> VaultState:
    state = build_state(settings)
    state.blobs.ensure_root()
    if settings.auto_create_schema:
        await init_db(state.engine)
    async with state.sessionmaker() as session:
        await state.object_store(session).recover()
    return state


# --- Module Notes -----------------------------------------------------------
# Handlers reach this object through `api.deps.vault_state`; nothing imports a
# module-level instance.
