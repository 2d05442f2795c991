"""
tests.conftest

Shared fixtures.

Responsibilities:
- Build isolated settings (temp DB + blob dir, cheap bcrypt) per test.
- Provide an opened `VaultState` and an in-process HTTP client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from bytevault.api.app import create_app
from bytevault.settings import Settings
from bytevault.state import VaultState, open_state

ADMIN = ("admin", "admin-pass")
USER = ("user", "user-pass")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}",
        storage_dir=tmp_path / "uploads",
        admin_username=ADMIN[0],
        admin_password=ADMIN[1],
        user_username=USER[0],
        user_password=USER[1],
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def state(settings: Settings) -> AsyncIterator[VaultState]:
    vault = await open_state(settings)
    try:
        yield vault
    finally:
        await vault.close()


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)

    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
            yield http
