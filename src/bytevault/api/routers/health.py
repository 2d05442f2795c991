"""
bytevault.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness check (`/healthz`).
- Provide readiness check (`/readyz`) checking the index DB and blob directory.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from bytevault.api.deps import db_session, vault_state
from bytevault.state import VaultState

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz", response_model=None)
async def readyz(
    session: AsyncSession = Depends(db_session),
    state: VaultState = Depends(vault_state),
) -> dict[str, str] | JSONResponse:
    await session.execute(text("SELECT 1"))
    if not state.blobs.root.is_dir():
        return JSONResponse(
            {"status": "unavailable", "reason": "storage directory missing"},
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
        )
    return {"status": "ready"}
