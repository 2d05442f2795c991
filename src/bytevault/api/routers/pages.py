"""
bytevault.api.routers.pages

Interactive (browser) endpoints.

Responsibilities:
- Log in with username/password and issue a session cookie.
- Log out by destroying the session.
- Serve the login and dashboard pages, redirecting anonymous visitors.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import FileResponse, RedirectResponse
from pydantic import BaseModel, Field
from starlette.status import HTTP_303_SEE_OTHER

from bytevault.api.deps import vault_state
from bytevault.auth.deps import get_session_principal
from bytevault.auth.models import Denied, Principal, Role
from bytevault.errors import InvalidCredentials
from bytevault.observability.logging import get_logger
from bytevault.state import VaultState

router = APIRouter(tags=["session"])

log = get_logger(__name__)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1, max_length=1024)


class LoginResponse(BaseModel):
    success: bool = True
    redirect: str = "/dashboard"
    username: str
    role: Role


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    state: VaultState = Depends(vault_state),
) -> LoginResponse:
    verified = state.credentials.verify(body.username, body.password)
    if isinstance(verified, Denied):
        log.info("login_failed", username=body.username)
        raise InvalidCredentials()

    cookie_name = state.settings.session_cookie_name
    # A fresh token per login; any session the browser already held is dropped.
    state.sessions.destroy(request.cookies.get(cookie_name))
    token = state.sessions.create(verified)
    response.set_cookie(
        cookie_name,
        token,
        max_age=int(state.sessions.ttl.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=state.settings.env == "prod",
    )
    log.info("login_succeeded", username=verified.username, role=str(verified.role))
    return LoginResponse(username=verified.username, role=verified.role)


@router.get("/logout")
def logout(request: Request, state: VaultState = Depends(vault_state)) -> RedirectResponse:
    cookie_name = state.settings.session_cookie_name
    state.sessions.destroy(request.cookies.get(cookie_name))
    log.info("logout")
    redirect = RedirectResponse("/login", status_code=HTTP_303_SEE_OTHER)
    redirect.delete_cookie(cookie_name)
    return redirect


@router.get("/login", response_model=None)
def login_page(state: VaultState = Depends(vault_state)) -> FileResponse | dict[str, Any]:
    page = _page(state, "login.html")
    if page is not None:
        return page
    return {"detail": "POST a JSON body with username and password to /login"}


@router.get("/dashboard", response_model=None)
def dashboard(
    principal: Principal = Depends(get_session_principal),
    state: VaultState = Depends(vault_state),
) -> FileResponse | dict[str, Any]:
    page = _page(state, "dashboard.html")
    if page is not None:
        return page
    return {"username": principal.username, "role": principal.role}


def _page(state: VaultState, filename: str) -> FileResponse | None:
    static_dir = state.settings.static_dir
    if static_dir is None:
        return None
    path = static_dir / filename
    if not path.is_file():
        return None
    return FileResponse(path, media_type="text/html")


# --- Module Notes -----------------------------------------------------------
# The HTML/JS front-end is not part of this package; point `static_dir` at it.
