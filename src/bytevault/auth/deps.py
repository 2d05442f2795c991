"""
bytevault.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Collect a request's Basic-auth header and session cookie.
- Run the auth gate for API and interactive routes.
- Turn denials into 401 challenges and unauthenticated page loads into redirects.
"""

from __future__ import annotations

import base64

from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param

from bytevault.api.deps import vault_state
from bytevault.auth.models import (
    Authorized,
    DenialReason,
    Denied,
    InlineCredentials,
    OperationClass,
    Principal,
    RedirectToLogin,
    RequestCredentials,
)
from bytevault.errors import AuthenticationRequired, InvalidCredentials
from bytevault.observability.logging import get_logger
from bytevault.state import VaultState

BASIC_REALM = "ByteVault API"

log = get_logger(__name__)


class LoginRedirect(Exception):
    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def challenge_headers() -> dict[str, str]:
    return {"WWW-Authenticate": f'Basic realm="{BASIC_REALM}"'}


def request_credentials(
    request: Request,
    state: VaultState = Depends(vault_state),
) -> RequestCredentials:
    inline, malformed = parse_basic_authorization(request.headers.get("authorization"))
    return RequestCredentials(
        inline=inline,
        malformed_inline=malformed,
        session_token=request.cookies.get(state.settings.session_cookie_name),
    )


def parse_basic_authorization(header: str | None) -> tuple[InlineCredentials | None, bool]:
    """
    Decode an `Authorization: Basic ...` header.

    Returns (credentials, malformed). Other schemes and a missing header give
    (None, False); a Basic header that is not base64 `user:password` gives
    (None, True) so the gate treats it as a rejected inline credential.
    """

    scheme, param = get_authorization_scheme_param(header)
    if scheme.lower() != "basic":
        return None, False
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except ValueError:
        # binascii.Error, UnicodeDecodeError and non-ASCII input all land here.
        return None, True
    username, separator, password = decoded.partition(":")
    if not separator:
        return None, True
    return InlineCredentials(username=username, password=password), False


# Sync dependencies: FastAPI runs them in its threadpool, keeping bcrypt off the event loop.
def get_principal(
    creds: RequestCredentials = Depends(request_credentials),
    state: VaultState = Depends(vault_state),
) -> Principal:
    outcome = state.gate.authorize(creds, OperationClass.api)
    if isinstance(outcome, Authorized):
        return outcome.principal

    reason = outcome.reason if isinstance(outcome, Denied) else DenialReason.authentication_required
    username = creds.inline.username if creds.inline else None
    log.info("api_auth_failed", username=username, reason=str(reason))
    if reason is DenialReason.invalid_credentials:
        raise InvalidCredentials(headers=challenge_headers())
    raise AuthenticationRequired(headers=challenge_headers())


def get_session_principal(
    creds: RequestCredentials = Depends(request_credentials),
    state: VaultState = Depends(vault_state),
) -> Principal:
    outcome = state.gate.authorize(creds, OperationClass.interactive)
    if isinstance(outcome, Authorized):
        return outcome.principal
    location = outcome.location if isinstance(outcome, RedirectToLogin) else "/login"
    raise LoginRedirect(location)


# --- Module Notes -----------------------------------------------------------
# Routes receive the Principal as an explicit parameter; nothing is attached to
# the request object.
