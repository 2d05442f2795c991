"""
bytevault.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
- Define the role enum and the auth gate's outcome types.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Role(enum.StrEnum):
    admin = "admin"
    user = "user"


class OperationClass(enum.StrEnum):
    # API callers get a credential challenge; interactive callers get redirected.
    api = "api"
    interactive = "interactive"


class DenialReason(enum.StrEnum):
    authentication_required = "AuthenticationRequired"
    invalid_credentials = "InvalidCredentials"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.
    """

    username: str
    role: Role


@dataclass(frozen=True, slots=True)
class InlineCredentials:
    username: str
    password: str


@dataclass(frozen=True, slots=True)
class RequestCredentials:
    """Everything a request presented that could authenticate it."""

    inline: InlineCredentials | None = None
    # An Authorization: Basic header that did not decode to user:password.
    malformed_inline: bool = False
    session_token: str | None = None


@dataclass(frozen=True, slots=True)
class Authorized:
    principal: Principal


@dataclass(frozen=True, slots=True)
class Denied:
    reason: DenialReason


@dataclass(frozen=True, slots=True)
class RedirectToLogin:
    location: str = "/login"


AuthOutcome = Authorized | Denied | RedirectToLogin


# --- Module Notes -----------------------------------------------------------
# Role is carried on every Principal but no route differentiates on it.
