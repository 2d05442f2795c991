"""
bytevault.auth.gate

Request-time authorization decision.

Responsibilities:
- Combine inline credentials and session tokens into a single outcome.
- Keep the decision order in one place so every route behaves the same.
"""

from __future__ import annotations

from bytevault.auth.credentials import CredentialStore
from bytevault.auth.models import (
    Authorized,
    AuthOutcome,
    DenialReason,
    Denied,
    OperationClass,
    RedirectToLogin,
    RequestCredentials,
)
from bytevault.auth.sessions import SessionStore


class AuthGate:
    def __init__(self, *, credentials: CredentialStore, sessions: SessionStore) -> None:
        self._credentials = credentials
        self._sessions = sessions

    def authorize(
        self,
        creds: RequestCredentials,
        operation_class: OperationClass,
    ) -> AuthOutcome:
        """
        First match wins:
        1. inline credentials that verify
        2. a session token that resolves
        3. API class -> Denied (InvalidCredentials if inline creds were rejected)
        4. interactive class -> RedirectToLogin
        """

        rejected_inline = creds.malformed_inline
        if creds.inline is not None:
            verified = self._credentials.verify(creds.inline.username, creds.inline.password)
            if not isinstance(verified, Denied):
                return Authorized(verified)
            rejected_inline = True

        principal = self._sessions.resolve(creds.session_token)
        if principal is not None:
            return Authorized(principal)

        if operation_class is OperationClass.api:
            if rejected_inline:
                return Denied(DenialReason.invalid_credentials)
            return Denied(DenialReason.authentication_required)
        return RedirectToLogin()


# --- Module Notes -----------------------------------------------------------
# Inline credentials take priority so a single endpoint serves scripts and
# browsers alike. A rejected inline credential still falls through to the session.
