"""
bytevault.errors

Domain error taxonomy.

Responsibilities:
- Define the failures routes and the object store can raise.
- Carry the HTTP status (and headers) the API layer maps each failure to.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base class for request-scoped vault failures."""

    status_code: int = 500
    message: str = "Vault error"

    def __init__(
        self, message: str | None = None, *, headers: dict[str, str] | None = None
    ) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message
        self.headers = headers


class EmptyUpload(VaultError):
    status_code = 400
    message = "No file uploaded"


class NotFound(VaultError):
    status_code = 404
    message = "File not found"


class StorageFailure(VaultError):
    status_code = 500
    message = "Storage failure"


class AuthenticationRequired(VaultError):
    status_code = 401
    message = "Authentication required"


class InvalidCredentials(VaultError):
    status_code = 401
    message = "Invalid credentials"


class ConfigurationError(Exception):
    """Raised at startup when settings cannot produce a working vault."""


# --- Module Notes -----------------------------------------------------------
# The auth gate itself returns outcomes rather than raising; `auth.deps` turns
# denials into the 401 errors above.
