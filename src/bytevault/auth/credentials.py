"""
bytevault.auth.credentials

Credential store and verifier.

Responsibilities:
- Hold the two configured principals with bcrypt-hashed secrets.
- Verify a (username, password) pair in constant time and resolve its role.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import bcrypt
from pydantic import SecretStr

from bytevault.auth.models import DenialReason, Denied, Principal, Role
from bytevault.errors import ConfigurationError
from bytevault.settings import Settings


def hash_password(password: str, *, rounds: int = 12) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    # bcrypt.checkpw compares digests in constant time.
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in configuration or a password over bcrypt's input limit.
        return False


@dataclass(frozen=True, slots=True)
class Credential:
    principal: Principal
    password_hash: str = field(repr=False)


class CredentialStore:
    """
    Fixed table of exactly two credentials keyed by role.

    Lookups never mutate state, so concurrent verification needs no locking.
    """

    def __init__(self, *, admin: Credential, user: Credential, rounds: int = 12) -> None:
        if admin.principal.role is not Role.admin or user.principal.role is not Role.user:
            raise ConfigurationError("credential roles do not match their slots")
        if admin.principal.username == user.principal.username:
            raise ConfigurationError("admin and user principals must have distinct usernames")
        self._by_role: dict[Role, Credential] = {Role.admin: admin, Role.user: user}
        # Compared against for unknown usernames so the miss path costs one bcrypt check too.
        self._decoy_hash = hash_password("bytevault-decoy", rounds=rounds)

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialStore:
        rounds = settings.bcrypt_rounds
        return cls(
            admin=Credential(
                principal=Principal(username=settings.admin_username, role=Role.admin),
                password_hash=_resolve_hash(
                    "admin", settings.admin_password, settings.admin_password_hash, rounds
                ),
            ),
            user=Credential(
                principal=Principal(username=settings.user_username, role=Role.user),
                password_hash=_resolve_hash(
                    "user", settings.user_password, settings.user_password_hash, rounds
                ),
            ),
            rounds=rounds,
        )

    def lookup(self, username: str) -> Credential | None:
        for credential in self._by_role.values():
            if credential.principal.username == username:
                return credential
        return None

    def verify(self, username: str, password: str) -> Principal | Denied:
        credential = self.lookup(username)
        if credential is None:
            check_password(password, self._decoy_hash)
            return Denied(DenialReason.invalid_credentials)
        if not check_password(password, credential.password_hash):
            return Denied(DenialReason.invalid_credentials)
        return credential.principal


def _resolve_hash(
    slot: str,
    password: SecretStr | None,
    password_hash: SecretStr | None,
    rounds: int,
) -> str:
    if password_hash is not None and password_hash.get_secret_value():
        return password_hash.get_secret_value()
    if password is not None and password.get_secret_value():
        return hash_password(password.get_secret_value(), rounds=rounds)
    raise ConfigurationError(f"no password configured for the {slot} principal")


# --- Module Notes -----------------------------------------------------------
# Plaintext passwords only exist in Settings; the store keeps bcrypt hashes.
