"""
bytevault.auth.sessions

Server-side session store.

Responsibilities:
- Mint unguessable opaque tokens bound to a Principal with a fixed TTL.
- Resolve tokens, treating expired sessions as absent (lazy invalidation).
- Destroy sessions idempotently.
"""

from __future__ import annotations

import secrets
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from bytevault.auth.models import Principal


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class Session:
    token: str
    principal: Principal
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionStore:
    """
    In-memory token -> Session map.

    Sessions are immutable once stored, so a lookup either sees a complete
    Session or nothing. The lock serializes writers against each other and
    against the dict reads that race them.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        # Sessions whose cookie never comes back are swept from create().
        self._purge_every = min(ttl, timedelta(minutes=5))
        self._last_purge = clock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def create(self, principal: Principal) -> str:
        now = self._clock()
        with self._lock:
            if now - self._last_purge >= self._purge_every:
                self._purge_locked(now)
            token = secrets.token_urlsafe(32)
            while token in self._sessions:
                token = secrets.token_urlsafe(32)
            self._sessions[token] = Session(
                token=token,
                principal=principal,
                created_at=now,
                expires_at=now + self._ttl,
            )
        return token

    def resolve(self, token: str | None) -> Principal | None:
        if not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.is_expired(self._clock()):
                del self._sessions[token]
                return None
            return session.principal

    def destroy(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        """Drop every expired session; returns how many were removed."""
        now = self._clock()
        with self._lock:
            return self._purge_locked(now)

    def _purge_locked(self, now: datetime) -> int:
        expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        self._last_purge = now
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# --- Module Notes -----------------------------------------------------------
# Sessions do not survive a restart; clients simply log in again.
