"""In-process CSRF token store for the admin area."""

from __future__ import annotations

import hmac
import logging
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(slots=True)
class _StoredToken:
    token: str
    expires_at: float


class CsrfTokenStore:
    """Keeps a single active token per session id.

    Issuing a token replaces whatever the session held before. Expired tokens are
    treated as absent and dropped when observed or when :meth:`sweep` runs.
    """

    def __init__(self, ttl_seconds: int = 3600, clock: Clock = time.time) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._tokens: Dict[str, _StoredToken] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def issue(self, session_id: str) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._tokens[session_id] = _StoredToken(token=token, expires_at=self._clock() + self._ttl)
        return token

    def validate(self, session_id: str, candidate: Optional[str]) -> bool:
        with self._lock:
            return self._matches_locked(session_id, candidate)

    def consume(self, session_id: str, candidate: Optional[str]) -> bool:
        """Validate ``candidate`` and retire it so it cannot be replayed."""
        with self._lock:
            if not self._matches_locked(session_id, candidate):
                return False
            del self._tokens[session_id]
            return True

    def revoke(self, session_id: str) -> None:
        with self._lock:
            self._tokens.pop(session_id, None)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, stored in self._tokens.items() if stored.expires_at <= now]
            for key in expired:
                del self._tokens[key]
        if expired:
            logger.debug("Dropped %s expired CSRF tokens.", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def _matches_locked(self, session_id: str, candidate: Optional[str]) -> bool:
        if not candidate:
            return False
        stored = self._tokens.get(session_id)
        if stored is None:
            return False
        if stored.expires_at <= self._clock():
            del self._tokens[session_id]
            return False
        return hmac.compare_digest(stored.token.encode("utf-8"), candidate.encode("utf-8"))
