"""Fixed-window request counting on top of ``limits``.

Requests are counted per ``identifier`` in discrete windows of ``window_ms``
aligned to the epoch. A client can therefore spend a full allowance at the end of
one window and another at the start of the next; this burst is inherent to fixed
windows. Counters live in a ``limits`` in-memory storage, which expires them once
their window has passed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from limits import RateLimitItem, RateLimitItemPerSecond, storage, strategies


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset: int
    retry_after_seconds: int


class FixedWindowRateLimiter:
    """Counts requests in buckets keyed by ``identifier:window_index``."""

    def __init__(
        self,
        window_ms: int,
        limit: int,
        *,
        name: str = "default",
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        if window_ms <= 0 or limit <= 0:
            raise ValueError("window_ms and limit must be positive")
        self.name = name
        self.window_ms = window_ms
        self.limit = limit
        self._clock = clock
        self._window_seconds = max(1, -(-window_ms // 1000))
        self._storage = storage.MemoryStorage()
        self._strategy = strategies.FixedWindowRateLimiter(self._storage)
        self._items: Dict[int, RateLimitItem] = {}

    def check(self, identifier: str, limit: Optional[int] = None) -> RateLimitResult:
        allowed = limit if limit is not None else self.limit
        item = self._item(allowed)
        now = self._clock()
        window = now // self.window_ms
        reset = (window + 1) * self.window_ms
        bucket = f"{identifier}:{window}"

        success = self._strategy.hit(item, self.name, bucket)
        remaining = self._strategy.get_window_stats(item, self.name, bucket).remaining if success else 0
        return RateLimitResult(
            success=success,
            limit=allowed,
            remaining=remaining,
            reset=reset,
            retry_after_seconds=max(0, -(-(reset - now) // 1000)),
        )

    def _item(self, allowed: int) -> RateLimitItem:
        item = self._items.get(allowed)
        if item is None:
            item = RateLimitItemPerSecond(allowed, self._window_seconds, namespace="bebaby")
            self._items[allowed] = item
        return item
