from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from .csrf import CsrfTokenStore
from .rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


class SecurityState:
    """Process-wide request-guard state: CSRF tokens and rate limiters.

    Created by the application lifespan, which starts and stops the CSRF sweeper.
    Rate-limit counters expire inside their own storage. Handlers receive this
    object through the application container.
    """

    def __init__(
        self,
        csrf_store: CsrfTokenStore,
        limiters: Dict[str, FixedWindowRateLimiter],
        *,
        sweep_interval_seconds: float = 300,
    ) -> None:
        self.csrf_store = csrf_store
        self._limiters = dict(limiters)
        self._sweep_interval = sweep_interval_seconds
        self._task: Optional[asyncio.Task[None]] = None
        self._shutdown = asyncio.Event()

    def limiter(self, name: str) -> FixedWindowRateLimiter:
        try:
            return self._limiters[name]
        except KeyError as exc:
            raise KeyError(f"Unknown rate limiter: {name}") from exc

    @property
    def limiter_names(self) -> List[str]:
        return sorted(self._limiters)

    def sweep(self) -> int:
        return self.csrf_store.sweep()

    async def start(self) -> None:
        if self._task is not None:
            return
        logger.info("Starting security sweeper every %ss.", self._sweep_interval)
        self._shutdown.clear()
        self._task = asyncio.get_running_loop().create_task(self._run(), name="security-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        logger.info("Stopping security sweeper.")
        self._shutdown.set()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None

    async def _run(self) -> None:
        while not self._shutdown.is_set():
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=self._sweep_interval)
            except asyncio.TimeoutError:
                pass
            if self._shutdown.is_set():
                break
            try:
                removed = self.sweep()
            except Exception:  # pragma: no cover
                logger.exception("Security sweep failed.")
                continue
            if removed:
                logger.debug("Security sweep removed %s expired entries.", removed)
