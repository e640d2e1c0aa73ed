"""Background pruning of rate limit state.

The janitor runs on the event loop that serves requests, so its pruning
never interleaves with an admission decision. Cache sweeping is not its job;
the content cache sweeps itself when it grows past its high-water mark.
"""

import asyncio
import logging

from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class Janitor:
    """Periodically prunes idle rate limit state.

    Lifecycle: ``start()`` from the application lifespan, ``stop()`` on
    shutdown. ``run_once()`` performs a single pass and is what each tick calls.
    """

    def __init__(self, rate_limiter: RateLimiter, interval: float | None = None) -> None:
        """Initialize the janitor.

        Args:
            rate_limiter: Limiter whose state is pruned (required).
            interval: Seconds between passes. Defaults to the rate limit window.
        """
        self._rate_limiter = rate_limiter
        self._interval = interval or rate_limiter.window_seconds
        self._task: asyncio.Task | None = None

    def run_once(self) -> int:
        removed = self._rate_limiter.prune()
        if removed:
            logger.debug("Janitor removed %d idle rate limit entries", removed)
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.run_once()
            except Exception:
                logger.exception("Janitor pass failed")

    def start(self) -> None:
        """Schedule the janitor on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel the janitor and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
