"""Sliding window rate limiting keyed by client identifier.

All state operations are synchronous and never await, so on a single
asyncio event loop each ``admit`` runs atomically with respect to other
requests and the janitor.
"""

import logging
import math
from collections.abc import Mapping

from journal_reflect.config import RATE_LIMIT_WINDOW_SECONDS, settings
from journal_reflect.entities import RateLimitDecision, RateLimitState
from journal_reflect.protocols import Clock
from journal_reflect.repositories import SystemClock

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def client_id_from_headers(headers: Mapping[str, str]) -> str:
    """Derive the rate limit key for a request.

    Uses the first address of ``x-forwarded-for``, then ``x-real-ip``.
    Requests carrying neither share the ``"unknown"`` bucket.
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return UNKNOWN_CLIENT


class RateLimiter:
    """Per-client sliding window limiter.

    Tracks admitted request timestamps per identifier and denies once
    ``limit`` of them fall inside the trailing window.

    Example:
        ```python
        limiter = RateLimiter.create()
        decision = limiter.admit("203.0.113.7")
        if not decision.allowed:
            print(f"retry in {decision.retry_after}s")
        ```
    """

    def __init__(
        self,
        limit: int | None = None,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Clock | None = None,
        enabled: bool | None = None,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            limit: Requests allowed per window. Defaults to settings.
            window_seconds: Length of the trailing window in seconds.
            clock: Time source. Defaults to the system clock.
            enabled: When False every request is admitted. Defaults to settings.
        """
        self._limit = limit or settings.rate_limit_rpm
        self._window = window_seconds
        self._clock = clock or SystemClock()
        self._enabled = settings.rate_limit_enabled if enabled is None else enabled
        self._states: dict[str, RateLimitState] = {}

    @classmethod
    def create(
        cls,
        limit: int | None = None,
        clock: Clock | None = None,
    ) -> "RateLimiter":
        """Factory method to create a RateLimiter from settings."""
        return cls(
            limit=limit,
            window_seconds=settings.rate_limit_window_seconds,
            clock=clock,
        )

    def admit(self, client_id: str) -> RateLimitDecision:
        """Decide whether a request from ``client_id`` may proceed.

        Stale timestamps are pruned first. An allowed request is recorded;
        a denied one is not.
        """
        if not self._enabled:
            return RateLimitDecision(allowed=True)

        now = self._clock.now()
        state = self._states.get(client_id)
        if state is None:
            state = RateLimitState(last_reset=now)
            self._states[client_id] = state

        state.prune(now - self._window)

        if len(state.requests) >= self._limit:
            oldest = min(state.requests)
            retry_after = max(1, math.ceil(oldest + self._window - now))
            logger.info("Rate limit exceeded for %s, retry after %ss", client_id, retry_after)
            return RateLimitDecision(allowed=False, retry_after=retry_after)

        state.requests.append(now)
        return RateLimitDecision(allowed=True)

    def prune(self) -> int:
        """Drop stale timestamps and forget idle clients.

        A client is forgotten once its history is empty and its state is
        older than one window.

        Returns:
            Number of client states removed
        """
        now = self._clock.now()
        cutoff = now - self._window
        removed = 0

        for client_id, state in list(self._states.items()):
            state.prune(cutoff)
            if not state.requests and now - state.last_reset > self._window:
                del self._states[client_id]
                removed += 1

        return removed

    def reset(self) -> None:
        """Forget every client."""
        self._states.clear()

    def get_stats(self) -> dict:
        """Get rate limiter statistics.

        Returns:
            Dictionary with rate limiter statistics
        """
        return {
            "enabled": self._enabled,
            "limit": self._limit,
            "window_seconds": self._window,
            "tracked_clients": len(self._states),
        }

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window

    def state_for(self, client_id: str) -> RateLimitState | None:
        """Get the raw state for a client (for testing)."""
        return self._states.get(client_id)
