"""Rate limit domain entities."""

from dataclasses import dataclass, field


@dataclass
class RateLimitState:
    """Request history for a single client identifier.

    Attributes:
        requests: Admitted request timestamps inside the trailing window, oldest first
        last_reset: Clock time the state was created
    """

    requests: list[float] = field(default_factory=list)
    last_reset: float = 0.0

    def prune(self, cutoff: float) -> None:
        """Drop timestamps at or before ``cutoff``."""
        self.requests = [t for t in self.requests if t > cutoff]


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of an admission check."""

    allowed: bool
    retry_after: int | None = None
