"""Clock protocol.

The rate limiter and the content cache read time through this interface so
tests can move time forward deterministically.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Protocol for a wall clock measured in seconds."""

    def now(self) -> float:
        """Return the current time in seconds."""
        ...
