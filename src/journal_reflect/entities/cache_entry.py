"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from journal_reflect.dto import ReflectionResponse


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached reflection.

    Attributes:
        response: The reflection produced for the content
        created_at: Clock time the entry was stored (seconds)
        ttl: Time-to-live in seconds
        content: Normalized content the response was produced for, if known
    """

    response: "ReflectionResponse"
    created_at: float
    ttl: float
    content: str | None = None

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl
