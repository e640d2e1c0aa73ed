"""Domain entities for internal representation.

These are plain dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- Pure domain logic only
"""

from .cache_entry import CacheEntryEntity
from .rate_limit_state import RateLimitDecision, RateLimitState
from .reflection_error import ErrorKind, ReflectionError
from .reflection_parts import ReflectionParts

__all__ = [
    "CacheEntryEntity",
    "ErrorKind",
    "RateLimitDecision",
    "RateLimitState",
    "ReflectionError",
    "ReflectionParts",
]
