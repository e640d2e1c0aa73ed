"""Model answer domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ReflectionParts:
    """The three parts of a reflection as returned by a model caller."""

    summary: str
    pattern: str
    suggestion: str
