"""
Shared fixtures: a controllable clock and a deterministic model caller.
"""

import pytest

from journal_reflect.entities import ReflectionParts
from journal_reflect.repositories import content_hash

PRIMARY = "primary-model"
FALLBACK = "fallback-model"


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class StubModelCaller:
    """Deterministic model caller.

    Answers derive from the user prompt, so identical input gives identical
    parts and different input gives different parts. Models listed in
    ``failures`` raise the given exception instead.
    """

    def __init__(self, failures: dict[str, Exception] | None = None) -> None:
        self.failures = failures or {}
        self.calls: list[tuple[str, str, str]] = []

    async def call(self, model: str, system_prompt: str, user_prompt: str) -> ReflectionParts:
        self.calls.append((model, system_prompt, user_prompt))
        if model in self.failures:
            raise self.failures[model]

        digest = content_hash(user_prompt)
        return ReflectionParts(
            summary=f"Summary {digest}",
            pattern=f"Pattern {digest}",
            suggestion=f"Suggestion {digest}",
        )

    @property
    def models_called(self) -> list[str]:
        return [model for model, _, _ in self.calls]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def model_caller():
    return StubModelCaller()


@pytest.fixture
def entry():
    return "Today I finally finished the project I had been putting off for weeks."
