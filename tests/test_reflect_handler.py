"""
Tests for the reflection request lifecycle.
"""

import pytest

from journal_reflect.entities import ErrorKind, ReflectionError
from journal_reflect.handlers import ReflectHandler
from journal_reflect.repositories import ContentCache
from journal_reflect.services import ErrorClassifier, ModelOrchestrator, RateLimiter

from conftest import FALLBACK, PRIMARY, StubModelCaller


def make_handler(caller, clock, limit=10, ttl=3600) -> ReflectHandler:
    return ReflectHandler(
        rate_limiter=RateLimiter(limit=limit, window_seconds=60, clock=clock, enabled=True),
        cache=ContentCache(ttl=ttl, max_entries=1000, clock=clock),
        orchestrator=ModelOrchestrator.create(
            model_caller=caller,
            primary_model=PRIMARY,
            fallback_model=FALLBACK,
        ),
        classifier=ErrorClassifier(timeout_retry_after=30, include_details=False),
    )


@pytest.mark.asyncio
async def test_repeated_content_served_from_cache(model_caller, clock, entry):
    handler = make_handler(model_caller, clock)

    first = await handler.reflect({"content": entry}, "client")
    second = await handler.reflect({"content": entry}, "client")

    assert first.model_dump() == second.model_dump()
    assert len(model_caller.calls) == 1


@pytest.mark.asyncio
async def test_cache_key_ignores_surrounding_whitespace(model_caller, clock, entry):
    handler = make_handler(model_caller, clock)

    await handler.reflect({"content": entry}, "client")
    await handler.reflect({"content": f"  {entry}\n"}, "client")

    assert len(model_caller.calls) == 1


@pytest.mark.asyncio
async def test_changed_content_misses_cache(model_caller, clock, entry):
    handler = make_handler(model_caller, clock)

    first = await handler.reflect({"content": entry}, "client")
    second = await handler.reflect({"content": entry + "!"}, "client")

    assert len(model_caller.calls) == 2
    assert first.summary != second.summary


@pytest.mark.asyncio
async def test_expired_entry_calls_model_once_more(model_caller, clock, entry):
    handler = make_handler(model_caller, clock, ttl=60)

    await handler.reflect({"content": entry}, "client")
    clock.advance(61)
    await handler.reflect({"content": entry}, "client")
    await handler.reflect({"content": entry}, "client")

    assert len(model_caller.calls) == 2


@pytest.mark.asyncio
async def test_validation_error_never_reaches_model(model_caller, clock):
    handler = make_handler(model_caller, clock)

    with pytest.raises(ReflectionError) as exc_info:
        await handler.reflect({"content": "short"}, "client")

    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert model_caller.calls == []


@pytest.mark.asyncio
async def test_rate_limit_after_limit(model_caller, clock, entry):
    handler = make_handler(model_caller, clock, limit=2)

    await handler.reflect({"content": entry}, "client")
    await handler.reflect({"content": entry}, "client")

    with pytest.raises(ReflectionError) as exc_info:
        await handler.reflect({"content": entry}, "client")

    assert exc_info.value.kind is ErrorKind.RATE_LIMIT
    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == 60


@pytest.mark.asyncio
async def test_invalid_requests_do_not_use_rate_budget(model_caller, clock, entry):
    handler = make_handler(model_caller, clock, limit=1)

    with pytest.raises(ReflectionError):
        await handler.reflect({"content": ""}, "client")

    assert (await handler.reflect({"content": entry}, "client")).summary


@pytest.mark.asyncio
async def test_provider_failure_is_classified_and_not_cached(clock, entry):
    caller = StubModelCaller(
        failures={
            PRIMARY: RuntimeError("primary down"),
            FALLBACK: RuntimeError("Request timeout after 30000ms"),
        }
    )
    handler = make_handler(caller, clock)

    with pytest.raises(ReflectionError) as exc_info:
        await handler.reflect({"content": entry}, "client")

    assert exc_info.value.kind is ErrorKind.TIMEOUT
    assert exc_info.value.retry_after == 30
    assert caller.models_called == [PRIMARY, FALLBACK]

    caller.failures.clear()
    await handler.reflect({"content": entry}, "client")
    assert caller.models_called == [PRIMARY, FALLBACK, PRIMARY]


@pytest.mark.asyncio
async def test_fallback_answer_is_cached(clock, entry):
    caller = StubModelCaller(failures={PRIMARY: RuntimeError("boom")})
    handler = make_handler(caller, clock)

    first = await handler.reflect({"content": entry}, "client")
    second = await handler.reflect({"content": entry}, "client")

    assert first.metadata.model == FALLBACK
    assert second.metadata.model == FALLBACK
    assert len(caller.calls) == 2


@pytest.mark.asyncio
async def test_non_dict_preferences_are_dropped(model_caller, clock, entry):
    handler = make_handler(model_caller, clock)
    response = await handler.reflect({"content": entry, "preferences": "gentle"}, "client")
    assert response.summary


@pytest.mark.asyncio
async def test_health_check(model_caller, clock, entry):
    handler = make_handler(model_caller, clock)
    await handler.reflect({"content": entry}, "client")

    health = await handler.health_check()
    assert health.status == "healthy"
    assert health.models == {"primary": PRIMARY, "fallback": FALLBACK}
    assert health.cache["total_entries"] == 1
    assert health.rate_limit["tracked_clients"] == 1
