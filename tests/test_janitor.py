"""
Tests for the background janitor.
"""

import asyncio

import pytest

from journal_reflect.services import Janitor, RateLimiter


def test_run_once_prunes_idle_clients(clock):
    limiter = RateLimiter(limit=5, window_seconds=60, clock=clock, enabled=True)
    limiter.admit("client")
    clock.advance(61)

    assert Janitor(limiter).run_once() == 1
    assert limiter.get_stats()["tracked_clients"] == 0


def test_interval_defaults_to_window(clock):
    limiter = RateLimiter(limit=5, window_seconds=60, clock=clock, enabled=True)
    assert Janitor(limiter)._interval == 60


@pytest.mark.asyncio
async def test_runs_periodically_and_stops(clock):
    limiter = RateLimiter(limit=5, window_seconds=60, clock=clock, enabled=True)
    janitor = Janitor(limiter, interval=0.01)

    limiter.admit("client")
    clock.advance(61)

    janitor.start()
    assert janitor.running
    for _ in range(50):
        await asyncio.sleep(0.01)
        if limiter.state_for("client") is None:
            break
    assert limiter.state_for("client") is None

    await janitor.stop()
    assert not janitor.running


@pytest.mark.asyncio
async def test_stop_without_start_is_noop(clock):
    janitor = Janitor(RateLimiter(limit=1, clock=clock, enabled=True))
    await janitor.stop()
    assert not janitor.running
