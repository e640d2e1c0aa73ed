"""
Tests for the sliding window rate limiter.
"""

import pytest

from journal_reflect.services import RateLimiter, client_id_from_headers


@pytest.fixture
def limiter(clock):
    return RateLimiter(limit=3, window_seconds=60, clock=clock, enabled=True)


def test_nth_request_allowed_next_denied(limiter):
    for _ in range(3):
        assert limiter.admit("client").allowed

    decision = limiter.admit("client")
    assert not decision.allowed
    assert isinstance(decision.retry_after, int)
    assert decision.retry_after > 0


def test_retry_after_counts_down_from_oldest_request(limiter, clock):
    limiter.admit("client")
    clock.advance(10)
    limiter.admit("client")
    limiter.admit("client")

    clock.advance(5)
    decision = limiter.admit("client")
    assert decision.retry_after == 45


def test_retry_after_rounds_up(limiter, clock):
    for _ in range(3):
        limiter.admit("client")

    clock.advance(59.5)
    assert limiter.admit("client").retry_after == 1


def test_denied_requests_are_not_recorded(limiter):
    for _ in range(5):
        limiter.admit("client")

    assert len(limiter.state_for("client").requests) == 3


def test_window_slides(limiter, clock):
    limiter.admit("client")
    clock.advance(30)
    limiter.admit("client")
    limiter.admit("client")
    assert not limiter.admit("client").allowed

    clock.advance(31)
    assert limiter.admit("client").allowed
    assert not limiter.admit("client").allowed


def test_clients_have_separate_budgets(limiter):
    for _ in range(3):
        limiter.admit("a")

    assert not limiter.admit("a").allowed
    assert limiter.admit("b").allowed


def test_disabled_limiter_admits_everything(clock):
    limiter = RateLimiter(limit=1, clock=clock, enabled=False)
    assert all(limiter.admit("client").allowed for _ in range(10))


def test_prune_removes_idle_clients(limiter, clock):
    limiter.admit("idle")
    clock.advance(30)
    limiter.admit("active")

    clock.advance(31)
    assert limiter.prune() == 1
    assert limiter.state_for("idle") is None
    assert limiter.state_for("active") is not None
    assert limiter.get_stats()["tracked_clients"] == 1


def test_prune_keeps_clients_inside_window(limiter, clock):
    limiter.admit("client")
    clock.advance(59)
    assert limiter.prune() == 0
    assert len(limiter.state_for("client").requests) == 1


def test_client_id_prefers_forwarded_for():
    headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1", "x-real-ip": "198.51.100.2"}
    assert client_id_from_headers(headers) == "203.0.113.7"


def test_client_id_falls_back_to_real_ip():
    assert client_id_from_headers({"x-real-ip": " 198.51.100.2 "}) == "198.51.100.2"


def test_client_id_shared_unknown_bucket():
    assert client_id_from_headers({}) == "unknown"
