"""Tests for the sliding-window rate limiter."""

from familynight.llm.rate_limiter import RateLimiter


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit():
    limiter = RateLimiter(max_requests=10, window_seconds=60, clock=_Clock())
    assert all(limiter.allow() for _ in range(10))
    assert not limiter.allow()


def test_window_slides():
    clock = _Clock()
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)

    assert limiter.allow()
    clock.now += 30
    assert limiter.allow()
    assert not limiter.allow()
    assert limiter.seconds_until_next() == 30

    clock.now += 30
    assert limiter.seconds_until_next() == 0
    assert limiter.allow()
    assert not limiter.allow()


def test_rejected_calls_do_not_consume_slots():
    clock = _Clock()
    limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)

    assert limiter.allow()
    for _ in range(5):
        assert not limiter.allow()
    clock.now += 10
    assert limiter.allow()


def test_reset():
    limiter = RateLimiter(max_requests=1, clock=_Clock())
    limiter.allow()
    limiter.reset()
    assert limiter.allow()
