from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from app.utils import rate_limiter as rate_limiter_module
from app.utils.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(rate_limiter_module, "time", SimpleNamespace(time=fake))
    return fake


LIMITS = ((3, 60), (10, 3600))


def test_rejects_requests_over_the_limit(clock) -> None:
    limiter = RateLimiter()
    for _ in range(3):
        limiter.hit("10.0.0.1", "global", LIMITS)

    with pytest.raises(HTTPException) as exc:
        limiter.hit("10.0.0.1", "global", LIMITS)
    assert exc.value.status_code == 429
    assert exc.value.detail["retry_after"] == 60

    # other clients and scopes keep their own counters
    limiter.hit("10.0.0.2", "global", LIMITS)
    limiter.hit("10.0.0.1", "quiz_generation", ((1, 60),))


def test_window_slides(clock) -> None:
    limiter = RateLimiter()
    for _ in range(3):
        limiter.hit("10.0.0.1", "global", LIMITS)

    clock.now += 61
    limiter.hit("10.0.0.1", "global", LIMITS)


def test_idle_clients_are_forgotten(clock) -> None:
    limiter = RateLimiter()
    for i in range(500):
        limiter.hit(f"client-{i}", "global", LIMITS)
    assert len(limiter._hits) == 500

    clock.now += 2 * 3600
    limiter.hit("newcomer", "global", LIMITS)

    assert list(limiter._hits) == [("global", "newcomer")]


def test_cleanup_respects_each_scope_window(clock) -> None:
    limiter = RateLimiter()
    limiter.hit("a", "global", LIMITS)
    limiter.hit("a", "quiz_generation", ((5, 60),))

    clock.now += 120
    limiter.hit("b", "quiz_generation", ((5, 60),))

    # the hour window still holds the global hit, the minute window has expired
    assert ("global", "a") in limiter._hits
    assert ("quiz_generation", "a") not in limiter._hits
