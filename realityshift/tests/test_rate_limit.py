from __future__ import annotations

from realityshift.shared.middleware.rate_limit import InMemoryRateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_limit_applies_per_key_within_window() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(2, 60, clock=clock)

    assert [limiter.allow("a") for _ in range(3)] == [True, True, False]
    assert limiter.allow("b") is True

    clock.now += 61
    assert limiter.allow("a") is True


def test_idle_buckets_are_dropped() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(5, 60, clock=clock)
    for ip in ("10.0.0.1", "10.0.0.2", "10.0.0.3"):
        limiter.allow(f"/api/auth/login:{ip}")
    assert len(limiter) == 3

    clock.now += 61
    limiter.allow("/api/auth/login:10.0.0.9")

    assert len(limiter) == 1
