import threading

from pdfshare.core.rate_limit import InMemoryRateLimitStore, RateLimiter
from tests.conftest import FakeMonotonic


def make_limiter(limit=5, window=60):
    clock = FakeMonotonic()
    return RateLimiter(InMemoryRateLimitStore(clock=clock), "PublicComment", limit, window), clock


def test_allows_up_to_limit_then_rejects():
    limiter, _ = make_limiter()

    results = [limiter.check("1.2.3.4") for _ in range(6)]

    assert [allowed for allowed, _ in results] == [True] * 5 + [False]
    assert [remaining for _, remaining in results] == [4, 3, 2, 1, 0, 0]


def test_window_reset_after_ttl():
    limiter, clock = make_limiter(limit=2, window=60)
    limiter.check("1.2.3.4")
    limiter.check("1.2.3.4")
    assert limiter.check("1.2.3.4")[0] is False

    clock.advance(59)
    assert limiter.check("1.2.3.4")[0] is False

    clock.advance(1)
    assert limiter.check("1.2.3.4") == (True, 1)


def test_window_is_fixed_not_sliding():
    limiter, clock = make_limiter(limit=2, window=60)
    limiter.check("1.2.3.4")
    clock.advance(50)
    limiter.check("1.2.3.4")
    clock.advance(10)

    # The window started at the first hit, so it has lapsed
    assert limiter.check("1.2.3.4") == (True, 1)


def test_counters_are_per_ip_and_per_name():
    clock = FakeMonotonic()
    store = InMemoryRateLimitStore(clock=clock)
    comments = RateLimiter(store, "PublicComment", 1, 60)
    other = RateLimiter(store, "Other", 1, 60)

    assert comments.check("1.1.1.1")[0] is True
    assert comments.check("1.1.1.1")[0] is False
    assert comments.check("2.2.2.2")[0] is True
    assert other.check("1.1.1.1")[0] is True


def test_concurrent_hits_are_counted_exactly():
    store = InMemoryRateLimitStore()
    counts = []

    def worker():
        for _ in range(100):
            counts.append(store.hit("k", 60))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(counts) == list(range(1, 801))
