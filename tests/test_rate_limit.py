import threading

import pytest

from server.errors import RateLimitError


def test_tenth_request_accepted_eleventh_rejected(rate_limiter):
    for expected in range(1, 11):
        assert rate_limiter.check("user-ana", "transcribe-audio") == expected

    with pytest.raises(RateLimitError, match="Maximum 10 requests per hour"):
        rate_limiter.check("user-ana", "transcribe-audio")


def test_rejected_request_is_not_recorded(rate_limiter, db, clock):
    for _ in range(10):
        rate_limiter.check("user-ana", "transcribe-audio")
    with pytest.raises(RateLimitError):
        rate_limiter.check("user-ana", "transcribe-audio")

    assert db.count_requests_since("user-ana", "transcribe-audio", clock() - 3600) == 10


def test_window_slides(rate_limiter, clock):
    for _ in range(10):
        rate_limiter.check("user-ana", "transcribe-audio")

    clock.advance(3599)
    with pytest.raises(RateLimitError):
        rate_limiter.check("user-ana", "transcribe-audio")

    clock.advance(2)
    assert rate_limiter.check("user-ana", "transcribe-audio") == 1


def test_limits_are_per_user_and_endpoint(rate_limiter):
    for _ in range(10):
        rate_limiter.check("user-ana", "transcribe-audio")

    assert rate_limiter.check("user-bruno", "transcribe-audio") == 1
    assert rate_limiter.check("user-ana", "create-smart-content") == 1


def test_purge_removes_expired_rows(rate_limiter, db, clock):
    rate_limiter.check("user-ana", "transcribe-audio")
    clock.advance(7200)
    rate_limiter.check("user-ana", "transcribe-audio")

    assert rate_limiter.purge() == 1
    assert db.fetchone("SELECT COUNT(*) AS n FROM api_rate_limits")["n"] == 1


def test_concurrent_requests_respect_the_limit(rate_limiter):
    barrier = threading.Barrier(30)
    accepted = []
    rejected = []

    def hit():
        barrier.wait()
        try:
            accepted.append(rate_limiter.check("user-ana", "transcribe-audio"))
        except RateLimitError:
            rejected.append(1)

    threads = [threading.Thread(target=hit) for _ in range(30)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(accepted) == list(range(1, 11))
    assert len(rejected) == 20
