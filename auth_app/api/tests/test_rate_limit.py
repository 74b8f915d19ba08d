from concurrent.futures import ThreadPoolExecutor

from core.utils.rate_limit import LoginRateLimiter


def test_parallel_failures_are_all_counted():
    """Failures recorded at the same time never overwrite each other"""
    limiter = LoginRateLimiter(max_attempts=50, lockout_seconds=60)
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: limiter.record_failure('10.0.0.1'), range(40)))
    assert limiter.failures('10.0.0.1') == 40
    assert limiter.retry_after('10.0.0.1') == 0


def test_lockout_after_max_attempts_and_reset():
    """Reaching the limit locks the IP out until a reset"""
    limiter = LoginRateLimiter(max_attempts=3, lockout_seconds=600)
    counts = [limiter.record_failure('10.0.0.2') for _ in range(3)]
    assert counts == [1, 2, 3]
    assert 0 < limiter.retry_after('10.0.0.2') <= 600
    assert limiter.retry_after('10.0.0.3') == 0

    limiter.reset('10.0.0.2')
    assert limiter.failures('10.0.0.2') == 0
    assert limiter.retry_after('10.0.0.2') == 0
