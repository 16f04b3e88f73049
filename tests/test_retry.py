"""
Tests for retry with backoff.
"""

import pytest

from sportbot.retry import RetryConfig, calculate_delay, retry_sync


class RateLimited(Exception):
    def __init__(self, retry_after=None):
        super().__init__("rate limited")
        self.retry_after = retry_after


class TestCalculateDelay:
    """Backoff delays."""

    def test_exponential_without_jitter(self):
        config = RetryConfig(base_delay=1.0, max_delay=30.0, jitter=False)
        assert [calculate_delay(a, config) for a in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_max_delay(self):
        config = RetryConfig(base_delay=1.0, max_delay=5.0, jitter=False)
        assert calculate_delay(10, config) == 5.0

    def test_jitter_adds_up_to_a_quarter(self):
        config = RetryConfig(base_delay=2.0, jitter=True)
        for _ in range(20):
            assert 2.0 <= calculate_delay(0, config) <= 2.5

    def test_retry_after_overrides_backoff(self):
        config = RetryConfig(base_delay=1.0, max_delay=30.0)
        assert calculate_delay(0, config, RateLimited(retry_after=7)) == 7.0
        assert calculate_delay(0, config, RateLimited(retry_after=120)) == 30.0


class TestRetrySync:
    """Retry loop."""

    def test_succeeds_after_retryable_failures(self):
        calls = []
        sleeps = []

        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("reset")
            return "ok"

        config = RetryConfig(max_attempts=3, jitter=False)
        assert retry_sync(flaky, config=config, sleep=sleeps.append) == "ok"
        assert len(calls) == 3
        assert sleeps == [1.0, 2.0]

    def test_non_retryable_propagates_immediately(self):
        calls = []

        def broken():
            calls.append(1)
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            retry_sync(broken, config=RetryConfig(max_attempts=5), sleep=lambda s: None)
        assert len(calls) == 1

    def test_reraises_last_error_when_exhausted(self):
        sleeps = []

        def always_limited():
            raise RateLimited(retry_after=2)

        config = RetryConfig(max_attempts=3, retryable_exceptions=(RateLimited,))
        with pytest.raises(RateLimited):
            retry_sync(always_limited, config=config, sleep=sleeps.append)
        assert sleeps == [2.0, 2.0]

    def test_passes_arguments_through(self):
        assert retry_sync(lambda a, b=0: a + b, 2, b=3, sleep=lambda s: None) == 5
