"""Tests for rate limiting functionality."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from tourism.rate_limit import RateLimitConfig, RateLimiter, client_ip


def _request(host: str = "10.0.0.1", forwarded: str | None = None) -> MagicMock:
    request = MagicMock()
    request.client.host = host
    request.headers = {"X-Forwarded-For": forwarded} if forwarded else {}
    return request


def test_rate_limiter_allows_requests_within_limit() -> None:
    """Requests within limit should be allowed."""
    limiter = RateLimiter(RateLimitConfig(max_requests=3, window_seconds=60, block_seconds=300))

    for _ in range(3):
        allowed, retry_after = limiter.is_allowed("test-ip")
        assert allowed is True
        assert retry_after == 0


def test_rate_limiter_blocks_after_limit() -> None:
    """Requests exceeding limit should be blocked."""
    limiter = RateLimiter(RateLimitConfig(max_requests=2, window_seconds=60, block_seconds=10))

    assert limiter.is_allowed("test-ip")[0] is True
    assert limiter.is_allowed("test-ip")[0] is True

    allowed, retry_after = limiter.is_allowed("test-ip")
    assert allowed is False
    assert retry_after > 0


def test_rate_limiter_different_keys_independent() -> None:
    """Different keys should have independent rate limits."""
    limiter = RateLimiter(RateLimitConfig(max_requests=1, window_seconds=60, block_seconds=300))

    assert limiter.is_allowed("ip-1")[0] is True
    assert limiter.is_allowed("ip-1")[0] is False

    assert limiter.is_allowed("ip-2")[0] is True


def test_rate_limiter_reset_clears_state() -> None:
    limiter = RateLimiter(RateLimitConfig(max_requests=1, window_seconds=60, block_seconds=300))

    assert limiter.is_allowed("test-ip")[0] is True
    assert limiter.is_allowed("test-ip")[0] is False

    limiter.reset("test-ip")
    assert limiter.is_allowed("test-ip")[0] is True


def test_rate_limiter_clear_drops_every_key() -> None:
    limiter = RateLimiter(RateLimitConfig(max_requests=1, window_seconds=60, block_seconds=300))
    limiter.is_allowed("ip-1")
    limiter.is_allowed("ip-2")

    limiter.clear()

    assert limiter.is_allowed("ip-1")[0] is True
    assert limiter.is_allowed("ip-2")[0] is True


def test_rate_limiter_returns_remaining_block_time() -> None:
    """Blocked requests should return remaining block time on subsequent attempts."""
    limiter = RateLimiter(RateLimitConfig(max_requests=1, window_seconds=60, block_seconds=100))

    assert limiter.is_allowed("test-ip")[0] is True

    allowed, retry_after = limiter.is_allowed("test-ip")
    assert allowed is False
    assert retry_after == 100

    allowed, retry_after = limiter.is_allowed("test-ip")
    assert allowed is False
    assert 0 < retry_after <= 100


def test_window_expiry_restores_quota() -> None:
    limiter = RateLimiter(RateLimitConfig(max_requests=1, window_seconds=60, block_seconds=0))

    with patch("tourism.rate_limit.time.time", return_value=1000.0):
        assert limiter.is_allowed("test-ip")[0] is True
        assert limiter.is_allowed("test-ip")[0] is False

    with patch("tourism.rate_limit.time.time", return_value=1061.0):
        assert limiter.is_allowed("test-ip")[0] is True


def test_check_raises_429_with_retry_after() -> None:
    limiter = RateLimiter(RateLimitConfig(max_requests=1, window_seconds=60, block_seconds=30))
    request = _request()

    assert limiter.check(request, "Slow down") == "10.0.0.1"
    with pytest.raises(HTTPException) as exc_info:
        limiter.check(request, "Slow down")

    assert exc_info.value.status_code == 429
    assert exc_info.value.detail == "Slow down"
    assert exc_info.value.headers == {"Retry-After": "30"}


def test_client_ip_ignores_forwarded_header_by_default() -> None:
    assert client_ip(_request(forwarded="1.2.3.4")) == "10.0.0.1"


def test_client_ip_uses_forwarded_header_behind_trusted_proxy() -> None:
    with patch("tourism.rate_limit.settings") as mock_settings:
        mock_settings.trust_proxy = True
        assert client_ip(_request(forwarded="1.2.3.4, 10.0.0.9")) == "1.2.3.4"
        assert client_ip(_request()) == "10.0.0.1"


def test_client_ip_without_client() -> None:
    request = _request()
    request.client = None
    assert client_ip(request) == "unknown"


def test_scoped_keys_are_counted_and_reset_independently() -> None:
    limiter = RateLimiter(RateLimitConfig(max_requests=2, window_seconds=60, block_seconds=30))
    request = _request()

    victim_key = limiter.check(request, "Slow down", scope="victim@b.com")
    limiter.check(request, "Slow down", scope="victim@b.com")
    own_key = limiter.check(request, "Slow down", scope="me@b.com")
    limiter.reset(own_key)

    assert victim_key == "10.0.0.1:victim@b.com"
    with pytest.raises(HTTPException):
        limiter.check(request, "Slow down", scope="victim@b.com")
