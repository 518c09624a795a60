"""Tests for the download rate limiter."""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from web_api.rate_limit import RateLimiter


def _request(host="10.0.0.1", forwarded=None):
    request = MagicMock()
    request.headers = {"x-forwarded-for": forwarded} if forwarded else {}
    request.client.host = host
    return request


def test_allows_up_to_limit_then_rejects():
    limiter = RateLimiter(max_requests=2, window_seconds=60)

    limiter.check(_request())
    limiter.check(_request())
    with pytest.raises(HTTPException) as exc_info:
        limiter.check(_request())

    assert exc_info.value.status_code == 429


def test_clients_are_counted_separately():
    limiter = RateLimiter(max_requests=1, window_seconds=60)

    limiter.check(_request("10.0.0.1"))
    limiter.check(_request("10.0.0.2"))


def test_uses_first_forwarded_address():
    request = _request(host="127.0.0.1", forwarded="203.0.113.7, 10.0.0.1")
    assert RateLimiter.client_ip(request) == "203.0.113.7"


def test_reset_clears_history():
    limiter = RateLimiter(max_requests=1, window_seconds=60)
    limiter.check(_request())

    limiter.reset()

    limiter.check(_request())
