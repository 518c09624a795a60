"""Simple in-memory rate limiter for the archive download endpoint."""

import time
from collections import defaultdict

from fastapi import HTTPException, Request


class RateLimiter:
    """
    Sliding-window rate limiter keyed by client IP.

    Usable directly (limiter.check(request)) or as a FastAPI dependency
    (Depends(limiter)).

    Args:
        max_requests: Maximum requests allowed in the window.
        window_seconds: Time window in seconds.
    """

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        # {ip: [monotonic timestamp, ...]}
        self._requests: dict[str, list[float]] = defaultdict(list)

    @staticmethod
    def client_ip(request: Request) -> str:
        """Client IP, taking the first X-Forwarded-For hop behind a proxy."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def check(self, request: Request) -> None:
        """Raise 429 if this client is over the limit."""
        ip = self.client_ip(request)
        now = time.monotonic()
        cutoff = now - self.window_seconds

        recent = [t for t in self._requests[ip] if t > cutoff]
        if len(recent) >= self.max_requests:
            self._requests[ip] = recent
            raise HTTPException(status_code=429, detail="Too many requests")

        recent.append(now)
        self._requests[ip] = recent

    async def __call__(self, request: Request) -> None:
        self.check(request)

    def reset(self) -> None:
        """Forget all recorded requests (used by tests)."""
        self._requests.clear()


# Archive downloads: 30 per minute per client
download_limiter = RateLimiter(max_requests=30, window_seconds=60)
