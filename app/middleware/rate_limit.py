# app/middleware/rate_limit.py

import logging
import math
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class FixedWindowLimiter:
    """
    In-memory fixed window counter keyed by client identity.

    A window opens on a client's first request and resets once
    window_seconds have passed.
    """

    def __init__(self, max_requests: int, window_seconds: int, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows = {}  # key -> [window_start, count]

    def hit(self, key: str):
        """
        Records a request. Returns (allowed, remaining, retry_after_seconds).
        """
        now = self._clock()
        window = self._windows.get(key)

        if window is None or now - window[0] >= self.window_seconds:
            window = [now, 0]
            self._windows[key] = window
            self._evict_expired(now)

        retry_after = max(1, math.ceil(window[0] + self.window_seconds - now))

        if window[1] >= self.max_requests:
            return False, 0, retry_after

        window[1] += 1
        return True, self.max_requests - window[1], retry_after

    def _evict_expired(self, now):
        expired = [
            key for key, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Limits requests per client IP. Health checks are never limited.
    """

    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: int = 900,
        exempt_paths=("/health",),
        trust_proxy_headers: bool = False,
        clock=time.monotonic
    ):
        super().__init__(app)
        self.limiter = FixedWindowLimiter(max_requests, window_seconds, clock=clock)
        self.exempt_paths = set(exempt_paths)
        self.trust_proxy_headers = trust_proxy_headers

    def client_key(self, request: Request) -> str:
        if self.trust_proxy_headers:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                return forwarded.split(",")[0].strip()

        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = self.client_key(request)
        allowed, remaining, retry_after = self.limiter.hit(client_ip)

        if not allowed:
            logger.warning(
                "Rate limit exceeded for %s on %s", client_ip, request.url.path
            )
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests, please try again later."},
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response
