"""
Hospeda Backend — Rate Limiting Middleware
===========================================

What:  Per-IP sliding-window request limit.
How:   Each client IP keeps the timestamps of its requests inside the last
       `rate_limit_window` seconds. A request arriving when the list already
       holds `rate_limit_requests` entries is answered with 429
       RATE_LIMIT_EXCEEDED and a Retry-After header.

Limits:
    State is in process memory, so the quota is per worker. Multi-worker
    deployments need a shared store (e.g. Redis) instead.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hospeda.config import settings
from hospeda.exceptions import RateLimitExceededError
from hospeda.responses import error_response

logger = logging.getLogger(__name__)

RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding window limiter keyed by client IP."""

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}
    # Idle IPs are swept after this many recorded requests
    SWEEP_EVERY = 1000

    def __init__(self, app, max_requests: Optional[int] = None, window_seconds: Optional[int] = None):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._recorded = 0

    def check(self, client_ip: str, now: float) -> None:
        """Records one request or raises RateLimitExceededError."""
        window_start = now - self.window_seconds
        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            raise RateLimitExceededError(retry_after)

        timestamps.append(now)
        self._recorded += 1
        if self._recorded % self.SWEEP_EVERY == 0:
            self._sweep(window_start)

    def _sweep(self, window_start: float) -> None:
        idle = [ip for ip, stamps in self._requests.items() if not stamps or stamps[-1] <= window_start]
        for ip in idle:
            del self._requests[ip]
        if idle:
            logger.debug("Dropped rate-limit state for %d idle clients", len(idle))

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        try:
            self.check(client_ip, time.time())
        except RateLimitExceededError as exc:
            logger.warning(
                "Rate limit exceeded for %s: %d requests in %ds",
                client_ip,
                self.max_requests,
                self.window_seconds,
            )
            return error_response(
                RATE_LIMIT_EXCEEDED,
                exc.message,
                status_code=429,
                headers={"Retry-After": str(exc.retry_after)},
            )
        return await call_next(request)
