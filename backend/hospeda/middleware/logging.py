"""
Hospeda Backend — Request Logging Middleware
=============================================

What:  One access-log line per HTTP request: method, path, status, duration,
       request id, client IP and acting user.
How:   Logged on the `hospeda.access` logger after the response is produced.
       The level follows the status class (5xx ERROR, 4xx WARNING, else INFO)
       so alerting can key on severity.

Not logged: request bodies (may contain personal data) and the actor
permission header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hospeda.middleware.request_id import request_id_var

logger = logging.getLogger("hospeda.access")

QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with request-id correlation; health probes are skipped."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        client_ip = request.client.host if request.client else "unknown"
        actor = getattr(request.state, "actor", None)
        actor_id = str(actor.id) if actor is not None and actor.id is not None else "guest"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] actor=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            actor_id,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "actor_id": actor_id,
            },
        )
        return response
