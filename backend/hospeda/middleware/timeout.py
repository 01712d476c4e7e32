"""
Hospeda Backend — Request Timeout Middleware
=============================================

What:  Bounds the time a request may spend in the application.
How:   The downstream call runs under `asyncio.wait_for`; on expiry the
       request is cancelled (rolling back its session) and the client gets
       504 REQUEST_TIMEOUT.
"""

import asyncio
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hospeda.config import settings
from hospeda.responses import error_response

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = "REQUEST_TIMEOUT"


class TimeoutMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, timeout_seconds: Optional[float] = None):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds or settings.request_timeout_seconds

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(
                "%s %s exceeded %.1fs timeout",
                request.method,
                request.url.path,
                self.timeout_seconds,
            )
            return error_response(
                REQUEST_TIMEOUT,
                f"The request took longer than {self.timeout_seconds:g} seconds and was cancelled.",
                status_code=504,
            )
