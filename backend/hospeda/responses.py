"""
Hospeda Backend — Response Envelope
====================================

What:  Builders for the JSON envelope every endpoint answers with.
Who:   Route handlers, exception handlers and middleware that short-circuit
       a request (rate limit, timeout, actor parsing).

Envelope:
    success: {"success": true,  "data": ..., "metadata": {...}}
    failure: {"success": false, "error": {"code": ..., "message": ...}, "metadata": {...}}

    metadata = {"timestamp": ISO-8601, "requestId": "...",
                "pagination": {"page", "pageSize", "total", "totalPages"}}   # listings only
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from hospeda.middleware.request_id import request_id_var
from hospeda.services.result import Page


def response_metadata(page: Optional[Page] = None) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "requestId": request_id_var.get(""),
    }
    if page is not None:
        metadata["pagination"] = {
            "page": page.page,
            "pageSize": page.page_size,
            "total": page.total,
            "totalPages": page.total_pages,
        }
    return metadata


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    """Wraps `data`; a `Page` becomes its items plus pagination metadata."""
    page = data if isinstance(data, Page) else None
    payload = page.items if page is not None else data
    return JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "data": jsonable_encoder(payload),
            "metadata": response_metadata(page),
        },
    )


def error_response(
    code: Any,
    message: str,
    status_code: int,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": getattr(code, "value", code), "message": message},
            "metadata": response_metadata(),
        },
        headers=dict(headers) if headers else None,
    )
