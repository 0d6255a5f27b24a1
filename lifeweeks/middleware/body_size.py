"""
Upload size limit for share uploads.

Only ``POST /api/images`` and ``POST /api/weeks/share`` accept a body
worth limiting. Those requests are rejected with 413 once the declared
Content-Length, or the bytes actually streamed, pass ``max_bytes``. The
buffered body is handed on to the route unchanged.
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..core.config import DEFAULT_MAX_BODY_BYTES

logger = logging.getLogger(__name__)

UPLOAD_PATHS = frozenset({"/api/images", "/api/weeks/share"})
TOO_LARGE_BODY = {"error": "Request body too large"}


def is_upload(method: str, path: str) -> bool:
    return method == "POST" and path.rstrip("/") in UPLOAD_PATHS


def _declared_length(request: Request) -> Optional[int]:
    value = request.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        # Unparseable header: count the streamed bytes instead
        return None


class UploadSizeLimitMiddleware(BaseHTTPMiddleware):
    """Cap snapshot upload bodies at ``max_bytes``."""

    def __init__(self, app, max_bytes: int = DEFAULT_MAX_BODY_BYTES):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not is_upload(request.method, request.url.path):
            return await call_next(request)

        declared = _declared_length(request)
        if declared is not None and declared > self.max_bytes:
            return self._reject(request, declared)

        body = bytearray()
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > self.max_bytes:
                return self._reject(request, len(body))

        payload = bytes(body)

        async def receive():
            return {"type": "http.request", "body": payload, "more_body": False}

        # Cache and re-inject the body so downstream can read it
        request._body = payload  # type: ignore[attr-defined]
        request._receive = receive  # type: ignore[attr-defined]
        return await call_next(request)

    def _reject(self, request: Request, size: int) -> JSONResponse:
        logger.warning(
            "Rejected oversized upload: %d bytes, max=%d, path=%s",
            size,
            self.max_bytes,
            request.url.path,
        )
        return JSONResponse(status_code=413, content=TOO_LARGE_BODY)
