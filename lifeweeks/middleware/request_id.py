"""
Request context middleware.

Binds a request id, and for share links the snapshot id, into the logging
context so every log line emitted while serving the request carries them.
The request id is echoed back in the X-Request-ID header.
"""

import re
import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..utils.logging import RequestContext

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_SHARE_LINK_PATH = re.compile(r"^/api/images/(?P<snapshot_id>[^/]+)/?$")


def snapshot_id_from_path(path: str) -> Optional[str]:
    """Snapshot id addressed by a share link path, if any."""
    match = _SHARE_LINK_PATH.match(path)
    return match.group("snapshot_id") if match else None


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome.

    An incoming X-Request-ID is reused, otherwise a UUID is generated. The
    id is kept on ``request.state`` for the error handler.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        context = {"request_id": request_id}
        snapshot_id = snapshot_id_from_path(request.url.path)
        if snapshot_id is not None:
            context["snapshot_id"] = snapshot_id
        RequestContext.set(**context)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.debug(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            RequestContext.clear()
