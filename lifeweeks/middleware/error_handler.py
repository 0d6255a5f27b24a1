"""
Unified Error Handling for FastAPI.

Provides:
- Exception handlers turning domain errors into ``{"error": message}`` JSON
- A middleware catching anything that escapes a route, logged with request context
"""

import logging
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..domain.errors import DomainError

logger = logging.getLogger(__name__)


def error_body(message: str, request_id: Optional[str] = None) -> dict:
    body = {"error": message}
    if request_id:
        body["request_id"] = request_id
    return body


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map a DomainError to its status code and public message."""
    if exc.status_code >= 500:
        logger.error(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.__cause__ or exc,
        )
    else:
        logger.info(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on an app."""
    app.add_exception_handler(DomainError, domain_error_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all unhandled exceptions and returns
    consistent JSON error responses.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and handle any errors."""
        try:
            return await call_next(request)

        except HTTPException:
            # Let HTTP exceptions pass through to FastAPI's handler
            raise

        except Exception as e:
            request_id = getattr(request.state, "request_id", None)
            logger.error(
                f"Unhandled exception [{request_id}]: {type(e).__name__}: {e}",
                exc_info=True,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return JSONResponse(
                status_code=500,
                content=error_body("Internal server error", request_id),
            )
