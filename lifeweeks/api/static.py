"""
Front-end application shell.

Catch-all route registered last: serves built assets from the static
directory and falls back to ``index.html`` for client-side routes.
"""

import logging
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse, JSONResponse
from starlette.responses import Response

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


def create_static_router(static_dir: str) -> APIRouter:
    """Create the catch-all router serving files under ``static_dir``."""
    root = Path(static_dir).resolve()
    router = APIRouter()

    @router.get("/{full_path:path}", include_in_schema=False)
    async def app_shell(full_path: str) -> Response:
        if full_path:
            candidate = (root / full_path).resolve()
            if candidate.is_relative_to(root) and candidate.is_file():
                return FileResponse(candidate)

        index = root / INDEX_FILE
        if index.is_file():
            return FileResponse(index)

        logger.warning("Application shell not found at %s", index)
        return JSONResponse(status_code=404, content={"error": "Not found"})

    return router
