"""
Share-link API.

POST /api/images stores an encoded snapshot and returns its id.
GET /api/images/{id} serves the share page for a live snapshot.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from ..domain.errors import DomainError, InternalError
from ..services.share_page import render_share_page
from ..services.snapshot_store import SnapshotStore
from .deps import get_snapshot_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/images", tags=["images"])


class ImageUpload(BaseModel):
    """Body of a share request."""

    model_config = ConfigDict(populate_by_name=True)

    image_data: Optional[str] = Field(default=None, alias="imageData")


class ImageCreated(BaseModel):
    id: str


@router.post("", response_model=ImageCreated)
async def save_image(
    payload: Optional[ImageUpload] = None,
    store: SnapshotStore = Depends(get_snapshot_store),
) -> ImageCreated:
    """Store an encoded image for one hour and return its share id."""
    image_data = payload.image_data if payload is not None else None
    try:
        snapshot_id = store.put(image_data)
    except DomainError:
        raise
    except Exception as e:
        raise InternalError("Failed to save image") from e

    return ImageCreated(id=snapshot_id)


@router.get("/{snapshot_id}", response_class=HTMLResponse)
async def get_image(
    snapshot_id: str,
    store: SnapshotStore = Depends(get_snapshot_store),
) -> HTMLResponse:
    """Serve the share page with the image as both og:image and <img>."""
    try:
        html = render_share_page(store.get(snapshot_id))
    except DomainError:
        raise
    except Exception as e:
        raise InternalError("Failed to serve image") from e

    return HTMLResponse(content=html)
