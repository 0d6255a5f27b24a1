"""
Week calculator API.

Exposes the calculator and the country table to the front-end, and a
server-side share that rasterizes the grid before storing it.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool

from ..core.config import Settings
from ..domain.errors import DomainError, InternalError
from ..services.life_expectancy import CountryLifeExpectancy, LifeExpectancyTable
from ..services.life_weeks_domain import (
    clamp_non_negative,
    compute_weeks,
    format_summary,
)
from ..services.life_weeks_image import render_grid_png, to_data_uri
from ..services.snapshot_store import SnapshotStore
from .deps import get_app_settings, get_life_expectancy_table, get_snapshot_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["weeks"])

# Upper bound keeps the rasterized grid a sane size
MAX_YEARS = 150


class ShareRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    age: float = Field(ge=0, le=MAX_YEARS)
    life_expectancy: float = Field(ge=0, le=MAX_YEARS, alias="lifeExpectancy")


class ShareCreated(BaseModel):
    id: str
    url: str


@router.get("/weeks")
async def get_weeks(
    age: float = Query(..., le=MAX_YEARS),
    life_expectancy: Optional[float] = Query(default=None, le=MAX_YEARS),
    country: Optional[str] = None,
    table: LifeExpectancyTable = Depends(get_life_expectancy_table),
) -> Dict[str, Any]:
    """Week breakdown for an age and either a life expectancy or a country."""
    if life_expectancy is None:
        life_expectancy = table.lookup(country)

    breakdown = compute_weeks(
        clamp_non_negative(age), clamp_non_negative(life_expectancy)
    )
    return {
        **breakdown.to_dict(),
        "age": age,
        "lifeExpectancy": life_expectancy,
        "summary": format_summary(breakdown),
    }


@router.get("/countries", response_model=List[CountryLifeExpectancy])
async def list_countries(
    q: str = "",
    table: LifeExpectancyTable = Depends(get_life_expectancy_table),
) -> List[CountryLifeExpectancy]:
    """Country picklist, filtered by a case-insensitive substring."""
    return table.search(q)


@router.post("/weeks/share", response_model=ShareCreated)
async def share_weeks(
    body: ShareRequest,
    request: Request,
    store: SnapshotStore = Depends(get_snapshot_store),
    settings: Settings = Depends(get_app_settings),
) -> ShareCreated:
    """Render the grid server-side, store it, and return the share link."""
    breakdown = compute_weeks(body.age, body.life_expectancy)
    try:
        png = await run_in_threadpool(render_grid_png, breakdown)
        snapshot_id = store.put(to_data_uri(png))
    except DomainError:
        raise
    except Exception as e:
        raise InternalError("Failed to save image") from e

    base_url = settings.public_base_url or str(request.base_url)
    return ShareCreated(
        id=snapshot_id,
        url=f"{base_url.rstrip('/')}/api/images/{snapshot_id}",
    )
