"""FastAPI dependencies resolving the components owned by the app."""

from fastapi import Request

from ..core.config import Settings
from ..services.life_expectancy import LifeExpectancyTable
from ..services.snapshot_store import SnapshotStore


def get_snapshot_store(request: Request) -> SnapshotStore:
    return request.app.state.snapshot_store


def get_life_expectancy_table(request: Request) -> LifeExpectancyTable:
    return request.app.state.life_expectancy


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
