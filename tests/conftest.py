import logging
import os

import pytest

# Set test environment variables before the app module is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_TO_FILE"] = "false"

from lifeweeks.core.config import Settings  # noqa: E402
from lifeweeks.services.snapshot_store import SnapshotStore  # noqa: E402


class FakeClock:
    """Virtual monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    """Snapshot store driven by the virtual clock."""
    return SnapshotStore(ttl_seconds=3600, clock=clock)


@pytest.fixture
def static_dir(tmp_path):
    """Built front-end shell with an index page and one asset."""
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html><body>life in weeks shell</body></html>")
    (dist / "assets" / "app.js").write_text("console.log('app');")
    return dist


@pytest.fixture
def settings(static_dir):
    return Settings(
        environment="test",
        static_dir=str(static_dir),
        public_base_url="https://weeks.example.com",
    )


@pytest.fixture
def app(settings, store):
    from lifeweeks.main import create_app

    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app, raise_server_exceptions=False)
