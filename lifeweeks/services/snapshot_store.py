"""
Ephemeral snapshot store for shareable Life in Weeks images.

Maps a short random identifier to an opaque image payload (normally a
``data:`` URI). Every entry lives for a fixed TTL measured from creation;
reads never extend it. Nothing survives a process restart.

Eviction is done two ways:
- a one-shot ``loop.call_later`` timer per entry when an event loop is running
- a lazy expiry check against the store clock on every read
"""

import asyncio
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import structlog

from ..domain.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 3600  # 1 hour
ID_BYTES = 12  # 96 random bits, 16 url-safe characters


def generate_snapshot_id() -> str:
    """Return a fresh url-safe identifier for a snapshot."""
    return secrets.token_urlsafe(ID_BYTES)


@dataclass
class SnapshotEntry:
    """A stored payload and its expiry bookkeeping."""

    id: str
    payload: str
    created_at: float
    expires_at: float
    timer: Optional[asyncio.TimerHandle] = field(default=None, repr=False)

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class SnapshotStore:
    """
    Thread-safe in-memory snapshot store with per-entry expiry.

    One instance is created at application startup and handed to the
    request handlers, so tests can build their own with a virtual clock.

    Args:
        ttl_seconds: Lifetime of every entry, measured from ``put``.
        clock: Monotonic time source in seconds.
        id_factory: Callable producing new identifiers.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = generate_snapshot_id,
    ):
        self._entries: Dict[str, SnapshotEntry] = {}
        self._lock = threading.Lock()
        self._ttl = ttl_seconds
        self._clock = clock
        self._id_factory = id_factory

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def put(self, payload: str) -> str:
        """Store a payload and return its identifier.

        Raises:
            ValidationError: If the payload is missing or empty.
        """
        if not isinstance(payload, str) or not payload:
            raise ValidationError()

        snapshot_id = self._id_factory()
        now = self._clock()
        entry = SnapshotEntry(
            id=snapshot_id,
            payload=payload,
            created_at=now,
            expires_at=now + self._ttl,
        )
        entry.timer = self._schedule_expiry(entry)

        with self._lock:
            previous = self._entries.get(snapshot_id)
            if previous is not None and previous.timer is not None:
                previous.timer.cancel()
            self._entries[snapshot_id] = entry

        logger.info(
            "snapshot_stored",
            snapshot_id=snapshot_id,
            payload_bytes=len(payload),
            ttl_seconds=self._ttl,
        )
        return snapshot_id

    def get(self, snapshot_id: str) -> str:
        """Return the payload for a live snapshot.

        Raises:
            NotFoundError: If the id is unknown or the entry has expired.
        """
        with self._lock:
            entry = self._entries.get(snapshot_id)
            if entry is not None and entry.is_expired(self._clock()):
                self._remove_locked(snapshot_id, entry)
                entry = None

        if entry is None:
            raise NotFoundError(snapshot_id)
        return entry.payload

    def delete(self, snapshot_id: str) -> bool:
        """Remove a snapshot before it expires. Returns False if it was absent."""
        with self._lock:
            entry = self._entries.get(snapshot_id)
            if entry is None:
                return False
            self._remove_locked(snapshot_id, entry)
        return True

    def purge_expired(self) -> int:
        """Drop every entry past its expiry time and return how many went."""
        now = self._clock()
        with self._lock:
            expired = [e for e in self._entries.values() if e.is_expired(now)]
            for entry in expired:
                self._remove_locked(entry.id, entry)

        if expired:
            logger.info("snapshots_purged", count=len(expired))
        return len(expired)

    def close(self) -> None:
        """Cancel all pending expiry timers and drop every entry."""
        with self._lock:
            for entry in self._entries.values():
                if entry.timer is not None:
                    entry.timer.cancel()
            count = len(self._entries)
            self._entries.clear()

        logger.info("snapshot_store_closed", dropped=count)

    def __contains__(self, snapshot_id: str) -> bool:
        with self._lock:
            entry = self._entries.get(snapshot_id)
            return entry is not None and not entry.is_expired(self._clock())

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for e in self._entries.values() if not e.is_expired(now))

    def _schedule_expiry(self, entry: SnapshotEntry) -> Optional[asyncio.TimerHandle]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (sync caller): lazy expiry on read still applies
            return None
        return loop.call_later(self._ttl, self._expire, entry)

    def _expire(self, entry: SnapshotEntry) -> None:
        with self._lock:
            removed = self._remove_locked(entry.id, entry)
        if removed:
            logger.info("snapshot_expired", snapshot_id=entry.id)

    def _remove_locked(self, snapshot_id: str, entry: SnapshotEntry) -> bool:
        # Only remove the exact entry; an id overwritten since is left alone
        if self._entries.get(snapshot_id) is not entry:
            return False
        self._entries.pop(snapshot_id, None)
        if entry.timer is not None:
            entry.timer.cancel()
        return True
