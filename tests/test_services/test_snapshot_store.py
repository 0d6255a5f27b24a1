"""
Tests for the ephemeral SnapshotStore.

Tests cover:
- put/get round trip and identifier generation
- Payload validation
- TTL expiry driven by a virtual clock (no refresh on read)
- Per-entry eviction timers on a running event loop
- Explicit delete, purge and close
- Overwrite-on-collision and concurrent access
"""

import asyncio
import threading

import pytest

from lifeweeks.domain.errors import NotFoundError, ValidationError
from lifeweeks.services.snapshot_store import (
    DEFAULT_TTL_SECONDS,
    SnapshotStore,
    generate_snapshot_id,
)

PAYLOAD = "data:image/png;base64,AAA"


# =============================================================================
# Put / Get
# =============================================================================


class TestPutAndGet:
    def test_put_returns_non_empty_id(self, store):
        snapshot_id = store.put(PAYLOAD)
        assert isinstance(snapshot_id, str)
        assert snapshot_id

    def test_get_returns_payload(self, store):
        snapshot_id = store.put(PAYLOAD)
        assert store.get(snapshot_id) == PAYLOAD

    def test_ids_are_distinct(self, store):
        ids = {store.put(PAYLOAD) for _ in range(500)}
        assert len(ids) == 500

    def test_get_unknown_raises_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.get("nonexistent")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Image not found"
        assert exc_info.value.snapshot_id == "nonexistent"

    def test_repeated_reads(self, store):
        snapshot_id = store.put(PAYLOAD)
        for _ in range(5):
            assert store.get(snapshot_id) == PAYLOAD

    def test_len_and_contains(self, store):
        snapshot_id = store.put(PAYLOAD)
        store.put(PAYLOAD)
        assert len(store) == 2
        assert snapshot_id in store
        assert "missing" not in store

    def test_default_ttl_is_one_hour(self):
        assert DEFAULT_TTL_SECONDS == 3600
        assert SnapshotStore().ttl_seconds == 3600

    def test_generated_id_is_url_safe(self):
        snapshot_id = generate_snapshot_id()
        assert len(snapshot_id) == 16
        assert all(c.isalnum() or c in "-_" for c in snapshot_id)


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    @pytest.mark.parametrize("payload", ["", None, 123, b"bytes"])
    def test_rejects_missing_or_empty_payload(self, store, payload):
        with pytest.raises(ValidationError) as exc_info:
            store.put(payload)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "No image data provided"

    def test_rejected_payload_is_not_stored(self, store):
        with pytest.raises(ValidationError):
            store.put("")
        assert len(store) == 0


# =============================================================================
# Expiry with a virtual clock
# =============================================================================


class TestExpiry:
    def test_live_just_before_ttl(self, store, clock):
        snapshot_id = store.put(PAYLOAD)
        clock.advance(3599.999)
        assert store.get(snapshot_id) == PAYLOAD

    def test_expired_after_ttl(self, store, clock):
        snapshot_id = store.put(PAYLOAD)
        clock.advance(3600)
        with pytest.raises(NotFoundError):
            store.get(snapshot_id)

    def test_reads_do_not_refresh_ttl(self, store, clock):
        snapshot_id = store.put(PAYLOAD)
        for _ in range(3):
            clock.advance(1000)
            assert store.get(snapshot_id) == PAYLOAD
        clock.advance(600)
        with pytest.raises(NotFoundError):
            store.get(snapshot_id)

    def test_expired_entries_not_counted(self, store, clock):
        first = store.put(PAYLOAD)
        clock.advance(1800)
        second = store.put(PAYLOAD)
        clock.advance(1800)
        assert first not in store
        assert second in store
        assert len(store) == 1

    def test_purge_expired(self, store, clock):
        store.put(PAYLOAD)
        store.put(PAYLOAD)
        clock.advance(3600)
        keep = store.put(PAYLOAD)
        assert store.purge_expired() == 2
        assert store.get(keep) == PAYLOAD
        assert store.purge_expired() == 0


# =============================================================================
# Timers on a running loop
# =============================================================================


class TestEvictionTimers:
    @pytest.mark.asyncio
    async def test_timer_removes_entry(self):
        store = SnapshotStore(ttl_seconds=0.05)
        snapshot_id = store.put(PAYLOAD)
        assert snapshot_id in store

        await asyncio.sleep(0.2)

        assert store._entries == {}
        with pytest.raises(NotFoundError):
            store.get(snapshot_id)

    @pytest.mark.asyncio
    async def test_timer_handle_kept_with_entry(self):
        store = SnapshotStore(ttl_seconds=60)
        snapshot_id = store.put(PAYLOAD)
        entry = store._entries[snapshot_id]
        assert entry.timer is not None
        assert not entry.timer.cancelled()

        assert store.delete(snapshot_id) is True
        assert entry.timer.cancelled()

    @pytest.mark.asyncio
    async def test_close_cancels_all_timers(self):
        store = SnapshotStore(ttl_seconds=60)
        entries = [store._entries[store.put(PAYLOAD)] for _ in range(3)]

        store.close()

        assert len(store) == 0
        assert all(e.timer.cancelled() for e in entries)

    def test_no_timer_without_running_loop(self, store):
        snapshot_id = store.put(PAYLOAD)
        assert store._entries[snapshot_id].timer is None


# =============================================================================
# Delete and collisions
# =============================================================================


class TestDelete:
    def test_delete_live_entry(self, store):
        snapshot_id = store.put(PAYLOAD)
        assert store.delete(snapshot_id) is True
        with pytest.raises(NotFoundError):
            store.get(snapshot_id)

    def test_delete_is_idempotent(self, store):
        snapshot_id = store.put(PAYLOAD)
        assert store.delete(snapshot_id) is True
        assert store.delete(snapshot_id) is False
        assert store.delete("never-existed") is False

    def test_stale_expiry_does_not_remove_overwritten_entry(self, clock):
        ids = iter(["same", "same"])
        store = SnapshotStore(ttl_seconds=3600, clock=clock, id_factory=lambda: next(ids))

        store.put("data:image/png;base64,OLD")
        old_entry = store._entries["same"]
        store.put("data:image/png;base64,NEW")

        # The first entry's eviction firing late must leave the new one alone
        store._expire(old_entry)
        assert store.get("same") == "data:image/png;base64,NEW"


# =============================================================================
# Concurrency
# =============================================================================


class TestConcurrency:
    def test_concurrent_puts_and_gets(self, store):
        results = []
        errors = []

        def worker():
            try:
                for _ in range(100):
                    snapshot_id = store.put(PAYLOAD)
                    results.append(store.get(snapshot_id))
            except Exception as e:  # pragma: no cover - surfaced below
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(results) == 800
        assert len(store) == 800
