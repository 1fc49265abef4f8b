"""Unit tests for the in-memory storage adapters.

Tests cover:
- TTL expiry on read
- Sweeping of expired keys on write
- Copy semantics
"""

from datetime import timedelta

import pytest
from freezegun import freeze_time

from command_gateway.infrastructure.storage import InMemoryKeyValueStore, InMemoryOptionStore


@pytest.mark.unit
class TestInMemoryKeyValueStore:
    """Test the TTL key-value store."""

    def test_value_expires_after_ttl(self):
        store = InMemoryKeyValueStore()

        with freeze_time("2026-05-01 12:00:00") as frozen:
            store.set("rate_window:1", [1.0], ttl_seconds=60)
            assert store.get("rate_window:1").value == [1.0]

            frozen.tick(timedelta(seconds=61))

            assert store.get("rate_window:1").value is None
        assert store.size == 0

    def test_expired_keys_swept_on_write(self):
        store = InMemoryKeyValueStore()

        with freeze_time("2026-05-01 12:00:00") as frozen:
            for i in range(20):
                store.set(f"rate_window:1:cleanup_logs:{i}", [1.0], ttl_seconds=60)
            store.set("permanent", "x")
            assert store.size == 21

            frozen.tick(timedelta(seconds=61))
            store.set("rate_window:1:cleanup_logs:fresh", [2.0], ttl_seconds=60)

        assert store.size == 2
        assert store.get("permanent").value == "x"

    def test_stored_values_are_copies(self):
        store = InMemoryKeyValueStore()
        window = [1.0]

        store.set("k", window)
        window.append(2.0)
        store.get("k").value.append(3.0)

        assert store.get("k").value == [1.0]

    def test_delete(self):
        store = InMemoryKeyValueStore()
        store.set("k", 1)

        assert store.delete("k").value is True
        assert store.delete("k").value is False


@pytest.mark.unit
class TestInMemoryOptionStore:
    """Test the option store."""

    def test_default_for_missing_option(self):
        assert InMemoryOptionStore().get("missing", []).value == []

    def test_update_and_get(self):
        store = InMemoryOptionStore({"history": [1]})

        store.update("history", [1, 2])

        assert store.get("history").value == [1, 2]
