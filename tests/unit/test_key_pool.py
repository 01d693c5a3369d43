"""
Unit tests for API key rotation.
"""

from datetime import datetime, timedelta, timezone

from rabbit.services.ai.key_pool import KeyPool, parse_reset_time


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


class TestKeyPool:
    def test_returns_first_key(self):
        pool = KeyPool(["key-1", "key-2"])
        assert pool.get_current_key() == "key-1"

    def test_exhausted_key_rotates_to_next(self):
        pool = KeyPool(["key-1", "key-2"])
        pool.mark_key_exhausted("key-1")
        assert pool.get_current_key() == "key-2"

    def test_all_exhausted_returns_none(self):
        pool = KeyPool(["key-1", "key-2"])
        pool.mark_key_exhausted("key-1")
        pool.mark_key_exhausted("key-2")
        assert pool.get_current_key() is None

    def test_mark_key_active_restores_key(self):
        pool = KeyPool(["key-1", "key-2"])
        pool.mark_key_exhausted("key-1")
        pool.mark_key_exhausted("key-2")
        pool.mark_key_active("key-2")
        assert pool.get_current_key() == "key-2"

    def test_reset_time_is_checked_lazily(self):
        clock = FakeClock()
        pool = KeyPool(["key-1", "key-2"], clock=clock)
        pool.mark_key_exhausted("key-1", clock.now + timedelta(seconds=30))
        pool.mark_key_exhausted("key-2")
        assert pool.get_current_key() is None

        clock.now += timedelta(seconds=31)
        assert pool.get_current_key() == "key-1"

    def test_empty_and_duplicate_keys_are_dropped(self):
        pool = KeyPool(["key-1", "", "  ", "key-1", "key-2"])
        assert len(pool) == 2

    def test_from_env(self):
        pool = KeyPool.from_env(["A", "B", "C"], {"A": "a", "C": "c"})
        assert len(pool) == 2
        assert pool.get_current_key() == "a"

    def test_empty_pool_returns_none(self):
        assert KeyPool([]).get_current_key() is None

    def test_status_counts(self):
        pool = KeyPool(["key-1", "key-2"])
        pool.mark_key_exhausted("key-2")
        status = pool.status()
        assert (status.total, status.active, status.exhausted) == (2, 1, 1)

    def test_unknown_key_is_ignored(self):
        pool = KeyPool(["key-1"])
        pool.mark_key_exhausted("other")
        assert pool.get_current_key() == "key-1"


class TestParseResetTime:
    def test_minutes_and_seconds(self):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        reset = parse_reset_time("Rate limit reached. Please try again in 1m23.5s.", now)
        assert reset == now + timedelta(minutes=1, seconds=23.5)

    def test_seconds_only(self):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert parse_reset_time("try again in 7s", now) == now + timedelta(seconds=7)

    def test_no_hint(self):
        assert parse_reset_time("Too many requests") is None
        assert parse_reset_time(None) is None
