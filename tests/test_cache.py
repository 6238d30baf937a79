"""Tests for the per-provider usage cache."""

import json
from datetime import datetime, timedelta, timezone

from claudecode_statusline.cache import (
    UsageCache,
    format_timestamp,
    parse_timestamp,
)

NOW = datetime(2024, 6, 1, 10, 0, 0, tzinfo=timezone.utc)


# ═══════════════════════ timestamps ═══════════════════════

class TestTimestamps:
    def test_format_uses_z_suffix(self):
        assert format_timestamp(NOW) == "2024-06-01T10:00:00Z"

    def test_format_converts_to_utc(self):
        cst = timezone(timedelta(hours=8))
        assert format_timestamp(datetime(2024, 6, 1, 18, 0, tzinfo=cst)) == "2024-06-01T10:00:00Z"

    def test_parse_z(self):
        assert parse_timestamp("2024-06-01T10:00:00Z") == NOW

    def test_parse_offset(self):
        assert parse_timestamp("2024-06-01T18:00:00+08:00") == NOW

    def test_parse_fractional(self):
        dt = parse_timestamp("2024-06-01T10:00:00.123456Z")
        assert dt.microsecond == 123456

    def test_parse_rejects_naive(self):
        assert parse_timestamp("2024-06-01T10:00:00") is None

    def test_parse_rejects_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp(12345) is None


# ═══════════════════════ UsageCache ═══════════════════════

class TestUsageCache:
    def test_round_trip(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"daily_quota": 1000, "expires_at": None}, now=NOW)
        data = cache.read(now=NOW + timedelta(seconds=10))
        assert data == {"daily_quota": 1000, "expires_at": None, "timestamp": "2024-06-01T10:00:00Z"}

    def test_fresh_just_under_ttl(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"a": 1}, now=NOW)
        assert cache.read(now=NOW + timedelta(seconds=179)) is not None

    def test_stale_at_ttl(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"a": 1}, now=NOW)
        assert cache.read(now=NOW + timedelta(minutes=3)) is None

    def test_stale_file_is_kept(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"a": 1}, now=NOW)
        assert cache.read(now=NOW + timedelta(hours=1)) is None
        assert (tmp_path / "c.json").exists()

    def test_custom_ttl(self, tmp_path):
        cache = UsageCache("c.json", ttl=30, directory=tmp_path)
        cache.write({"a": 1}, now=NOW)
        assert cache.read(now=NOW + timedelta(seconds=29)) is not None
        assert cache.read(now=NOW + timedelta(seconds=31)) is None

    def test_future_timestamp_is_fresh(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"a": 1}, now=NOW + timedelta(minutes=10))
        assert cache.read(now=NOW) is not None

    def test_missing_file(self, tmp_path):
        assert UsageCache("nope.json", directory=tmp_path).read() is None

    def test_corrupt_file(self, tmp_path):
        (tmp_path / "c.json").write_text("{not json")
        assert UsageCache("c.json", directory=tmp_path).read() is None

    def test_non_object(self, tmp_path):
        (tmp_path / "c.json").write_text("[1, 2]")
        assert UsageCache("c.json", directory=tmp_path).read() is None

    def test_missing_timestamp(self, tmp_path):
        (tmp_path / "c.json").write_text(json.dumps({"a": 1}))
        assert UsageCache("c.json", directory=tmp_path).read() is None

    def test_overwrite(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"a": 1}, now=NOW)
        cache.write({"a": 2}, now=NOW + timedelta(minutes=1))
        data = cache.read(now=NOW + timedelta(minutes=2))
        assert data["a"] == 2

    def test_write_creates_directory(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path / "sub")
        assert cache.write({"a": 1}, now=NOW) is not None
        assert (tmp_path / "sub" / "c.json").exists()

    def test_write_failure_is_ignored(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        cache = UsageCache("c.json", directory=blocker)
        assert cache.write({"a": 1}, now=NOW) is None

    def test_write_unserialisable_is_ignored(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        assert cache.write({"a": object()}, now=NOW) is None

    def test_default_directory_is_home_claude(self, home):
        assert UsageCache("x.json").path == home / ".claude" / "x.json"

    def test_clear(self, tmp_path):
        cache = UsageCache("c.json", directory=tmp_path)
        cache.write({"a": 1}, now=NOW)
        cache.clear()
        assert not cache.path.exists()
        cache.clear()  # missing file is fine
