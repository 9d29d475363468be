"""Tests for heartbeat-based presence."""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from app.models.profile import Profile
from app.services.presence import is_online, record_heartbeat, mark_stale_offline

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_online_within_window():
    profile = Profile(is_online=True, last_seen_at=NOW - timedelta(minutes=4))
    assert is_online(profile, now=NOW)


def test_stale_heartbeat_is_offline():
    profile = Profile(is_online=True, last_seen_at=NOW - timedelta(minutes=6))
    assert not is_online(profile, now=NOW)


def test_offline_flag_wins():
    profile = Profile(is_online=False, last_seen_at=NOW)
    assert not is_online(profile, now=NOW)


def test_record_heartbeat():
    profile = Profile(is_online=False)
    record_heartbeat(profile, now=NOW)
    assert profile.is_online is True
    assert profile.last_seen_at == NOW


def test_mark_stale_offline():
    stale = Profile(is_online=True, last_seen_at=NOW - timedelta(hours=1))
    db = MagicMock()
    db.query.return_value.filter.return_value.all.return_value = [stale]
    assert mark_stale_offline(db, now=NOW) == 1
    assert stale.is_online is False
    db.commit.assert_called_once()
