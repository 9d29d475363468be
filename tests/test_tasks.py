"""Tests for the periodic maintenance tasks"""
from unittest.mock import MagicMock, patch

import pytest

from app.celery_app import celery_app
from app.tasks import expire_subscriptions, mark_stale_users_offline


@pytest.fixture
def session():
    db = MagicMock()
    with patch("app.tasks.SessionLocal", return_value=db):
        yield db


def test_beat_schedule_runs_only_maintenance_tasks():
    scheduled = {entry["task"] for entry in celery_app.conf.beat_schedule.values()}
    registered = {name for name in celery_app.tasks if name.startswith("app.tasks.")}
    assert scheduled == registered == {
        "app.tasks.expire_subscriptions",
        "app.tasks.mark_stale_users_offline",
    }


def test_expire_subscriptions_bumps_revisions(session, mock_redis):
    with patch("app.tasks.expire_overdue_subscriptions", return_value=2) as expire:
        result = expire_subscriptions()

    assert result == {"expired": 2}
    expire.assert_called_once_with(session)
    bumped = [c.args[0] for c in mock_redis.incr.call_args_list]
    assert bumped == ["revision:subscriptions", "revision:profiles"]
    session.close.assert_called_once()


def test_expire_subscriptions_nothing_due(session, mock_redis):
    with patch("app.tasks.expire_overdue_subscriptions", return_value=0):
        assert expire_subscriptions() == {"expired": 0}
    mock_redis.incr.assert_not_called()


def test_failure_rolls_back_and_closes(session):
    with patch("app.tasks.expire_overdue_subscriptions", side_effect=RuntimeError("db down")):
        with pytest.raises(RuntimeError):
            expire_subscriptions()

    session.rollback.assert_called_once()
    session.close.assert_called_once()


def test_mark_stale_users_offline(session, mock_redis):
    with patch("app.tasks.mark_stale_offline", return_value=3):
        assert mark_stale_users_offline() == {"marked_offline": 3}
    mock_redis.incr.assert_called_once_with("revision:profiles")
    session.close.assert_called_once()
