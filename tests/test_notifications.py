"""Tests for admin notifications and per-user read tracking."""
from datetime import datetime, timedelta, timezone

import pytest

from app.models.notification import Notification, NotificationType, UserNotificationRead
from app.models.user import User, AppRole
from app.services.notifications import (
    live_notifications,
    mark_all_read,
    mark_read,
    notifications_for_user,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _notification(id=1, **kw):
    defaults = dict(
        id=id, title=f"Aviso {id}", message="Manutenção às 22h", type=NotificationType.INFO,
        priority=0, is_active=True, created_at=NOW - timedelta(days=id),
    )
    defaults.update(kw)
    return Notification(**defaults)


class TestReadTracking:
    """Against a real database so the unique read constraint is exercised"""

    @pytest.fixture
    def seeded(self, sqlite_db):
        alice = User(email="alice@example.com", password_hash="x", role=AppRole.USER)
        bob = User(email="bob@example.com", password_hash="x", role=AppRole.USER)
        sqlite_db.add_all([
            alice, bob,
            Notification(title="Novo plano", message="Agency chegou", priority=5),
            Notification(title="Aviso", message="Manutenção", priority=1),
            Notification(title="Antigo", message="Expirado", expires_at=NOW - timedelta(hours=1)),
            Notification(title="Rascunho", message="Inativo", is_active=False),
        ])
        sqlite_db.commit()
        return alice, bob

    def test_feed_shows_live_notifications_by_priority(self, sqlite_db, seeded):
        alice, _ = seeded
        feed = notifications_for_user(sqlite_db, alice.id, now=NOW)
        assert [n.title for n, _ in feed] == ["Novo plano", "Aviso"]
        assert all(read_at is None for _, read_at in feed)

    def test_reads_are_per_user(self, sqlite_db, seeded):
        alice, bob = seeded
        first = live_notifications(sqlite_db, now=NOW)[0]

        assert mark_read(sqlite_db, alice.id, first.id) is True
        assert mark_read(sqlite_db, alice.id, first.id) is False

        alice_feed = dict((n.id, read_at) for n, read_at in notifications_for_user(sqlite_db, alice.id, now=NOW))
        bob_feed = dict((n.id, read_at) for n, read_at in notifications_for_user(sqlite_db, bob.id, now=NOW))
        assert alice_feed[first.id] is not None
        assert bob_feed[first.id] is None
        assert sqlite_db.query(UserNotificationRead).count() == 1

    def test_mark_all_read_skips_already_read(self, sqlite_db, seeded):
        alice, _ = seeded
        first = live_notifications(sqlite_db, now=NOW)[0]
        mark_read(sqlite_db, alice.id, first.id)

        assert mark_all_read(sqlite_db, alice.id, now=NOW) == 1
        assert mark_all_read(sqlite_db, alice.id, now=NOW) == 0
        assert all(read_at is not None for _, read_at in notifications_for_user(sqlite_db, alice.id, now=NOW))

    def test_deleting_notification_drops_its_reads(self, sqlite_db, seeded):
        alice, _ = seeded
        first = live_notifications(sqlite_db, now=NOW)[0]
        mark_read(sqlite_db, alice.id, first.id)

        sqlite_db.delete(first)
        sqlite_db.commit()

        assert sqlite_db.query(UserNotificationRead).count() == 0


class TestAdminRoutes:
    def test_create_records_author(self, client_with_admin, fake_refresh, mock_redis):
        client, db, admin = client_with_admin
        db.refresh.side_effect = fake_refresh

        resp = client.post("/admin/notifications", json={
            "title": "Promoção", "message": "50% no Pro", "type": "promo", "priority": 3,
        })

        assert resp.status_code == 201
        created = db.add.call_args.args[0]
        assert created.created_by == admin.id
        assert resp.json()["type"] == "promo"
        mock_redis.incr.assert_called_with("revision:notifications")

    def test_create_rejects_inverted_window(self, client_with_admin):
        client, db, _ = client_with_admin
        resp = client.post("/admin/notifications", json={
            "title": "x", "message": "y",
            "starts_at": "2026-03-10T00:00:00Z", "expires_at": "2026-03-01T00:00:00Z",
        })
        assert resp.status_code == 422
        db.add.assert_not_called()

    def test_update_null_title_is_422(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.return_value = _notification()

        resp = client.patch("/admin/notifications/1", json={"title": None})

        assert resp.status_code == 422
        db.commit.assert_not_called()

    def test_toggle(self, client_with_admin):
        client, db, _ = client_with_admin
        notification = _notification(is_active=True)
        db.first.return_value = notification

        resp = client.patch("/admin/notifications/1/toggle")

        assert resp.status_code == 200
        assert notification.is_active is False

    def test_requires_admin(self, client_with_user):
        client, _, _ = client_with_user
        assert client.get("/admin/notifications").status_code == 403


class TestUserRoutes:
    def test_feed_flags_read_items(self, client_with_user):
        client, db, user = client_with_user
        read = UserNotificationRead(user_id=user.id, notification_id=1, read_at=NOW)
        # Reads are loaded first, then the notifications
        db.all.side_effect = [[read], [_notification(1, priority=1), _notification(2, priority=9)]]

        resp = client.get("/notifications")

        assert resp.status_code == 200
        assert [(n["id"], n["is_read"]) for n in resp.json()] == [(2, False), (1, True)]

    def test_unread_only(self, client_with_user):
        client, db, user = client_with_user
        read = UserNotificationRead(user_id=user.id, notification_id=1, read_at=NOW)
        db.all.side_effect = [[read], [_notification(1), _notification(2)]]

        resp = client.get("/notifications?unread_only=true")

        assert [n["id"] for n in resp.json()] == [2]

    def test_mark_read(self, client_with_user):
        client, db, user = client_with_user
        db.all.return_value = [_notification(1)]

        resp = client.post("/notifications/1/read")

        assert resp.status_code == 204
        row = db.add.call_args.args[0]
        assert (row.user_id, row.notification_id) == (user.id, 1)
        db.commit.assert_called_once()

    def test_mark_read_twice_is_noop(self, client_with_user):
        client, db, user = client_with_user
        db.all.return_value = [_notification(1)]
        db.first.return_value = UserNotificationRead(user_id=user.id, notification_id=1)

        assert client.post("/notifications/1/read").status_code == 204
        db.add.assert_not_called()

    def test_mark_read_hidden_notification_is_404(self, client_with_user):
        client, db, _ = client_with_user
        db.all.return_value = [_notification(1, expires_at=datetime(2020, 1, 1, tzinfo=timezone.utc))]

        assert client.post("/notifications/1/read").status_code == 404
        db.add.assert_not_called()
