"""Tests for the signed-in user's profile, plan and presence endpoints"""
from datetime import datetime, timezone
from unittest.mock import patch

from app.models.plan import Plan, PlanType, Subscription, SubscriptionStatus

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _subscription():
    plan = Plan(id=2, slug=PlanType.PRO, name="Pro", price_cents=14900,
                has_scheduling=True, has_ai_models=True, is_active=True, created_at=NOW)
    return Subscription(id=5, user_id=2, plan_id=2, plan=plan, status=SubscriptionStatus.ACTIVE,
                        started_at=NOW, created_at=NOW)


def test_get_me_reports_effective_plan(client_with_user):
    client, db, _ = client_with_user
    db.first.return_value = _subscription()

    with patch("app.routers.profiles.resolve_current_plan", return_value=PlanType.PRO):
        resp = client.get("/me")

    assert resp.status_code == 200
    data = resp.json()
    assert data["effective_plan"] == "pro"
    assert data["role"] == "user"
    assert data["profile"]["email"] == "user@test.com"
    assert data["subscription"]["plan"]["slug"] == "pro"


def test_get_me_without_subscription(client_with_user):
    client, db, _ = client_with_user
    with patch("app.routers.profiles.resolve_current_plan", return_value=PlanType.FREE):
        resp = client.get("/me")

    assert resp.status_code == 200
    assert resp.json()["subscription"] is None


def test_update_profile_only_touches_sent_fields(client_with_user, mock_redis):
    client, db, user = client_with_user
    user.profile.full_name = "Antigo"

    resp = client.patch("/me/profile", json={"phone": "11999990000"})

    assert resp.status_code == 200
    assert user.profile.phone == "11999990000"
    assert user.profile.full_name == "Antigo"
    db.commit.assert_called_once()
    mock_redis.incr.assert_called_with("revision:profiles")


def test_heartbeat_marks_online(client_with_user):
    client, db, user = client_with_user

    resp = client.post("/me/heartbeat")

    assert resp.status_code == 200
    assert resp.json()["is_online"] is True
    assert user.profile.is_online is True
    assert user.profile.last_seen_at is not None
    db.commit.assert_called_once()


def test_offline(client_with_user):
    client, db, user = client_with_user
    user.profile.is_online = True

    resp = client.post("/me/offline")

    assert resp.status_code == 204
    assert user.profile.is_online is False


def test_heartbeat_without_profile(client_with_user):
    client, _, user = client_with_user
    user.profile = None

    resp = client.post("/me/heartbeat")

    assert resp.status_code == 404


def test_list_plans_ordered_by_tier(unauthenticated_client):
    client, db = unauthenticated_client
    db.all.return_value = [
        Plan(id=3, slug=PlanType.AGENCY, name="Agency", price_cents=49900,
             has_scheduling=True, has_ai_models=True, is_active=True),
        Plan(id=1, slug=PlanType.FREE, name="Free", price_cents=0,
             has_scheduling=False, has_ai_models=False, is_active=True),
    ]

    resp = client.get("/plans")

    assert resp.status_code == 200
    assert [p["slug"] for p in resp.json()] == ["free", "agency"]
