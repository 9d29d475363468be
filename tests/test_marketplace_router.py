"""Tests for marketplace browsing and purchases."""
import pytest
from datetime import datetime, timezone
from unittest.mock import patch

from app.models.listing import TikTokAccount, TelegramGroup, InstagramAccount, ModelForSale
from app.services.encryption import encrypt_value

CREATED = datetime(2026, 2, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def features_enabled():
    with patch("app.routers.marketplace.feature_settings.is_enabled", return_value=True) as enabled:
        yield enabled


def _group(id, **kw):
    defaults = dict(id=id, group_name=f"Grupo {id}", members_count=100, is_verified=False,
                    price_cents=1000, is_sold=False, created_at=CREATED)
    defaults.update(kw)
    return TelegramGroup(**defaults)


class TestBrowse:
    def test_public_fields_only(self, client_with_user):
        client, db, _ = client_with_user
        db.all.return_value = [_group(1, deliverable_invite_link="https://t.me/+secret")]

        resp = client.get("/marketplace/telegram")

        assert resp.status_code == 200
        item = resp.json()[0]
        assert item["group_name"] == "Grupo 1"
        assert "deliverable_invite_link" not in item
        assert "deliverable_info" not in item

    def test_price_filter_accepts_typed_values(self, client_with_user):
        client, db, _ = client_with_user
        db.all.return_value = [_group(1, price_cents=5000), _group(2, price_cents=15000)]

        resp = client.get("/marketplace/telegram", params={"max_price": "99,90"})

        assert [i["id"] for i in resp.json()] == [1]

    def test_bad_price_filter_is_400(self, client_with_user):
        client, _, _ = client_with_user
        assert client.get("/marketplace/telegram", params={"min_price": "cem"}).status_code == 400

    def test_sort_by_followers(self, client_with_user):
        client, db, _ = client_with_user
        db.all.return_value = [_group(1, members_count=10), _group(2, members_count=900)]
        resp = client.get("/marketplace/telegram?sort=followers_desc")
        assert [i["id"] for i in resp.json()] == [2, 1]

    def test_disabled_section_is_403(self, client_with_user, features_enabled):
        client, _, _ = client_with_user
        features_enabled.return_value = False
        resp = client.get("/marketplace/tiktok")
        assert resp.status_code == 403
        assert features_enabled.call_args.args[1] == "tiktok_enabled"

    def test_niches(self, client_with_user):
        client, db, _ = client_with_user
        db.all.return_value = [_group(1, niche="vendas"), _group(2, niche="cripto"), _group(3, niche="vendas")]
        resp = client.get("/marketplace/telegram/niches")
        assert resp.json() == {"niches": ["cripto", "vendas"]}


def test_detail_not_found(client_with_user):
    client, db, _ = client_with_user
    db.first.return_value = None
    assert client.get("/marketplace/telegram/5").status_code == 404


def test_purchases_include_decrypted_deliverables(client_with_user):
    client, db, user = client_with_user
    sold_at = datetime(2026, 2, 10, tzinfo=timezone.utc)
    account = TikTokAccount(
        id=3, username="comprada", price_cents=20000, is_sold=True, sold_at=sold_at,
        sold_to_user_id=user.id, deliverable_login="login", deliverable_password=encrypt_value("pw"),
    )
    db.all.side_effect = [[account], [], [], []]

    resp = client.get("/marketplace/purchases")

    assert resp.status_code == 200
    purchase = resp.json()[0]
    assert purchase["kind"] == "tiktok"
    assert purchase["title"] == "comprada"
    assert purchase["deliverable"]["deliverable_password"] == "pw"
