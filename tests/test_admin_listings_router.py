"""Tests for admin listing CRUD across listing kinds."""
import pytest
from datetime import datetime, timezone
from unittest.mock import Mock, patch

from app.models.listing import TikTokAccount, InstagramAccount, TelegramGroup
from app.models.user import User
from app.services.encryption import decrypt_value, encrypt_value
from app.services.storage import StorageError

CREATED = datetime(2026, 2, 1, tzinfo=timezone.utc)


def _tiktok(id=1, **kw):
    defaults = dict(
        id=id, username=f"acc{id}", followers=1000, likes=10, is_verified=False,
        price_cents=10000, is_sold=False, created_at=CREATED,
    )
    defaults.update(kw)
    return TikTokAccount(**defaults)


class TestCreateListing:
    def test_price_text_stored_as_cents(self, client_with_admin, fake_refresh):
        client, db, admin = client_with_admin
        db.refresh.side_effect = fake_refresh

        resp = client.post("/admin/listings/tiktok", json={
            "username": "dancas", "followers": 12000, "price": "499.90",
            "deliverable_password": "senha123",
        })

        assert resp.status_code == 201
        data = resp.json()
        assert data["price_cents"] == 49990
        assert data["is_sold"] is False
        assert data["created_by"] == admin.id
        assert data["deliverable_password"] == "senha123"

        stored = db.add.call_args.args[0]
        assert stored.deliverable_password != "senha123"
        assert decrypt_value(stored.deliverable_password) == "senha123"
        db.commit.assert_called_once()

    def test_comma_decimal(self, client_with_admin, fake_refresh):
        client, db, _ = client_with_admin
        db.refresh.side_effect = fake_refresh
        resp = client.post("/admin/listings/telegram", json={"group_name": "VIP", "price": "1.234,56"})
        assert resp.status_code == 201
        assert resp.json()["price_cents"] == 123456

    def test_invalid_price_is_400(self, client_with_admin):
        client, db, _ = client_with_admin
        resp = client.post("/admin/listings/tiktok", json={"username": "x", "price": "abc"})
        assert resp.status_code == 400
        db.commit.assert_not_called()

    def test_missing_price_is_422(self, client_with_admin):
        client, _, _ = client_with_admin
        resp = client.post("/admin/listings/instagram", json={"username": "x"})
        assert resp.status_code == 422

    def test_regular_user_forbidden(self, client_with_user):
        client, _, _ = client_with_user
        resp = client.post("/admin/listings/tiktok", json={"username": "x", "price": "10"})
        assert resp.status_code == 403


class TestListListings:
    def test_status_filter_and_sort(self, client_with_admin):
        client, db, _ = client_with_admin
        db.all.return_value = [
            _tiktok(1, price_cents=500),
            _tiktok(2, price_cents=100, is_sold=True, sold_to_user_id=9, sold_at=CREATED),
            _tiktok(3, price_cents=300),
        ]

        all_resp = client.get("/admin/listings/tiktok?sort=price_asc")
        assert [i["id"] for i in all_resp.json()] == [2, 3, 1]

        available = client.get("/admin/listings/tiktok?status=available")
        assert {i["id"] for i in available.json()} == {1, 3}

        sold = client.get("/admin/listings/tiktok?status=sold")
        assert [i["id"] for i in sold.json()] == [2]

    def test_unknown_sort_is_400(self, client_with_admin):
        client, _, _ = client_with_admin
        assert client.get("/admin/listings/tiktok?sort=random").status_code == 400


class TestUpdateListing:
    def test_partial_update(self, client_with_admin):
        client, db, _ = client_with_admin
        listing = _tiktok(1)
        db.first.return_value = listing

        resp = client.patch("/admin/listings/tiktok/1", json={"price": "250,00", "niche": "humor"})

        assert resp.status_code == 200
        assert listing.price_cents == 25000
        assert listing.niche == "humor"
        assert listing.username == "acc1"

    @pytest.mark.parametrize("field", ["username", "followers", "is_verified", "price"])
    def test_null_on_required_column_is_422(self, client_with_admin, field):
        client, db, _ = client_with_admin
        listing = _tiktok(1)
        db.first.return_value = listing

        resp = client.patch("/admin/listings/tiktok/1", json={field: None})

        assert resp.status_code == 422
        assert f"{field} cannot be null" in resp.text
        assert listing.username == "acc1" and listing.price_cents == 10000
        db.commit.assert_not_called()

    def test_null_clears_optional_column(self, client_with_admin):
        client, db, _ = client_with_admin
        listing = _tiktok(1, niche="humor")
        db.first.return_value = listing

        resp = client.patch("/admin/listings/tiktok/1", json={"niche": None})

        assert resp.status_code == 200
        assert listing.niche is None

    def test_not_found(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.return_value = None
        assert client.patch("/admin/listings/tiktok/99", json={"niche": "x"}).status_code == 404


class TestSaleState:
    def test_mark_sold(self, client_with_admin):
        client, db, _ = client_with_admin
        listing = _tiktok(1)
        buyer = Mock(spec=User)
        buyer.id = 7
        db.first.side_effect = [listing, buyer]

        resp = client.post("/admin/listings/tiktok/1/mark-sold", json={"buyer_id": 7})

        assert resp.status_code == 200
        assert listing.is_sold is True
        assert listing.sold_to_user_id == 7
        assert listing.sold_at is not None

    def test_mark_sold_twice_is_409(self, client_with_admin):
        client, db, _ = client_with_admin
        listing = _tiktok(1, is_sold=True, sold_to_user_id=5, sold_at=CREATED)
        buyer = Mock(spec=User)
        buyer.id = 7
        db.first.side_effect = [listing, buyer]

        resp = client.post("/admin/listings/tiktok/1/mark-sold", json={"buyer_id": 7})

        assert resp.status_code == 409
        assert listing.sold_to_user_id == 5

    def test_unknown_buyer_is_404(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.side_effect = [_tiktok(1), None]
        resp = client.post("/admin/listings/tiktok/1/mark-sold", json={"buyer_id": 7})
        assert resp.status_code == 404

    def test_reactivate_resets_only_sale_fields(self, client_with_admin):
        client, db, _ = client_with_admin
        listing = _tiktok(
            1, is_sold=True, sold_to_user_id=5, sold_at=CREATED,
            niche="fitness", deliverable_password=encrypt_value("pw"),
        )
        db.first.return_value = listing

        resp = client.post("/admin/listings/tiktok/1/reactivate")

        assert resp.status_code == 200
        assert (listing.is_sold, listing.sold_at, listing.sold_to_user_id) == (False, None, None)
        assert listing.price_cents == 10000
        assert listing.niche == "fitness"
        assert resp.json()["deliverable_password"] == "pw"


def test_delete_listing(client_with_admin, mock_redis):
    client, db, _ = client_with_admin
    listing = _tiktok(1)
    db.first.return_value = listing

    resp = client.delete("/admin/listings/tiktok/1")

    assert resp.status_code == 204
    db.delete.assert_called_once_with(listing)
    mock_redis.incr.assert_called_with("revision:tiktok_accounts")


class TestImageUpload:
    def test_upload(self, client_with_admin):
        client, _, _ = client_with_admin
        with patch("app.routers.admin_listings.store_image", return_value="https://cdn/x.png"):
            resp = client.post("/admin/listings/images", files={"file": ("x.png", b"img", "image/png")})
        assert resp.status_code == 201
        assert resp.json()["url"] == "https://cdn/x.png"

    def test_rejected_file(self, client_with_admin):
        client, _, _ = client_with_admin
        with patch("app.routers.admin_listings.store_image", side_effect=ValueError("Only image files are accepted")):
            resp = client.post("/admin/listings/images", files={"file": ("x.pdf", b"pdf", "application/pdf")})
        assert resp.status_code == 400

    def test_provider_failure(self, client_with_admin):
        client, _, _ = client_with_admin
        with patch("app.routers.admin_listings.store_image", side_effect=StorageError("503")):
            resp = client.post("/admin/listings/images", files={"file": ("x.png", b"img", "image/png")})
        assert resp.status_code == 502
