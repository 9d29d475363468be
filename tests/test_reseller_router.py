"""Tests for the reseller panel and admin vendor sale attribution."""
import pytest
from datetime import datetime, timezone
from unittest.mock import patch

from app.models.listing import TikTokAccount, InstagramAccount
from app.models.user import AppRole
from app.models.vendor_sale import VendorSale, VendorSaleStatus

CREATED = datetime(2026, 2, 1, tzinfo=timezone.utc)


def _sale(id=1, status=VendorSaleStatus.PENDING, amount=10000, commission=7000):
    return VendorSale(
        id=id, vendor_id=4, buyer_id=2, item_type="tiktok", item_id=1,
        sale_amount_cents=amount, vendor_commission_cents=commission,
        platform_fee_cents=amount - commission, status=status, created_at=CREATED,
    )


class TestOverview:
    def test_generic_vendor(self, client_with_vendor):
        client, db, _ = client_with_vendor
        db.all.return_value = [_sale(1), _sale(2, status=VendorSaleStatus.PAID)]

        resp = client.get("/reseller")

        assert resp.status_code == 200
        data = resp.json()
        assert set(data["allowed_kinds"]) == {"tiktok", "instagram", "telegram", "model"}
        assert data["earnings"]["total_sales"] == 2
        assert data["earnings"]["pending_commission_cents"] == 7000
        assert data["earnings"]["paid_commission_cents"] == 7000

    def test_regular_user_forbidden(self, client_with_user):
        client, _, _ = client_with_user
        assert client.get("/reseller").status_code == 403


class TestVendorListings:
    def test_create_own_listing(self, client_with_vendor, fake_refresh):
        client, db, vendor = client_with_vendor
        db.refresh.side_effect = fake_refresh

        resp = client.post("/reseller/listings/instagram", json={"username": "loja", "price": "89,90"})

        assert resp.status_code == 201
        assert resp.json()["price_cents"] == 8990
        assert resp.json()["created_by"] == vendor.id

    def test_zero_price_rejected(self, client_with_vendor):
        client, db, _ = client_with_vendor
        resp = client.post("/reseller/listings/instagram", json={"username": "loja", "price": "0"})
        assert resp.status_code == 400
        db.add.assert_not_called()

    def test_specialised_vendor_limited_to_its_kind(self, client_with_vendor):
        client, _, vendor = client_with_vendor
        vendor.role = AppRole.VENDOR_TIKTOK
        resp = client.post("/reseller/listings/instagram", json={"username": "loja", "price": "10"})
        assert resp.status_code == 403

    def test_cannot_edit_sold_listing(self, client_with_vendor):
        client, db, vendor = client_with_vendor
        db.first.return_value = TikTokAccount(
            id=1, username="x", price_cents=100, is_sold=True, created_by=vendor.id,
        )
        resp = client.patch("/reseller/listings/tiktok/1", json={"price": "20"})
        assert resp.status_code == 409

    def test_other_vendors_listing_not_found(self, client_with_vendor):
        client, db, _ = client_with_vendor
        db.first.return_value = None
        assert client.delete("/reseller/listings/tiktok/1").status_code == 404


class TestRecordSale:
    def _listing(self, **kw):
        defaults = dict(id=1, username="x", price_cents=15, is_sold=True, sold_to_user_id=2, created_by=4)
        defaults.update(kw)
        return TikTokAccount(**defaults)

    def test_commission_split(self, client_with_admin, fake_refresh):
        client, db, _ = client_with_admin
        db.first.side_effect = [self._listing(), None]
        db.refresh.side_effect = fake_refresh

        with patch("app.routers.reseller.settings") as mock_settings:
            mock_settings.vendor_commission_rate = 0.7
            resp = client.post("/admin/vendor-sales", json={
                "vendor_id": 4, "listing_kind": "tiktok", "listing_id": 1,
            })

        assert resp.status_code == 201
        data = resp.json()
        assert data["sale_amount_cents"] == 15
        assert data["vendor_commission_cents"] == 11
        assert data["platform_fee_cents"] == 4
        assert data["status"] == "pending"

    def test_listing_of_other_vendor(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.side_effect = [self._listing(created_by=99)]
        resp = client.post("/admin/vendor-sales", json={"vendor_id": 4, "listing_kind": "tiktok", "listing_id": 1})
        assert resp.status_code == 400

    def test_unsold_listing(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.side_effect = [self._listing(is_sold=False, sold_to_user_id=None)]
        resp = client.post("/admin/vendor-sales", json={"vendor_id": 4, "listing_kind": "tiktok", "listing_id": 1})
        assert resp.status_code == 409

    def test_duplicate_sale(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.side_effect = [self._listing(), _sale()]
        resp = client.post("/admin/vendor-sales", json={"vendor_id": 4, "listing_kind": "tiktok", "listing_id": 1})
        assert resp.status_code == 409
        db.add.assert_not_called()


class TestPayCommission:
    def test_marks_paid(self, client_with_admin):
        client, db, _ = client_with_admin
        sale = _sale()
        db.first.return_value = sale

        resp = client.post("/admin/vendor-sales/1/pay")

        assert resp.status_code == 200
        assert sale.status == VendorSaleStatus.PAID
        assert sale.paid_at is not None

    def test_already_paid(self, client_with_admin):
        client, db, _ = client_with_admin
        db.first.return_value = _sale(status=VendorSaleStatus.PAID)
        assert client.post("/admin/vendor-sales/1/pay").status_code == 409
