"""Reseller helpers: which kinds a vendor may sell, and revenue split."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from app.models.listing import ListingKind
from app.models.user import AppRole
from app.models.vendor_sale import VendorSaleStatus

VENDOR_KINDS = {
    AppRole.VENDOR: (ListingKind.TIKTOK, ListingKind.INSTAGRAM, ListingKind.TELEGRAM, ListingKind.MODEL),
    AppRole.VENDOR_INSTAGRAM: (ListingKind.INSTAGRAM,),
    AppRole.VENDOR_TIKTOK: (ListingKind.TIKTOK,),
    AppRole.VENDOR_MODEL: (ListingKind.MODEL,),
}


def allowed_kinds(role: AppRole) -> Tuple[ListingKind, ...]:
    return VENDOR_KINDS.get(role, ())


def split_sale(amount_cents: int, commission_rate: float) -> Tuple[int, int]:
    """
    Split a sale into (vendor_commission_cents, platform_fee_cents).

    The commission is rounded half-up; the platform keeps the remainder so
    both parts always add up to ``amount_cents``.
    """
    if amount_cents < 0:
        raise ValueError("Sale amount cannot be negative")
    rate = Decimal(str(commission_rate))
    if rate < 0 or rate > 1:
        raise ValueError("Commission rate must be between 0 and 1")

    commission = int((Decimal(amount_cents) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return commission, amount_cents - commission


def earnings_summary(sales: Iterable) -> dict:
    summary = {
        "total_sales": 0,
        "total_sales_cents": 0,
        "total_commission_cents": 0,
        "pending_commission_cents": 0,
        "paid_commission_cents": 0,
    }
    for sale in sales:
        summary["total_sales"] += 1
        summary["total_sales_cents"] += sale.sale_amount_cents
        summary["total_commission_cents"] += sale.vendor_commission_cents
        if sale.status == VendorSaleStatus.PAID:
            summary["paid_commission_cents"] += sale.vendor_commission_cents
        else:
            summary["pending_commission_cents"] += sale.vendor_commission_cents
    return summary
