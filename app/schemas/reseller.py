from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.models.listing import ListingKind
from app.models.vendor_sale import VendorSaleStatus


class VendorSaleResponse(BaseModel):
    id: int
    buyer_id: int
    item_type: str
    item_id: int
    transaction_id: Optional[int] = None
    sale_amount_cents: int
    vendor_commission_cents: int
    platform_fee_cents: int
    status: VendorSaleStatus
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class EarningsSummary(BaseModel):
    total_sales: int
    total_sales_cents: int
    total_commission_cents: int
    pending_commission_cents: int
    paid_commission_cents: int
    commission_rate: float


class ResellerOverview(BaseModel):
    allowed_kinds: List[ListingKind]
    earnings: EarningsSummary


class RecordSaleRequest(BaseModel):
    """Attribute a completed sale of one of the vendor's listings (admin only)."""
    vendor_id: int
    listing_kind: ListingKind
    listing_id: int
    transaction_id: Optional[int] = None
