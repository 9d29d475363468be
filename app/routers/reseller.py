"""
Reseller (vendor) panel.

Vendors manage their own listings for the kinds their role allows, follow
their sales and commission. Admins attribute sales to vendors and mark
commissions as paid.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.auth.dependencies import require_admin, require_vendor
from app.models.user import User
from app.models.listing import ListingKind, LISTING_MODELS
from app.models.vendor_sale import VendorSale, VendorSaleStatus
from app.schemas.listings import LISTING_SCHEMAS, detailed_view
from app.schemas.reseller import (
    EarningsSummary,
    RecordSaleRequest,
    ResellerOverview,
    VendorSaleResponse,
)
from app.services import revisions
from app.services.listings import apply_changes
from app.services.vendor import allowed_kinds, earnings_summary, split_sale

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reseller", tags=["Reseller"])
admin_router = APIRouter(prefix="/admin/vendor-sales", tags=["Admin Vendor Sales"])


def _earnings(sales) -> EarningsSummary:
    return EarningsSummary(**earnings_summary(sales), commission_rate=settings.vendor_commission_rate)


def _own_sales(db: Session, vendor: User):
    return (
        db.query(VendorSale)
        .filter(VendorSale.vendor_id == vendor.id)
        .order_by(VendorSale.created_at.desc())
        .all()
    )


@router.get("", response_model=ResellerOverview)
def overview(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    return ResellerOverview(
        allowed_kinds=list(allowed_kinds(current_user.role)),
        earnings=_earnings(_own_sales(db, current_user)),
    )


@router.get("/sales", response_model=List[VendorSaleResponse])
def my_sales(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    return _own_sales(db, current_user)


@router.get("/earnings", response_model=EarningsSummary)
def my_earnings(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    return _earnings(_own_sales(db, current_user))


def _register(kind: ListingKind):
    model = LISTING_MODELS[kind]
    schemas = LISTING_SCHEMAS[kind]
    resource = model.__tablename__
    base = f"/listings/{kind.value}"

    def check_role(user: User):
        if kind not in allowed_kinds(user.role):
            raise HTTPException(status_code=403, detail=f"Your role cannot sell {kind.value} listings")

    def get_own(db: Session, user: User, listing_id: int):
        listing = db.query(model).filter(model.id == listing_id, model.created_by == user.id).first()
        if not listing:
            raise HTTPException(status_code=404, detail="Listing not found")
        return listing

    def ensure_unsold(listing):
        if listing.is_sold:
            raise HTTPException(status_code=409, detail="Sold listings cannot be changed")

    @router.get(base, response_model=List[schemas.admin], name=f"reseller_list_{kind.value}")
    def list_own(
        db: Session = Depends(get_db),
        current_user: User = Depends(require_vendor),
    ):
        check_role(current_user)
        rows = (
            db.query(model)
            .filter(model.created_by == current_user.id)
            .order_by(model.created_at.desc())
            .all()
        )
        return [detailed_view(kind, r) for r in rows]

    @router.post(base, response_model=schemas.admin, status_code=status.HTTP_201_CREATED,
                 name=f"reseller_create_{kind.value}")
    def create_own(
        data: schemas.create,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_vendor),
    ):
        check_role(current_user)
        listing = model(created_by=current_user.id, is_sold=False)
        try:
            apply_changes(listing, data.model_dump(), require_positive_price=True)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        db.add(listing)
        db.commit()
        db.refresh(listing)
        revisions.bump(resource)
        logger.info("Vendor %s created %s listing %s", current_user.id, kind.value, listing.id)
        return detailed_view(kind, listing)

    @router.patch(base + "/{listing_id}", response_model=schemas.admin, name=f"reseller_update_{kind.value}")
    def update_own(
        listing_id: int,
        data: schemas.update,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_vendor),
    ):
        check_role(current_user)
        listing = get_own(db, current_user, listing_id)
        ensure_unsold(listing)
        try:
            apply_changes(listing, data.model_dump(exclude_unset=True), require_positive_price=True)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        db.commit()
        db.refresh(listing)
        revisions.bump(resource)
        return detailed_view(kind, listing)

    @router.delete(base + "/{listing_id}", status_code=status.HTTP_204_NO_CONTENT,
                   name=f"reseller_delete_{kind.value}")
    def delete_own(
        listing_id: int,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_vendor),
    ):
        check_role(current_user)
        listing = get_own(db, current_user, listing_id)
        ensure_unsold(listing)
        db.delete(listing)
        db.commit()
        revisions.bump(resource)


for _kind in ListingKind:
    _register(_kind)


@admin_router.get("", response_model=List[VendorSaleResponse])
def list_vendor_sales(
    vendor_id: Optional[int] = Query(None),
    status_filter: Optional[VendorSaleStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    query = db.query(VendorSale)
    if vendor_id:
        query = query.filter(VendorSale.vendor_id == vendor_id)
    if status_filter:
        query = query.filter(VendorSale.status == status_filter)
    return query.order_by(VendorSale.created_at.desc()).all()


@admin_router.post("", response_model=VendorSaleResponse, status_code=status.HTTP_201_CREATED)
def record_vendor_sale(
    data: RecordSaleRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Attribute the sale of a vendor's listing and split it into commission and fee"""
    # Find listing and check it was sold by this vendor
    model = LISTING_MODELS[data.listing_kind]
    listing = db.query(model).filter(model.id == data.listing_id).first()
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    if listing.created_by != data.vendor_id:
        raise HTTPException(status_code=400, detail="Listing does not belong to this vendor")
    if not listing.is_sold or listing.sold_to_user_id is None:
        raise HTTPException(status_code=409, detail="Listing has not been sold")

    # One sale record per listing
    existing = db.query(VendorSale).filter(
        VendorSale.item_type == data.listing_kind.value,
        VendorSale.item_id == listing.id,
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Sale already recorded")

    # Split into vendor commission and platform fee
    commission, fee = split_sale(listing.price_cents, settings.vendor_commission_rate)
    sale = VendorSale(
        vendor_id=data.vendor_id,
        buyer_id=listing.sold_to_user_id,
        item_type=data.listing_kind.value,
        item_id=listing.id,
        transaction_id=data.transaction_id,
        sale_amount_cents=listing.price_cents,
        vendor_commission_cents=commission,
        platform_fee_cents=fee,
        status=VendorSaleStatus.PENDING,
    )
    db.add(sale)
    db.commit()
    db.refresh(sale)
    revisions.bump("vendor_sales")
    return sale


@admin_router.post("/{sale_id}/pay", response_model=VendorSaleResponse)
def mark_commission_paid(
    sale_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    sale = db.query(VendorSale).filter(VendorSale.id == sale_id).first()
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")
    if sale.status == VendorSaleStatus.PAID:
        raise HTTPException(status_code=409, detail="Commission already paid")
    sale.status = VendorSaleStatus.PAID
    sale.paid_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(sale)
    revisions.bump("vendor_sales")
    return sale
