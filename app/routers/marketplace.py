"""
Marketplace browsing for signed-in users.

Only the public part of a listing is exposed here. Deliverables are returned
by ``/marketplace/purchases`` to the user the listing was sold to.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user
from app.models.user import User
from app.models.listing import ListingKind, LISTING_MODELS
from app.schemas.listings import LISTING_SCHEMAS, NichesResponse, PurchaseResponse
from app.services import settings as feature_settings
from app.services.listings import (
    ListingFilters,
    SORT_OPTIONS,
    deliverable_payload,
    distinct_niches,
    filter_listings,
    sort_listings,
    title_of,
)
from app.services.money import parse_price_to_cents

router = APIRouter(prefix="/marketplace", tags=["Marketplace"])

FEATURE_GATES = {
    ListingKind.TIKTOK: "tiktok_enabled",
    ListingKind.MODEL: "models_enabled",
}


def _ensure_enabled(db: Session, kind: ListingKind):
    flag = FEATURE_GATES.get(kind)
    if flag and not feature_settings.is_enabled(db, flag):
        raise HTTPException(status_code=403, detail="This section is currently disabled")


def _price(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return parse_price_to_cents(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/purchases", response_model=List[PurchaseResponse])
def my_purchases(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Listings sold to the caller, with their deliverables"""
    purchases = []
    for kind, model in LISTING_MODELS.items():
        rows = db.query(model).filter(model.sold_to_user_id == current_user.id).all()
        for listing in rows:
            purchases.append(PurchaseResponse(
                kind=kind,
                id=listing.id,
                title=title_of(listing),
                image_url=listing.image_url,
                price_cents=listing.price_cents,
                sold_at=listing.sold_at,
                deliverable=deliverable_payload(listing),
            ))
    purchases.sort(key=lambda p: p.sold_at.timestamp() if p.sold_at else 0, reverse=True)
    return purchases


def _register(kind: ListingKind):
    model = LISTING_MODELS[kind]
    schemas = LISTING_SCHEMAS[kind]
    base = f"/{kind.value}"

    @router.get(base, response_model=List[schemas.public], name=f"browse_{kind.value}")
    def browse(
        search: Optional[str] = Query(None),
        niche: Optional[str] = Query(None),
        verified_only: bool = Query(False),
        min_price: Optional[str] = Query(None, description="e.g. 100 or 99,90"),
        max_price: Optional[str] = Query(None),
        min_followers: Optional[int] = Query(None, ge=0),
        max_followers: Optional[int] = Query(None, ge=0),
        sort: str = Query("newest", description=f"One of {', '.join(SORT_OPTIONS)}"),
        db: Session = Depends(get_db),
        _: User = Depends(get_current_user),
    ):
        _ensure_enabled(db, kind)
        filters = ListingFilters(
            search=search,
            niche=niche,
            verified_only=verified_only,
            min_price_cents=_price(min_price),
            max_price_cents=_price(max_price),
            min_followers=min_followers,
            max_followers=max_followers,
        )
        rows = db.query(model).filter(model.is_sold.is_(False)).all()
        try:
            return sort_listings(filter_listings(rows, filters), sort)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @router.get(base + "/niches", response_model=NichesResponse, name=f"niches_{kind.value}")
    def niches(
        db: Session = Depends(get_db),
        _: User = Depends(get_current_user),
    ):
        _ensure_enabled(db, kind)
        rows = db.query(model).filter(model.is_sold.is_(False)).all()
        return NichesResponse(niches=distinct_niches(rows))

    @router.get(base + "/{listing_id}", response_model=schemas.public, name=f"detail_{kind.value}")
    def detail(
        listing_id: int,
        db: Session = Depends(get_db),
        _: User = Depends(get_current_user),
    ):
        _ensure_enabled(db, kind)
        listing = db.query(model).filter(model.id == listing_id).first()
        if not listing:
            raise HTTPException(status_code=404, detail="Listing not found")
        return listing


for _kind in ListingKind:
    _register(_kind)
