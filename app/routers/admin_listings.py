"""
Admin CRUD for marketplace listings.

Routes are registered once per listing kind under ``/admin/listings/{kind}``.
Prices are accepted as typed ("499.90", "499,90") and stored in cents.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import require_admin
from app.models.user import User
from app.models.listing import ListingKind, LISTING_MODELS
from app.schemas.listings import LISTING_SCHEMAS, MarkSoldRequest, detailed_view
from app.schemas.media import ImageUploadResponse
from app.services import revisions
from app.services.listings import (
    ListingFilters,
    SORT_OPTIONS,
    apply_changes,
    filter_listings,
    mark_sold,
    reactivate,
    sort_listings,
)
from app.services.storage import StorageError, store_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/listings", tags=["Admin Listings"])


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_listing_image(
    file: UploadFile = File(...),
    _: User = Depends(require_admin),
):
    try:
        url = store_image(file)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return ImageUploadResponse(url=url)


def _register(kind: ListingKind):
    model = LISTING_MODELS[kind]
    schemas = LISTING_SCHEMAS[kind]
    resource = model.__tablename__
    base = f"/{kind.value}"

    def get_or_404(db: Session, listing_id: int):
        listing = db.query(model).filter(model.id == listing_id).first()
        if not listing:
            raise HTTPException(status_code=404, detail="Listing not found")
        return listing

    @router.get(base, response_model=List[schemas.admin], name=f"admin_list_{kind.value}")
    def list_listings(
        status_filter: str = Query("all", alias="status", pattern="^(all|available|sold)$"),
        search: Optional[str] = Query(None),
        niche: Optional[str] = Query(None),
        sort: str = Query("newest", description=f"One of {', '.join(SORT_OPTIONS)}"),
        db: Session = Depends(get_db),
        _: User = Depends(require_admin),
    ):
        filters = ListingFilters(search=search, niche=niche, include_sold=status_filter != "available")
        items = filter_listings(db.query(model).all(), filters)
        if status_filter == "sold":
            items = [i for i in items if i.is_sold]
        try:
            items = sort_listings(items, sort)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return [detailed_view(kind, i) for i in items]

    @router.post(base, response_model=schemas.admin, status_code=status.HTTP_201_CREATED,
                 name=f"admin_create_{kind.value}")
    def create_listing(
        data: schemas.create,
        db: Session = Depends(get_db),
        current_user: User = Depends(require_admin),
    ):
        listing = model(created_by=current_user.id, is_sold=False)
        try:
            apply_changes(listing, data.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        db.add(listing)
        db.commit()
        db.refresh(listing)
        revisions.bump(resource)
        logger.info("Admin %s created %s listing %s", current_user.id, kind.value, listing.id)
        return detailed_view(kind, listing)

    @router.get(base + "/{listing_id}", response_model=schemas.admin, name=f"admin_get_{kind.value}")
    def get_listing(
        listing_id: int,
        db: Session = Depends(get_db),
        _: User = Depends(require_admin),
    ):
        return detailed_view(kind, get_or_404(db, listing_id))

    @router.patch(base + "/{listing_id}", response_model=schemas.admin, name=f"admin_update_{kind.value}")
    def update_listing(
        listing_id: int,
        data: schemas.update,
        db: Session = Depends(get_db),
        _: User = Depends(require_admin),
    ):
        listing = get_or_404(db, listing_id)
        try:
            apply_changes(listing, data.model_dump(exclude_unset=True))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        db.commit()
        db.refresh(listing)
        revisions.bump(resource)
        return detailed_view(kind, listing)

    @router.delete(base + "/{listing_id}", status_code=status.HTTP_204_NO_CONTENT,
                   name=f"admin_delete_{kind.value}")
    def delete_listing(
        listing_id: int,
        db: Session = Depends(get_db),
        _: User = Depends(require_admin),
    ):
        listing = get_or_404(db, listing_id)
        db.delete(listing)
        db.commit()
        revisions.bump(resource)

    @router.post(base + "/{listing_id}/mark-sold", response_model=schemas.admin,
                 name=f"admin_mark_sold_{kind.value}")
    def mark_listing_sold(
        listing_id: int,
        data: MarkSoldRequest,
        db: Session = Depends(get_db),
        _: User = Depends(require_admin),
    ):
        listing = get_or_404(db, listing_id)
        buyer = db.query(User).filter(User.id == data.buyer_id).first()
        if not buyer:
            raise HTTPException(status_code=404, detail="Buyer not found")
        try:
            mark_sold(listing, buyer.id)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        db.commit()
        db.refresh(listing)
        revisions.bump(resource)
        return detailed_view(kind, listing)

    @router.post(base + "/{listing_id}/reactivate", response_model=schemas.admin,
                 name=f"admin_reactivate_{kind.value}")
    def reactivate_listing(
        listing_id: int,
        db: Session = Depends(get_db),
        _: User = Depends(require_admin),
    ):
        """Put a sold listing back on sale. Only is_sold, sold_at and sold_to_user_id change."""
        listing = get_or_404(db, listing_id)
        reactivate(listing)
        db.commit()
        db.refresh(listing)
        revisions.bump(resource)
        return detailed_view(kind, listing)


for _kind in ListingKind:
    _register(_kind)
