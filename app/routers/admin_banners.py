"""Dashboard banners: admin CRUD and the active banner feed."""
from datetime import datetime, timezone
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import require_admin
from app.models.user import User
from app.models.banner import DashboardBanner
from app.schemas.banners import BannerCreate, BannerUpdate, BannerResponse
from app.schemas.media import ImageUploadResponse
from app.services import revisions
from app.services.schedule import aware, is_live
from app.services.storage import StorageError, store_image

router = APIRouter(prefix="/admin/banners", tags=["Admin Banners"])
public_router = APIRouter(prefix="/banners", tags=["Banners"])

RESOURCE = "dashboard_banners"


def _get_banner(db: Session, banner_id: int) -> DashboardBanner:
    banner = db.query(DashboardBanner).filter(DashboardBanner.id == banner_id).first()
    if not banner:
        raise HTTPException(status_code=404, detail="Banner not found")
    return banner


@public_router.get("/active", response_model=List[BannerResponse])
def active_banners(db: Session = Depends(get_db)):
    now = datetime.now(timezone.utc)
    banners = db.query(DashboardBanner).filter(DashboardBanner.is_active.is_(True)).all()
    live = [b for b in banners if is_live(b, now)]
    return sorted(live, key=lambda b: b.priority, reverse=True)


@router.get("", response_model=List[BannerResponse])
def list_banners(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return (
        db.query(DashboardBanner)
        .order_by(DashboardBanner.priority.desc(), DashboardBanner.created_at.desc())
        .all()
    )


@router.post("", response_model=BannerResponse, status_code=status.HTTP_201_CREATED)
def create_banner(
    data: BannerCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    banner = DashboardBanner(**data.model_dump())
    db.add(banner)
    db.commit()
    db.refresh(banner)
    revisions.bump(RESOURCE)
    return banner


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_banner_image(
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


@router.patch("/{banner_id}", response_model=BannerResponse)
def update_banner(
    banner_id: int,
    data: BannerUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    banner = _get_banner(db, banner_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(banner, field_name, value)
    if banner.starts_at and banner.expires_at and aware(banner.expires_at) <= aware(banner.starts_at):
        db.rollback()
        raise HTTPException(status_code=400, detail="expires_at must be after starts_at")
    db.commit()
    db.refresh(banner)
    revisions.bump(RESOURCE)
    return banner


@router.patch("/{banner_id}/toggle", response_model=BannerResponse)
def toggle_banner(
    banner_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    banner = _get_banner(db, banner_id)
    banner.is_active = not banner.is_active
    db.commit()
    db.refresh(banner)
    revisions.bump(RESOURCE)
    return banner


@router.delete("/{banner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_banner(
    banner_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    banner = _get_banner(db, banner_id)
    db.delete(banner)
    db.commit()
    revisions.bump(RESOURCE)
