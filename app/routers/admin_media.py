"""
Media packs: admin management and the user media library.

Bulk uploads are forwarded to the media-packs bucket through a bounded
worker pool; files that fail after retries are reported, the rest are
appended to the pack.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.auth.dependencies import get_current_user, require_admin
from app.models.user import User
from app.models.media_pack import AdminMediaPack
from app.schemas.media import (
    BulkUploadResponse,
    MediaPackCreate,
    MediaPackResponse,
    MediaPackSummary,
    MediaPackUpdate,
    RemoveFilesRequest,
    TransferFilesRequest,
    TransferFilesResponse,
)
from app.services import revisions
from app.services import settings as feature_settings
from app.services.media_packs import add_files, is_accessible, remove_files, transfer_files
from app.services.storage import StorageError, bulk_upload, delete_objects, path_from_url
from app.services.subscriptions import resolve_current_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/media-packs", tags=["Admin Media"])
user_router = APIRouter(prefix="/media-packs", tags=["Media Library"])

RESOURCE = "admin_media"


def _get_pack(db: Session, pack_id: int) -> AdminMediaPack:
    pack = db.query(AdminMediaPack).filter(AdminMediaPack.id == pack_id).first()
    if not pack:
        raise HTTPException(status_code=404, detail="Media pack not found")
    return pack


def _delete_from_storage(entries: List[dict]):
    bucket = settings.media_packs_bucket
    paths = [p for p in (path_from_url(bucket, e.get("url", "")) for e in entries) if p]
    try:
        delete_objects(bucket, paths)
    except StorageError as e:
        logger.warning("Could not delete %d objects from %s: %s", len(paths), bucket, e)


@router.get("", response_model=List[MediaPackResponse])
def list_packs(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return db.query(AdminMediaPack).order_by(AdminMediaPack.created_at.desc()).all()


@router.post("", response_model=MediaPackResponse, status_code=status.HTTP_201_CREATED)
def create_pack(
    data: MediaPackCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    pack = AdminMediaPack(**data.model_dump(), media_files=[], file_count=0)
    db.add(pack)
    db.commit()
    db.refresh(pack)
    revisions.bump(RESOURCE)
    return pack


@router.get("/{pack_id}", response_model=MediaPackResponse)
def get_pack(
    pack_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return _get_pack(db, pack_id)


@router.patch("/{pack_id}", response_model=MediaPackResponse)
def update_pack(
    pack_id: int,
    data: MediaPackUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    pack = _get_pack(db, pack_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(pack, field_name, value)
    db.commit()
    db.refresh(pack)
    revisions.bump(RESOURCE)
    return pack


@router.delete("/{pack_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pack(
    pack_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    pack = _get_pack(db, pack_id)
    entries = list(pack.media_files or [])
    db.delete(pack)
    db.commit()
    revisions.bump(RESOURCE)
    _delete_from_storage(entries)


@router.post("/{pack_id}/files", response_model=BulkUploadResponse)
def upload_files(
    pack_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Upload many files into a pack. Returns uploaded entries and failures."""
    pack = _get_pack(db, pack_id)
    max_bytes = settings.max_upload_file_size_mb * 1024 * 1024

    # Oversized files never reach storage
    items, rejected = [], []
    for upload in files:
        content = upload.file.read()
        name = upload.filename or "file"
        if len(content) > max_bytes:
            rejected.append({"name": name, "error": f"File exceeds {settings.max_upload_file_size_mb} MB"})
            continue
        items.append((name, content, upload.content_type))

    result = bulk_upload(settings.media_packs_bucket, items)
    failed = rejected + result.failed

    # Partial success still saves what was uploaded
    if not result.uploaded and failed:
        raise HTTPException(status_code=502, detail=f"All {len(failed)} uploads failed: {failed[0]['error']}")

    add_files(pack, result.uploaded)
    db.commit()
    db.refresh(pack)
    revisions.bump(RESOURCE)

    logger.info("Pack %s: %d files added, %d failed", pack.id, len(result.uploaded), len(failed))
    return BulkUploadResponse(uploaded=result.uploaded, failed=failed, file_count=pack.file_count)


@router.post("/{pack_id}/files/remove", response_model=MediaPackResponse)
def remove_pack_files(
    pack_id: int,
    data: RemoveFilesRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    pack = _get_pack(db, pack_id)
    removed = remove_files(pack, data.urls)
    if not removed:
        raise HTTPException(status_code=404, detail="None of the files belong to this pack")
    db.commit()
    db.refresh(pack)
    revisions.bump(RESOURCE)
    if data.delete_from_storage:
        _delete_from_storage(removed)
    return pack


@router.post("/{pack_id}/transfer", response_model=TransferFilesResponse)
def transfer_pack_files(
    pack_id: int,
    data: TransferFilesRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Move selected files to another pack in a single commit"""
    source = _get_pack(db, pack_id)
    target = _get_pack(db, data.target_pack_id)
    try:
        moved = transfer_files(source, target, data.urls)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    revisions.bump(RESOURCE)
    return TransferFilesResponse(
        moved=moved,
        source_file_count=source.file_count,
        target_file_count=target.file_count,
    )


def _ensure_library_enabled(db: Session):
    if not feature_settings.is_enabled(db, "media_library_enabled"):
        raise HTTPException(status_code=403, detail="Media library is currently disabled")


@user_router.get("", response_model=List[MediaPackSummary])
def list_library(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_library_enabled(db)
    plan = resolve_current_plan(db, current_user)
    packs = db.query(AdminMediaPack).order_by(AdminMediaPack.created_at.desc()).all()
    return [
        MediaPackSummary(
            id=p.id,
            name=p.name,
            description=p.description,
            pack_type=p.pack_type,
            image_url=p.image_url,
            min_plan=p.min_plan,
            file_count=p.file_count,
            accessible=is_accessible(p, plan),
        )
        for p in packs
    ]


@user_router.get("/{pack_id}", response_model=MediaPackResponse)
def get_library_pack(
    pack_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_library_enabled(db)
    pack = _get_pack(db, pack_id)
    if not is_accessible(pack, resolve_current_plan(db, current_user)):
        raise HTTPException(status_code=403, detail="Upgrade your plan to access this pack")
    return pack
