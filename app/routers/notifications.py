"""Admin notifications: CRUD for admins, the live feed and read tracking for users."""
import logging
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user, require_admin
from app.models.user import User
from app.models.notification import Notification
from app.schemas.media import ImageUploadResponse
from app.schemas.notifications import (
    NotificationCreate,
    NotificationUpdate,
    NotificationResponse,
    UserNotificationResponse,
    UnreadCountResponse,
    MarkAllReadResponse,
)
from app.services import revisions
from app.services.notifications import (
    live_notifications,
    mark_all_read,
    mark_read,
    notifications_for_user,
)
from app.services.schedule import aware
from app.services.storage import StorageError, store_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/notifications", tags=["Admin Notifications"])
user_router = APIRouter(prefix="/notifications", tags=["Notifications"])

RESOURCE = "notifications"


def _get_notification(db: Session, notification_id: int) -> Notification:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


def _user_view(notification: Notification, read_at) -> UserNotificationResponse:
    return UserNotificationResponse(
        id=notification.id,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        image_url=notification.image_url,
        link_url=notification.link_url,
        link_text=notification.link_text,
        priority=notification.priority,
        created_at=notification.created_at,
        is_read=read_at is not None,
        read_at=read_at,
    )


# Admin

@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return (
        db.query(Notification)
        .order_by(Notification.priority.desc(), Notification.created_at.desc())
        .all()
    )


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    data: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    notification = Notification(**data.model_dump(), created_by=current_user.id)
    db.add(notification)
    db.commit()
    db.refresh(notification)
    revisions.bump(RESOURCE)
    logger.info("Admin %s published notification %s", current_user.id, notification.id)
    return notification


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_notification_image(
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


@router.patch("/{notification_id}", response_model=NotificationResponse)
def update_notification(
    notification_id: int,
    data: NotificationUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    notification = _get_notification(db, notification_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(notification, field_name, value)

    # Window is checked on the merged row
    starts_at, expires_at = aware(notification.starts_at), aware(notification.expires_at)
    if starts_at and expires_at and expires_at <= starts_at:
        db.rollback()
        raise HTTPException(status_code=400, detail="expires_at must be after starts_at")

    db.commit()
    db.refresh(notification)
    revisions.bump(RESOURCE)
    return notification


@router.patch("/{notification_id}/toggle", response_model=NotificationResponse)
def toggle_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    notification = _get_notification(db, notification_id)
    notification.is_active = not notification.is_active
    db.commit()
    db.refresh(notification)
    revisions.bump(RESOURCE)
    return notification


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    notification = _get_notification(db, notification_id)
    db.delete(notification)
    db.commit()
    revisions.bump(RESOURCE)


# User feed

@user_router.get("", response_model=List[UserNotificationResponse])
def my_notifications(
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = [_user_view(n, read_at) for n, read_at in notifications_for_user(db, current_user.id)]
    if unread_only:
        items = [i for i in items if not i.is_read]
    return items


@user_router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pairs = notifications_for_user(db, current_user.id)
    return UnreadCountResponse(unread=sum(1 for _, read_at in pairs if read_at is None))


@user_router.post("/read-all", response_model=MarkAllReadResponse)
def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return MarkAllReadResponse(marked=mark_all_read(db, current_user.id))


@user_router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def read_one(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Only notifications the user can currently see may be marked
    if notification_id not in {n.id for n in live_notifications(db)}:
        raise HTTPException(status_code=404, detail="Notification not found")
    mark_read(db, current_user.id, notification_id)
