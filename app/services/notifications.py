"""Admin notifications as seen by a single user, with per-user read state."""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.notification import Notification, UserNotificationRead
from app.services.schedule import is_live

logger = logging.getLogger(__name__)


def _reads_by_notification(db: Session, user_id: int) -> Dict[int, datetime]:
    rows = db.query(UserNotificationRead).filter(UserNotificationRead.user_id == user_id).all()
    return {r.notification_id: r.read_at for r in rows}


def live_notifications(db: Session, now: Optional[datetime] = None) -> List[Notification]:
    """Active notifications inside their window, highest priority then newest first."""
    now = now or datetime.now(timezone.utc)
    rows = db.query(Notification).filter(Notification.is_active.is_(True)).all()
    live = [n for n in rows if is_live(n, now)]
    live.sort(key=lambda n: (n.priority, n.created_at), reverse=True)
    return live


def notifications_for_user(
    db: Session, user_id: int, now: Optional[datetime] = None,
) -> List[Tuple[Notification, Optional[datetime]]]:
    """Live notifications paired with the user's read time (None when unread)."""
    reads = _reads_by_notification(db, user_id)
    return [(n, reads.get(n.id)) for n in live_notifications(db, now)]


def mark_read(db: Session, user_id: int, notification_id: int) -> bool:
    """
    Record that the user read a notification.

    Idempotent: returns False when it was already marked, including when a
    concurrent request inserted the row first.
    """
    exists = db.query(UserNotificationRead).filter(
        UserNotificationRead.user_id == user_id,
        UserNotificationRead.notification_id == notification_id,
    ).first()
    if exists is not None:
        return False

    db.add(UserNotificationRead(user_id=user_id, notification_id=notification_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def mark_all_read(db: Session, user_id: int, now: Optional[datetime] = None) -> int:
    """Mark every live unread notification as read; returns how many were marked."""
    unread = [n for n, read_at in notifications_for_user(db, user_id, now) if read_at is None]
    for notification in unread:
        db.add(UserNotificationRead(user_id=user_id, notification_id=notification.id))
    if unread:
        db.commit()
        logger.info("User %s marked %d notifications as read", user_id, len(unread))
    return len(unread)
