"""Online presence derived from the profile heartbeat."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.profile import Profile


def _window() -> timedelta:
    return timedelta(minutes=settings.online_window_minutes)


def is_online(profile: Profile, now: Optional[datetime] = None) -> bool:
    """Online means flagged online with a heartbeat inside the window."""
    if not profile.is_online or profile.last_seen_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    last_seen = profile.last_seen_at
    if last_seen.tzinfo is None:
        last_seen = last_seen.replace(tzinfo=timezone.utc)
    return now - last_seen <= _window()


def record_heartbeat(profile: Profile, now: Optional[datetime] = None) -> Profile:
    profile.is_online = True
    profile.last_seen_at = now or datetime.now(timezone.utc)
    return profile


def mark_stale_offline(db: Session, now: Optional[datetime] = None) -> int:
    """Flip profiles whose last heartbeat is older than the window to offline."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - _window()
    stale = db.query(Profile).filter(
        Profile.is_online.is_(True),
        (Profile.last_seen_at.is_(None)) | (Profile.last_seen_at < cutoff),
    ).all()
    for profile in stale:
        profile.is_online = False
    if stale:
        db.commit()
    return len(stale)
