"""Publication windows shared by banners and notifications."""
from datetime import datetime, timezone
from typing import Optional


def aware(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes read back from the database are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_live(item, now: datetime) -> bool:
    """Active and inside its optional [starts_at, expires_at) window"""
    if not item.is_active:
        return False
    starts_at, expires_at = aware(item.starts_at), aware(item.expires_at)
    if starts_at is not None and starts_at > now:
        return False
    if expires_at is not None and expires_at <= now:
        return False
    return True
