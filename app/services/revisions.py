"""
Per-resource revision counters.

Every mutation increments ``revision:<resource>`` in Redis. Clients poll the
counters and re-fetch a resource only when its counter moved past the value
they already hold, discarding responses tagged with an older revision.
"""
import logging
from typing import Dict, Iterable, Optional

import redis

from app.redis_client import get_redis_client

logger = logging.getLogger(__name__)

RESOURCES = (
    "profiles",
    "subscriptions",
    "transactions",
    "tiktok_accounts",
    "instagram_accounts",
    "telegram_groups",
    "models_for_sale",
    "admin_media",
    "vendor_sales",
    "smart_link_pages",
    "dashboard_banners",
    "funnel_templates",
    "admin_settings",
    "admin_text_settings",
    "notifications",
    "account_manager_sellers",
)


def _key(resource: str) -> str:
    return f"revision:{resource}"


def bump(resource: str) -> Optional[int]:
    """Increment a resource counter. Redis failures are logged, never raised."""
    try:
        return int(get_redis_client().incr(_key(resource)))
    except redis.RedisError as e:
        logger.warning("Could not bump revision for %s: %s", resource, e)
        return None


def current(resources: Iterable[str]) -> Dict[str, int]:
    """Current counter per resource; resources never mutated report 0."""
    resources = list(resources)
    if not resources:
        return {}
    values = get_redis_client().mget([_key(r) for r in resources])
    return {r: int(v) if v is not None else 0 for r, v in zip(resources, values)}
