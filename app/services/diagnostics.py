"""Health checks for the admin diagnostics panel."""
import logging
import time
from typing import List, Optional

import httpx
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models
from app.services.system_config import FUNCTIONS

logger = logging.getLogger(__name__)

TABLES = {
    "users": models.User,
    "profiles": models.Profile,
    "plans": models.Plan,
    "subscriptions": models.Subscription,
    "transactions": models.Transaction,
    "tiktok_accounts": models.TikTokAccount,
    "instagram_accounts": models.InstagramAccount,
    "telegram_groups": models.TelegramGroup,
    "models_for_sale": models.ModelForSale,
    "admin_media": models.AdminMediaPack,
    "vendor_sales": models.VendorSale,
    "smart_link_pages": models.SmartLinkPage,
    "smart_link_buttons": models.SmartLinkButton,
    "dashboard_banners": models.DashboardBanner,
    "funnel_templates": models.FunnelTemplate,
    "admin_settings": models.AdminSetting,
    "admin_settings_history": models.AdminSettingHistory,
    "admin_text_settings": models.AdminTextSetting,
    "notifications": models.Notification,
    "user_notification_reads": models.UserNotificationRead,
    "account_manager_sellers": models.AccountManagerSeller,
    "account_manager_logs": models.AccountManagerLog,
}


def count_tables(db: Session) -> List[dict]:
    """Row count per table; a failing table reports its error and the rest still run."""
    results = []
    for name, model in TABLES.items():
        try:
            results.append({"table": name, "count": db.query(model).count(), "error": None})
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Count failed for %s: %s", name, e)
            results.append({"table": name, "count": None, "error": str(e)})
    return results


def check_functions(timeout: float = 5.0, client: Optional[httpx.Client] = None) -> List[dict]:
    """Send an OPTIONS request to each external function and time the answer."""
    owns_client = client is None
    client = client or httpx.Client(timeout=timeout)
    results = []
    try:
        for fn in FUNCTIONS:
            started = time.perf_counter()
            try:
                resp = client.options(fn.url)
                status_code, error = resp.status_code, None
            except httpx.HTTPError as e:
                status_code, error = None, str(e)
            latency_ms = int((time.perf_counter() - started) * 1000)
            results.append({
                "name": fn.name,
                "url": fn.url,
                "status_code": status_code,
                "reachable": status_code is not None and status_code < 500,
                "latency_ms": latency_ms,
                "error": error,
            })
    finally:
        if owns_client:
            client.close()
    return results


def _requires_auth(dependant, auth_dependency) -> bool:
    for dep in dependant.dependencies:
        if dep.call is auth_dependency or _requires_auth(dep, auth_dependency):
            return True
    return False


def list_routes(app, auth_dependency) -> List[dict]:
    """API routes with their methods and whether ``auth_dependency`` guards them."""
    routes = []
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        routes.append({
            "path": route.path,
            "methods": sorted(route.methods),
            "name": route.name,
            "requires_auth": _requires_auth(route.dependant, auth_dependency),
        })
    return sorted(routes, key=lambda r: r["path"])
