"""Feature flags and automation rules stored in admin_settings."""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.admin_setting import AdminSetting, AdminSettingHistory
from app.models.plan import PLAN_ORDER, PlanType
from app.models.user import User

logger = logging.getLogger(__name__)

FEATURE_FLAGS = {
    "tiktok_enabled": "TikTok Accounts",
    "models_enabled": "Model Hub",
    "campaigns_enabled": "Campanhas",
    "destinations_enabled": "Destinos",
    "funnels_enabled": "Funis",
    "media_library_enabled": "Biblioteca de Mídias",
}

AUTOMATION_MODULE_KEY = "automation_module_enabled"


def automation_plan_key(plan: PlanType) -> str:
    return f"automation_{PlanType(plan).value}_plan_access"


# Flags default on; per-plan automation access defaults off
DEFAULTS: Dict[str, bool] = {key: True for key in FEATURE_FLAGS}
DEFAULTS[AUTOMATION_MODULE_KEY] = True
DEFAULTS.update({automation_plan_key(p): False for p in PLAN_ORDER})

KNOWN_KEYS = frozenset(DEFAULTS)


def get_label(key: str) -> str:
    return FEATURE_FLAGS.get(key, key)


def _stored_values(db: Session) -> Dict[str, bool]:
    rows = db.query(AdminSetting).all()
    return {row.setting_key: row.setting_value for row in rows}


def get_feature_flags(db: Session) -> Dict[str, bool]:
    stored = _stored_values(db)
    return {key: stored.get(key, DEFAULTS[key]) for key in FEATURE_FLAGS}


def get_automation_settings(db: Session) -> Dict[str, bool]:
    stored = _stored_values(db)
    keys = [AUTOMATION_MODULE_KEY] + [automation_plan_key(p) for p in PLAN_ORDER]
    return {key: stored.get(key, DEFAULTS[key]) for key in keys}


def is_enabled(db: Session, key: str) -> bool:
    row = db.query(AdminSetting).filter(AdminSetting.setting_key == key).first()
    if row is None:
        return DEFAULTS.get(key, True)
    return bool(row.setting_value)


def update_setting(db: Session, key: str, value: bool, user: Optional[User] = None) -> AdminSetting:
    """
    Upsert a boolean setting and append a history row.

    Raises ValueError for keys outside KNOWN_KEYS.
    """
    if key not in KNOWN_KEYS:
        raise ValueError(f"Unknown setting: {key}")

    changed_by = user.id if user is not None else None
    row = db.query(AdminSetting).filter(AdminSetting.setting_key == key).first()
    old_value = row.setting_value if row is not None else None

    if row is None:
        row = AdminSetting(setting_key=key, setting_value=value, updated_by=changed_by)
        db.add(row)
    else:
        row.setting_value = value
        row.updated_by = changed_by

    db.add(AdminSettingHistory(
        setting_key=key,
        old_value=old_value,
        new_value=value,
        changed_by=changed_by,
    ))
    db.commit()
    db.refresh(row)

    logger.info("Setting %s changed from %s to %s by user %s", key, old_value, value, changed_by)
    return row


def get_history(db: Session, limit: int = 50) -> List[AdminSettingHistory]:
    return (
        db.query(AdminSettingHistory)
        .order_by(AdminSettingHistory.changed_at.desc())
        .limit(limit)
        .all()
    )
