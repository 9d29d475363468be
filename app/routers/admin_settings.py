"""Feature flags and automation rules."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user, require_admin
from app.models.user import User
from app.schemas.settings import (
    SettingHistoryEntry,
    SettingResponse,
    SettingsMap,
    SettingUpdate,
)
from app.services import revisions
from app.services import settings as feature_settings

router = APIRouter(prefix="/admin/settings", tags=["admin-settings"])
public_router = APIRouter(prefix="/settings", tags=["settings"])

RESOURCE = "admin_settings"


def _update(db: Session, key: str, value: bool, user: User, allowed) -> SettingResponse:
    if key not in allowed:
        raise HTTPException(status_code=404, detail=f"Unknown setting: {key}")
    try:
        row = feature_settings.update_setting(db, key, value, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    revisions.bump(RESOURCE)
    return SettingResponse.model_validate(row)


@router.get("/features", response_model=SettingsMap)
def get_features(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return SettingsMap(
        settings=feature_settings.get_feature_flags(db),
        labels=dict(feature_settings.FEATURE_FLAGS),
    )


@router.put("/features/{key}", response_model=SettingResponse)
def update_feature(
    key: str,
    payload: SettingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return _update(db, key, payload.value, current_user, feature_settings.FEATURE_FLAGS)


@router.get("/automation", response_model=SettingsMap)
def get_automation(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return SettingsMap(settings=feature_settings.get_automation_settings(db))


@router.put("/automation/{key}", response_model=SettingResponse)
def update_automation(
    key: str,
    payload: SettingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    allowed = set(feature_settings.KNOWN_KEYS) - set(feature_settings.FEATURE_FLAGS)
    return _update(db, key, payload.value, current_user, allowed)


@router.get("/history", response_model=List[SettingHistoryEntry])
def get_history(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    entries = feature_settings.get_history(db, limit=limit)
    return [
        SettingHistoryEntry(
            id=entry.id,
            setting_key=entry.setting_key,
            label=feature_settings.get_label(entry.setting_key),
            old_value=entry.old_value,
            new_value=entry.new_value,
            changed_by=entry.changed_by,
            changed_by_email=entry.changer.email if entry.changer else None,
            changed_at=entry.changed_at,
        )
        for entry in entries
    ]


@public_router.get("/features", response_model=SettingsMap)
def get_public_features(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Flags the client uses to hide disabled areas"""
    return SettingsMap(settings=feature_settings.get_feature_flags(db))
