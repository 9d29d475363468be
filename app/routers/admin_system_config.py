"""Admin-only system configuration and external function catalogue."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import require_admin
from app.models.user import User
from app.schemas.system_config import (
    ConfigCategory,
    ConfigEntry,
    ConfigUpdate,
    ExternalFunctionResponse,
)
from app.services import revisions
from app.services import system_config

router = APIRouter(prefix="/admin/system-config", tags=["admin-system-config"])


@router.get("", response_model=List[ConfigCategory])
def get_config(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """All configuration keys grouped by category. Secret values are masked."""
    entries = system_config.list_config(db)
    grouped = []
    for category, label in system_config.CATEGORIES.items():
        members = [ConfigEntry(**e) for e in entries if e["category"] == category]
        if members:
            grouped.append(ConfigCategory(category=category, label=label, entries=members))
    return grouped


@router.put("/{key}", response_model=ConfigEntry)
def update_config(
    key: str,
    payload: ConfigUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if key not in system_config.CONFIG_BY_KEY:
        raise HTTPException(status_code=404, detail=f"Unknown configuration key: {key}")
    entry = system_config.set_value(db, key, payload.value, current_user)
    revisions.bump("admin_text_settings")
    return ConfigEntry(**entry)


@router.get("/functions", response_model=List[ExternalFunctionResponse])
def list_functions(_: User = Depends(require_admin)):
    return [
        ExternalFunctionResponse(
            name=f.name,
            description=f.description,
            method=f.method,
            requires_auth=f.requires_auth,
            url=f.url,
        )
        for f in system_config.FUNCTIONS
    ]
