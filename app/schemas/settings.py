from pydantic import BaseModel
from typing import Optional, Dict
from datetime import datetime


class SettingUpdate(BaseModel):
    value: bool


class SettingResponse(BaseModel):
    setting_key: str
    setting_value: bool
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettingsMap(BaseModel):
    settings: Dict[str, bool]
    labels: Dict[str, str] = {}


class SettingHistoryEntry(BaseModel):
    id: int
    setting_key: str
    label: str
    old_value: Optional[bool] = None
    new_value: bool
    changed_by: Optional[int] = None
    changed_by_email: Optional[str] = None
    changed_at: datetime
