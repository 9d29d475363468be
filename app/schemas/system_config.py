from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ConfigEntry(BaseModel):
    key: str
    description: str
    category: str
    is_secret: bool
    value: str
    configured: bool
    is_default: bool
    updated_at: Optional[datetime] = None


class ConfigCategory(BaseModel):
    category: str
    label: str
    entries: List[ConfigEntry]


class ConfigUpdate(BaseModel):
    value: str = Field("", max_length=4096)


class ExternalFunctionResponse(BaseModel):
    name: str
    description: str
    method: str
    requires_auth: bool
    url: str
