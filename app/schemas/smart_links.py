import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.schemas.common import PartialUpdate

SLUG_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,98}[a-z0-9])?$")


def _check_slug(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().lower()
    if not SLUG_RE.match(value):
        raise ValueError("Slug must be lowercase letters, digits and hyphens")
    return value


class SmartLinkButtonCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=2048)
    icon: Optional[str] = Field(None, max_length=50)
    is_active: bool = True


class SmartLinkButtonUpdate(PartialUpdate):
    not_nullable = ("label", "url", "is_active")

    label: Optional[str] = Field(None, min_length=1, max_length=255)
    url: Optional[str] = Field(None, min_length=1, max_length=2048)
    icon: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class SmartLinkButtonResponse(BaseModel):
    id: int
    label: str
    url: str
    icon: Optional[str] = None
    position: int
    is_active: bool
    clicks: int

    class Config:
        from_attributes = True


class ButtonReorderRequest(BaseModel):
    button_ids: List[int] = Field(..., min_length=1)


class SmartLinkPageCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=1024)
    background_color: str = Field("#1a1a2e", max_length=20)
    text_color: str = Field("#ffffff", max_length=20)
    button_style: str = Field("rounded", max_length=20)
    meta_pixel_id: Optional[str] = Field(None, max_length=100)
    tiktok_pixel_id: Optional[str] = Field(None, max_length=100)
    google_analytics_id: Optional[str] = Field(None, max_length=100)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return _check_slug(v)


class SmartLinkPageUpdate(PartialUpdate):
    not_nullable = ("slug", "title", "background_color", "text_color", "button_style", "is_active")

    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=1024)
    background_color: Optional[str] = Field(None, max_length=20)
    text_color: Optional[str] = Field(None, max_length=20)
    button_style: Optional[str] = Field(None, max_length=20)
    meta_pixel_id: Optional[str] = Field(None, max_length=100)
    tiktok_pixel_id: Optional[str] = Field(None, max_length=100)
    google_analytics_id: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v):
        return _check_slug(v)


class SmartLinkPageResponse(BaseModel):
    id: int
    slug: str
    title: str
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    background_color: str
    text_color: str
    button_style: str
    meta_pixel_id: Optional[str] = None
    tiktok_pixel_id: Optional[str] = None
    google_analytics_id: Optional[str] = None
    is_active: bool
    total_views: int
    public_url: Optional[str] = None
    created_at: datetime
    buttons: List[SmartLinkButtonResponse] = []

    class Config:
        from_attributes = True


class PublicSmartLinkPage(BaseModel):
    slug: str
    title: str
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    background_color: str
    text_color: str
    button_style: str
    meta_pixel_id: Optional[str] = None
    tiktok_pixel_id: Optional[str] = None
    google_analytics_id: Optional[str] = None
    buttons: List[SmartLinkButtonResponse] = []


class SmartLinkLimitsResponse(BaseModel):
    plan: str
    max_pages: Optional[int] = None
    max_buttons: Optional[int] = None
    pages_used: int
