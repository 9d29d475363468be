from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

from app.schemas.common import PartialUpdate


class BannerCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1, max_length=1024)
    link_url: Optional[str] = Field(None, max_length=2048)
    link_text: Optional[str] = Field(None, max_length=100)
    priority: int = 0
    is_active: bool = True
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.starts_at and self.expires_at and self.expires_at <= self.starts_at:
            raise ValueError("expires_at must be after starts_at")
        return self


class BannerUpdate(PartialUpdate):
    not_nullable = ("image_url", "priority", "is_active")

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1, max_length=1024)
    link_url: Optional[str] = Field(None, max_length=2048)
    link_text: Optional[str] = Field(None, max_length=100)
    priority: Optional[int] = None
    is_active: Optional[bool] = None
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class BannerResponse(BaseModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: str
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    priority: int
    is_active: bool
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
