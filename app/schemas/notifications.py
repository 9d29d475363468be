from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

from app.models.notification import NotificationType
from app.schemas.common import PartialUpdate


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    image_url: Optional[str] = Field(None, max_length=1024)
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


class NotificationUpdate(PartialUpdate):
    not_nullable = ("title", "message", "type", "priority", "is_active")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    message: Optional[str] = Field(None, min_length=1)
    type: Optional[NotificationType] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    link_url: Optional[str] = Field(None, max_length=2048)
    link_text: Optional[str] = Field(None, max_length=100)
    priority: Optional[int] = None
    is_active: Optional[bool] = None
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    type: NotificationType
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    priority: int
    is_active: bool
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserNotificationResponse(BaseModel):
    """A live notification as one user sees it"""
    id: int
    title: str
    message: str
    type: NotificationType
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    priority: int
    created_at: datetime
    is_read: bool
    read_at: Optional[datetime] = None


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    marked: int
