from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.plan import PlanType, SubscriptionStatus
from app.models.user import AppRole
from app.schemas.common import PartialUpdate


class ProfileResponse(BaseModel):
    id: int
    user_id: int
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    current_plan: PlanType
    is_suspended: bool
    is_online: bool
    last_seen_at: Optional[datetime] = None
    onboarding_completed: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(PartialUpdate):
    not_nullable = ("onboarding_completed",)

    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    avatar_url: Optional[str] = Field(None, max_length=1024)
    onboarding_completed: Optional[bool] = None


class PlanResponse(BaseModel):
    id: int
    slug: PlanType
    name: str
    price_cents: int
    description: Optional[str] = None
    features: Optional[List[str]] = None
    max_destinations: Optional[int] = None
    max_media_per_month: Optional[int] = None
    max_funnels: Optional[int] = None
    has_scheduling: bool
    has_ai_models: bool

    class Config:
        from_attributes = True


class SubscriptionResponse(BaseModel):
    id: int
    plan_id: int
    status: SubscriptionStatus
    started_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime
    plan: Optional[PlanResponse] = None

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    id: int
    email: str
    role: AppRole
    effective_plan: PlanType
    profile: Optional[ProfileResponse] = None
    subscription: Optional[SubscriptionResponse] = None


class HeartbeatResponse(BaseModel):
    is_online: bool
    last_seen_at: datetime
