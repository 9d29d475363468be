from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime

from app.models.listing import ListingKind
from app.models.plan import PlanType
from app.models.transaction import TransactionStatus, ProductType
from app.models.user import AppRole
from app.schemas.profiles import SubscriptionResponse


class AdminUserItem(BaseModel):
    id: int
    email: str
    role: AppRole
    full_name: Optional[str] = None
    phone: Optional[str] = None
    current_plan: PlanType = PlanType.FREE
    is_suspended: bool = False
    is_online: bool = False
    last_seen_at: Optional[datetime] = None
    created_at: datetime


class AdminUserListResponse(BaseModel):
    items: List[AdminUserItem]
    total: int


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    external_id: str
    amount_cents: int
    net_amount_cents: Optional[int] = None
    status: TransactionStatus
    payment_method: Optional[str] = None
    product_type: Optional[ProductType] = None
    product_id: Optional[int] = None
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    is_admin_granted: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AdminUserDetail(AdminUserItem):
    onboarding_completed: bool = False
    subscription: Optional[SubscriptionResponse] = None
    transactions: List[TransactionResponse] = []


class PlanChangeRequest(BaseModel):
    plan: PlanType


class SuspendRequest(BaseModel):
    suspended: bool


class RoleChangeRequest(BaseModel):
    role: AppRole


class GrantAccessRequest(BaseModel):
    """Either a plan (subscription grant) or a listing (marketplace grant)."""
    plan: Optional[PlanType] = None
    listing_kind: Optional[ListingKind] = None
    listing_id: Optional[int] = None
    days: int = Field(30, ge=1, le=3650)


class GrantAccessResponse(BaseModel):
    transaction: TransactionResponse
    subscription_id: Optional[int] = None
    listing_id: Optional[int] = None


class DashboardStats(BaseModel):
    total_users: int
    active_users: int
    suspended_users: int
    online_users: int
    offline_users: int
    users_by_plan: Dict[str, int]
    paid_revenue_cents: int
    paid_transactions: int
