import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal, Dict, Any
from datetime import datetime

from app.models.plan import PlanType
from app.models.user import AppRole
from app.schemas.admin_users import TransactionResponse
from app.schemas.profiles import SubscriptionResponse

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ManagerSummary(BaseModel):
    user_id: int
    email: str
    full_name: Optional[str] = None
    current_plan: PlanType = PlanType.FREE
    seller_count: int


class SellerAssignmentRequest(BaseModel):
    """Complete set of sellers the manager should end up with"""
    seller_ids: List[int] = []


class SellerItem(BaseModel):
    assignment_id: int
    seller_id: int
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    current_plan: PlanType = PlanType.FREE
    is_suspended: bool = False
    notes: Optional[str] = None
    assigned_at: datetime


class SellerNotesUpdate(BaseModel):
    notes: Optional[str] = Field(None, max_length=5000)


class SellerDetail(BaseModel):
    seller_id: int
    email: str
    role: AppRole
    full_name: Optional[str] = None
    phone: Optional[str] = None
    current_plan: PlanType = PlanType.FREE
    is_suspended: bool = False
    subscription: Optional[SubscriptionResponse] = None
    transactions: List[TransactionResponse] = []


class SellerAction(BaseModel):
    """
    One action on a seller.

    ``suspend_user`` reads ``suspend``; ``change_plan`` reads ``plan``;
    ``update_profile`` reads ``full_name``/``phone``; ``update_email`` reads ``email``.
    """
    action: Literal["suspend_user", "change_plan", "update_profile", "update_email"]
    suspend: Optional[bool] = None
    plan: Optional[PlanType] = None
    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v is not None:
            v = v.strip().lower()
            if not EMAIL_RE.match(v):
                raise ValueError("Invalid email")
        return v


class SellerActionResponse(BaseModel):
    message: str


class ManagerLogResponse(BaseModel):
    id: int
    manager_id: int
    target_user_id: Optional[int] = None
    action: str
    action_type: str
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True
