"""Endpoints for the signed-in user's own profile, plan and presence."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user
from app.models.user import User
from app.models.plan import Subscription
from app.models.profile import Profile
from app.schemas.profiles import (
    MeResponse,
    ProfileResponse,
    ProfileUpdate,
    SubscriptionResponse,
    HeartbeatResponse,
)
from app.services import revisions
from app.services.presence import record_heartbeat
from app.services.subscriptions import resolve_current_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/me", tags=["Me"])


def _profile_of(user: User) -> Profile:
    if user.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return user.profile


def _latest_subscription(db: Session, user: User) -> Optional[Subscription]:
    return (
        db.query(Subscription)
        .filter(Subscription.user_id == user.id)
        .order_by(Subscription.created_at.desc())
        .first()
    )


@router.get("", response_model=MeResponse)
def get_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    plan = resolve_current_plan(db, current_user)
    subscription = _latest_subscription(db, current_user)
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        role=current_user.role,
        effective_plan=plan,
        profile=ProfileResponse.model_validate(current_user.profile) if current_user.profile else None,
        subscription=SubscriptionResponse.model_validate(subscription) if subscription else None,
    )


@router.patch("/profile", response_model=ProfileResponse)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = _profile_of(current_user)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(profile, field_name, value)
    db.commit()
    db.refresh(profile)
    revisions.bump("profiles")
    return profile


@router.post("/heartbeat", response_model=HeartbeatResponse)
def heartbeat(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark the caller online. Clients call this periodically while active."""
    profile = record_heartbeat(_profile_of(current_user))
    db.commit()
    return HeartbeatResponse(is_online=profile.is_online, last_seen_at=profile.last_seen_at)


@router.post("/offline", status_code=status.HTTP_204_NO_CONTENT)
def go_offline(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = _profile_of(current_user)
    profile.is_online = False
    db.commit()


@router.get("/subscription", response_model=Optional[SubscriptionResponse])
def get_subscription(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _latest_subscription(db, current_user)
