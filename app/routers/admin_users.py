"""
Admin user management: listing, plan/role/suspension changes and access grants.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import require_admin
from app.models.user import User
from app.models.profile import Profile
from app.models.plan import Plan, PlanType, Subscription
from app.models.transaction import Transaction, TransactionStatus, ProductType
from app.models.listing import ListingKind, LISTING_MODELS
from app.schemas.admin_users import (
    AdminUserItem,
    AdminUserListResponse,
    AdminUserDetail,
    PlanChangeRequest,
    SuspendRequest,
    RoleChangeRequest,
    GrantAccessRequest,
    GrantAccessResponse,
    DashboardStats,
    TransactionResponse,
)
from app.schemas.profiles import SubscriptionResponse
from app.services import revisions
from app.services.listings import mark_sold
from app.services.presence import is_online
from app.services.subscriptions import activate_subscription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["Admin Users"])

LISTING_PRODUCT_TYPES = {
    ListingKind.TIKTOK: ProductType.TIKTOK_ACCOUNT,
    ListingKind.INSTAGRAM: ProductType.INSTAGRAM_ACCOUNT,
    ListingKind.TELEGRAM: ProductType.TELEGRAM_GROUP,
    ListingKind.MODEL: ProductType.MODEL,
}


def _item(user: User, now: datetime) -> AdminUserItem:
    profile = user.profile
    return AdminUserItem(
        id=user.id,
        email=user.email,
        role=user.role,
        full_name=profile.full_name if profile else None,
        phone=profile.phone if profile else None,
        current_plan=profile.current_plan if profile else PlanType.FREE,
        is_suspended=profile.is_suspended if profile else False,
        is_online=is_online(profile, now) if profile else False,
        last_seen_at=profile.last_seen_at if profile else None,
        created_at=user.created_at,
    )


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _get_profile(user: User) -> Profile:
    if user.profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return user.profile


@router.get("", response_model=AdminUserListResponse)
def list_users(
    plan: Optional[PlanType] = Query(None),
    suspended: Optional[bool] = Query(None),
    online: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Search by email or name"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    query = db.query(User).outerjoin(Profile, Profile.user_id == User.id)

    if plan:
        query = query.filter(Profile.current_plan == plan)
    if suspended is not None:
        query = query.filter(Profile.is_suspended.is_(suspended))
    if search:
        query = query.filter(
            (User.email.ilike(f"%{search}%")) |
            (Profile.full_name.ilike(f"%{search}%"))
        )

    now = datetime.now(timezone.utc)

    # Presence depends on the heartbeat window, so it is filtered after loading
    if online is not None:
        items = [_item(u, now) for u in query.order_by(User.created_at.desc()).all()]
        items = [i for i in items if i.is_online == online]
        return AdminUserListResponse(items=items[offset:offset + limit], total=len(items))

    total = query.count()
    users = query.order_by(User.created_at.desc()).offset(offset).limit(limit).all()
    return AdminUserListResponse(items=[_item(u, now) for u in users], total=total)


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Headline numbers for the admin dashboard. Revenue excludes admin grants."""
    now = datetime.now(timezone.utc)
    total_users = db.query(User).count()
    profiles = db.query(Profile).all()
    paid = db.query(Transaction).filter(
        Transaction.status == TransactionStatus.PAID,
        Transaction.is_admin_granted.is_(False),
    ).all()

    suspended = sum(1 for p in profiles if p.is_suspended)
    online = sum(1 for p in profiles if is_online(p, now))
    by_plan = {plan.value: 0 for plan in PlanType}
    for p in profiles:
        by_plan[PlanType(p.current_plan).value] += 1

    return DashboardStats(
        total_users=total_users,
        active_users=total_users - suspended,
        suspended_users=suspended,
        online_users=online,
        offline_users=total_users - online,
        users_by_plan=by_plan,
        paid_revenue_cents=sum(t.amount_cents for t in paid),
        paid_transactions=len(paid),
    )


@router.get("/{user_id}", response_model=AdminUserDetail)
def get_user_detail(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    user = _get_user(db, user_id)
    subscription = (
        db.query(Subscription)
        .filter(Subscription.user_id == user.id)
        .order_by(Subscription.created_at.desc())
        .first()
    )
    transactions = (
        db.query(Transaction)
        .filter(Transaction.user_id == user.id)
        .order_by(Transaction.created_at.desc())
        .limit(50)
        .all()
    )

    item = _item(user, datetime.now(timezone.utc))
    return AdminUserDetail(
        **item.model_dump(),
        onboarding_completed=user.profile.onboarding_completed if user.profile else False,
        subscription=SubscriptionResponse.model_validate(subscription) if subscription else None,
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
    )


@router.patch("/{user_id}/plan", response_model=AdminUserItem)
def change_plan(
    user_id: int,
    data: PlanChangeRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    user = _get_user(db, user_id)
    profile = _get_profile(user)
    profile.current_plan = data.plan
    db.commit()
    revisions.bump("profiles")
    logger.info("Plan of user %s set to %s", user_id, data.plan.value)
    return _item(user, datetime.now(timezone.utc))


@router.patch("/{user_id}/suspend", response_model=AdminUserItem)
def set_suspended(
    user_id: int,
    data: SuspendRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot suspend your own account")

    user = _get_user(db, user_id)
    profile = _get_profile(user)
    profile.is_suspended = data.suspended
    if data.suspended:
        profile.is_online = False
    db.commit()
    revisions.bump("profiles")
    logger.info("User %s %s", user_id, "suspended" if data.suspended else "reactivated")
    return _item(user, datetime.now(timezone.utc))


@router.patch("/{user_id}/role", response_model=AdminUserItem)
def change_role(
    user_id: int,
    data: RoleChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot change your own role")

    user = _get_user(db, user_id)
    user.role = data.role
    db.commit()
    revisions.bump("profiles")
    logger.info("Role of user %s set to %s", user_id, data.role.value)
    return _item(user, datetime.now(timezone.utc))


@router.post("/{user_id}/grant", response_model=GrantAccessResponse, status_code=status.HTTP_201_CREATED)
def grant_access(
    user_id: int,
    data: GrantAccessRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """
    Give a user a plan or a listing without payment.

    Records a paid transaction flagged ``is_admin_granted`` so billing can
    tell grants apart from real sales.
    """
    wants_plan = data.plan is not None
    wants_listing = data.listing_kind is not None and data.listing_id is not None
    if wants_plan == wants_listing:
        raise HTTPException(status_code=400, detail="Grant either a plan or a listing")

    user = _get_user(db, user_id)
    transaction = Transaction(
        user_id=user.id,
        external_id=f"admin_grant_{uuid.uuid4().hex}",
        status=TransactionStatus.PAID,
        payment_method="admin_grant",
        buyer_email=user.email,
        buyer_name=user.profile.full_name if user.profile else None,
        is_admin_granted=True,
    )
    subscription_id = None
    listing_id = None

    # Subscription grant
    if wants_plan:
        plan = db.query(Plan).filter(Plan.slug == data.plan).first()
        if not plan:
            raise HTTPException(status_code=404, detail="Plan not found")
        subscription = activate_subscription(db, user.id, plan, days=data.days)
        transaction.product_type = ProductType.SUBSCRIPTION
        transaction.product_id = plan.id
        transaction.amount_cents = plan.price_cents
        db.flush()
        subscription_id = subscription.id
        resources = ("subscriptions", "profiles")
    else:
        # Listing grant
        model = LISTING_MODELS[data.listing_kind]
        listing = db.query(model).filter(model.id == data.listing_id).first()
        if not listing:
            raise HTTPException(status_code=404, detail="Listing not found")
        try:
            mark_sold(listing, user.id)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        transaction.product_type = LISTING_PRODUCT_TYPES[data.listing_kind]
        transaction.product_id = listing.id
        transaction.amount_cents = listing.price_cents
        listing_id = listing.id
        resources = (model.__tablename__,)

    transaction.net_amount_cents = 0
    db.add(transaction)
    db.commit()
    db.refresh(transaction)

    revisions.bump("transactions")
    for resource in resources:
        revisions.bump(resource)

    logger.info("Admin %s granted %s to user %s", current_user.id, transaction.product_type.value, user.id)
    return GrantAccessResponse(
        transaction=TransactionResponse.model_validate(transaction),
        subscription_id=subscription_id,
        listing_id=listing_id,
    )
