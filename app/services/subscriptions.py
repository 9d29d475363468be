"""Plan resolution and plan-based gating."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from sqlalchemy.orm import Session

from app.models.plan import Plan, PlanType, PLAN_ORDER, Subscription, SubscriptionStatus
from app.models.profile import Profile
from app.models.user import User, AppRole

logger = logging.getLogger(__name__)

DEFAULT_SUBSCRIPTION_DAYS = 30


@dataclass(frozen=True)
class SmartLinkLimits:
    pages: Optional[int]  # None means unlimited
    buttons: Optional[int]


SMART_LINK_LIMITS = {
    PlanType.FREE: SmartLinkLimits(pages=1, buttons=5),
    PlanType.BASIC: SmartLinkLimits(pages=3, buttons=10),
    PlanType.PRO: SmartLinkLimits(pages=10, buttons=25),
    PlanType.AGENCY: SmartLinkLimits(pages=None, buttons=None),
}


def plan_allows(user_plan: Union[PlanType, str], min_plan: Union[PlanType, str]) -> bool:
    """True when ``user_plan`` is at or above ``min_plan`` in PLAN_ORDER."""
    return PLAN_ORDER.index(PlanType(user_plan)) >= PLAN_ORDER.index(PlanType(min_plan))


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_current_plan(db: Session, user: User, now: Optional[datetime] = None) -> PlanType:
    """
    Effective plan of a user.

    Admins always get the top tier. Otherwise the latest active subscription
    wins; one whose ``expires_at`` has passed is marked expired on the spot and
    ignored. Falls back to the profile's plan, then to free.
    """
    if user.role == AppRole.ADMIN:
        return PLAN_ORDER[-1]

    now = now or datetime.now(timezone.utc)
    subscription = (
        db.query(Subscription)
        .filter(Subscription.user_id == user.id, Subscription.status == SubscriptionStatus.ACTIVE)
        .order_by(Subscription.created_at.desc())
        .first()
    )

    if subscription is not None:
        if subscription.expires_at is not None and _aware(subscription.expires_at) <= now:
            expire_subscription(subscription, user.profile)
            db.commit()
        elif subscription.plan is not None:
            return PlanType(subscription.plan.slug)

    profile = user.profile
    if profile is not None and profile.current_plan:
        return PlanType(profile.current_plan)
    return PlanType.FREE


def expire_subscription(subscription: Subscription, profile: Optional[Profile]):
    """Mark a subscription expired; a profile still on its plan drops back to free."""
    subscription.status = SubscriptionStatus.EXPIRED
    plan = subscription.plan
    if profile is not None and plan is not None and profile.current_plan == plan.slug:
        profile.current_plan = PlanType.FREE
    logger.info("Subscription %s of user %s expired", subscription.id, subscription.user_id)


def smart_link_limits(user: User, plan: PlanType) -> SmartLinkLimits:
    if user.role == AppRole.ADMIN:
        return SMART_LINK_LIMITS[PlanType.AGENCY]
    return SMART_LINK_LIMITS.get(plan, SMART_LINK_LIMITS[PlanType.FREE])


def activate_subscription(
    db: Session,
    user_id: int,
    plan: Plan,
    now: Optional[datetime] = None,
    days: int = DEFAULT_SUBSCRIPTION_DAYS,
) -> Subscription:
    """
    Start an active subscription for ``plan`` and mirror it on the profile.

    Previously active subscriptions of the user are cancelled. The caller
    commits.
    """
    now = now or datetime.now(timezone.utc)

    previous = db.query(Subscription).filter(
        Subscription.user_id == user_id,
        Subscription.status == SubscriptionStatus.ACTIVE,
    ).all()
    for sub in previous:
        sub.status = SubscriptionStatus.CANCELLED

    subscription = Subscription(
        user_id=user_id,
        plan_id=plan.id,
        status=SubscriptionStatus.ACTIVE,
        started_at=now,
        expires_at=now + timedelta(days=days),
    )
    db.add(subscription)

    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is not None:
        profile.current_plan = plan.slug

    return subscription


def expire_overdue_subscriptions(db: Session, now: Optional[datetime] = None) -> int:
    """
    Mark active subscriptions past ``expires_at`` as expired.

    The profile drops back to free when it still points at the expired plan.
    Returns the number of subscriptions expired.
    """
    now = now or datetime.now(timezone.utc)
    overdue = db.query(Subscription).filter(
        Subscription.status == SubscriptionStatus.ACTIVE,
        Subscription.expires_at.isnot(None),
        Subscription.expires_at <= now,
    ).all()

    for sub in overdue:
        profile = db.query(Profile).filter(Profile.user_id == sub.user_id).first()
        expire_subscription(sub, profile)

    if overdue:
        db.commit()
    return len(overdue)
