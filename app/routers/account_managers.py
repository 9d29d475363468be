"""
Account managers.

Admins promote users to manager and hand them sellers. Managers list their
sellers, keep notes on them and run a fixed set of actions on them.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import require_admin, require_role
from app.models.account_manager import AccountManagerSeller, AccountManagerLog
from app.models.plan import PlanType, Subscription, SubscriptionStatus
from app.models.transaction import Transaction
from app.models.user import User, AppRole
from app.schemas.account_managers import (
    ManagerSummary,
    SellerAssignmentRequest,
    SellerItem,
    SellerNotesUpdate,
    SellerDetail,
    SellerAction,
    SellerActionResponse,
    ManagerLogResponse,
)
from app.schemas.admin_users import TransactionResponse
from app.schemas.profiles import SubscriptionResponse
from app.services import revisions
from app.services.account_managers import (
    ActionError,
    apply_action,
    assign_sellers,
    can_manage,
    log_action,
    seller_counts,
)

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/admin/account-managers", tags=["Admin Account Managers"])
router = APIRouter(prefix="/account-manager", tags=["Account Manager"])

require_manager = require_role(AppRole.GERENTE_CONTAS, AppRole.ADMIN)

RESOURCE = "account_manager_sellers"


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _get_manager(db: Session, user_id: int) -> User:
    user = _get_user(db, user_id)
    if user.role != AppRole.GERENTE_CONTAS:
        raise HTTPException(status_code=404, detail="Account manager not found")
    return user


def _summary(user: User, count: int) -> ManagerSummary:
    profile = user.profile
    return ManagerSummary(
        user_id=user.id,
        email=user.email,
        full_name=profile.full_name if profile else None,
        current_plan=profile.current_plan if profile else PlanType.FREE,
        seller_count=count,
    )


def _seller_item(assignment: AccountManagerSeller) -> SellerItem:
    seller = assignment.seller
    profile = seller.profile
    return SellerItem(
        assignment_id=assignment.id,
        seller_id=seller.id,
        email=seller.email,
        full_name=profile.full_name if profile else None,
        phone=profile.phone if profile else None,
        current_plan=profile.current_plan if profile else PlanType.FREE,
        is_suspended=profile.is_suspended if profile else False,
        notes=assignment.notes,
        assigned_at=assignment.created_at,
    )


def _assignments(db: Session, manager_id: int) -> List[AccountManagerSeller]:
    return (
        db.query(AccountManagerSeller)
        .filter(AccountManagerSeller.manager_id == manager_id)
        .order_by(AccountManagerSeller.created_at.desc())
        .all()
    )


def _ensure_can_manage(db: Session, actor: User, seller_id: int):
    if not can_manage(db, actor, seller_id):
        raise HTTPException(status_code=403, detail="Seller is not assigned to you")


# Admin panel

@admin_router.get("", response_model=List[ManagerSummary])
def list_managers(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    counts = seller_counts(db)
    managers = (
        db.query(User)
        .filter(User.role == AppRole.GERENTE_CONTAS)
        .order_by(User.email)
        .all()
    )
    return [_summary(m, counts.get(m.id, 0)) for m in managers]


@admin_router.post("/{user_id}", response_model=ManagerSummary, status_code=status.HTTP_201_CREATED)
def promote_manager(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_user(db, user_id)
    if user.role == AppRole.GERENTE_CONTAS:
        raise HTTPException(status_code=409, detail="User is already an account manager")
    if user.role == AppRole.ADMIN:
        raise HTTPException(status_code=400, detail="Admins cannot become account managers")

    # A manager cannot stay assigned as someone else's seller
    db.query(AccountManagerSeller).filter(
        AccountManagerSeller.seller_id == user.id,
    ).delete(synchronize_session=False)
    user.role = AppRole.GERENTE_CONTAS
    db.commit()
    revisions.bump("profiles")
    revisions.bump(RESOURCE)
    logger.info("Admin %s made user %s an account manager", current_user.id, user.id)
    return _summary(user, 0)


@admin_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def demote_manager(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_manager(db, user_id)
    db.query(AccountManagerSeller).filter(
        AccountManagerSeller.manager_id == user.id,
    ).delete(synchronize_session=False)
    user.role = AppRole.USER
    db.commit()
    revisions.bump("profiles")
    revisions.bump(RESOURCE)
    logger.info("Admin %s removed account manager %s", current_user.id, user.id)


@admin_router.get("/{manager_id}/sellers", response_model=List[SellerItem])
def list_manager_sellers(
    manager_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    _get_manager(db, manager_id)
    return [_seller_item(a) for a in _assignments(db, manager_id)]


@admin_router.put("/{manager_id}/sellers", response_model=List[SellerItem])
def set_manager_sellers(
    manager_id: int,
    data: SellerAssignmentRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    _get_manager(db, manager_id)
    try:
        assign_sellers(db, manager_id, data.seller_ids)
    except ActionError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    revisions.bump(RESOURCE)
    return [_seller_item(a) for a in _assignments(db, manager_id)]


# Manager panel

@router.get("/sellers", response_model=List[SellerItem])
def my_sellers(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    return [_seller_item(a) for a in _assignments(db, current_user.id)]


@router.patch("/sellers/{assignment_id}/notes", response_model=SellerItem)
def update_notes(
    assignment_id: int,
    data: SellerNotesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    assignment = db.query(AccountManagerSeller).filter(
        AccountManagerSeller.id == assignment_id,
        AccountManagerSeller.manager_id == current_user.id,
    ).first()
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")

    assignment.notes = data.notes
    log_action(db, current_user.id, assignment.seller_id, "Atualizou observações do seller",
               "notes_update", {"notes_length": len(data.notes or "")})
    db.commit()
    db.refresh(assignment)
    revisions.bump(RESOURCE)
    return _seller_item(assignment)


@router.get("/sellers/{seller_id}", response_model=SellerDetail)
def seller_detail(
    seller_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    _ensure_can_manage(db, current_user, seller_id)
    seller = _get_user(db, seller_id)
    profile = seller.profile

    subscription = (
        db.query(Subscription)
        .filter(Subscription.user_id == seller.id, Subscription.status == SubscriptionStatus.ACTIVE)
        .order_by(Subscription.created_at.desc())
        .first()
    )
    transactions = (
        db.query(Transaction)
        .filter(Transaction.user_id == seller.id)
        .order_by(Transaction.created_at.desc())
        .limit(5)
        .all()
    )

    return SellerDetail(
        seller_id=seller.id,
        email=seller.email,
        role=seller.role,
        full_name=profile.full_name if profile else None,
        phone=profile.phone if profile else None,
        current_plan=profile.current_plan if profile else PlanType.FREE,
        is_suspended=profile.is_suspended if profile else False,
        subscription=SubscriptionResponse.model_validate(subscription) if subscription else None,
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
    )


@router.post("/sellers/{seller_id}/actions", response_model=SellerActionResponse)
def run_action(
    seller_id: int,
    data: SellerAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    # Check scope before touching the seller
    _ensure_can_manage(db, current_user, seller_id)
    seller = _get_user(db, seller_id)

    try:
        message = apply_action(db, current_user, seller, data)
    except ActionError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    revisions.bump("profiles")
    logger.info("Manager %s ran %s on user %s", current_user.id, data.action, seller_id)
    return SellerActionResponse(message=message)


@router.get("/logs", response_model=List[ManagerLogResponse])
def my_logs(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager),
):
    return (
        db.query(AccountManagerLog)
        .filter(AccountManagerLog.manager_id == current_user.id)
        .order_by(AccountManagerLog.created_at.desc())
        .limit(50)
        .all()
    )
