"""Billing dashboard: period totals and the transaction ledger."""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import require_admin
from app.models.user import User
from app.models.transaction import Transaction, TransactionStatus, ProductType
from app.schemas.admin_users import TransactionResponse
from app.schemas.billing import BillingSummaryResponse, TransactionListResponse
from app.services.billing import bucket_transactions

router = APIRouter(prefix="/admin/billing", tags=["Admin Billing"])


@router.get("/summary", response_model=BillingSummaryResponse)
def billing_summary(
    include_admin_granted: bool = Query(False),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Paid totals for today, the last 7/15/30 days and all time"""
    query = db.query(Transaction).filter(Transaction.status == TransactionStatus.PAID)
    if not include_admin_granted:
        query = query.filter(Transaction.is_admin_granted.is_(False))
    return bucket_transactions(query.all()).to_dict()


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    status: Optional[TransactionStatus] = Query(None),
    product_type: Optional[ProductType] = Query(None),
    start: Optional[datetime] = Query(None, description="Created at or after"),
    end: Optional[datetime] = Query(None, description="Created at or before"),
    search: Optional[str] = Query(None, description="Search by buyer email or name"),
    include_admin_granted: bool = Query(True),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    query = db.query(Transaction)
    if status:
        query = query.filter(Transaction.status == status)
    if product_type:
        query = query.filter(Transaction.product_type == product_type)
    if start:
        query = query.filter(Transaction.created_at >= start)
    if end:
        query = query.filter(Transaction.created_at <= end)
    if search:
        query = query.filter(
            (Transaction.buyer_email.ilike(f"%{search}%")) |
            (Transaction.buyer_name.ilike(f"%{search}%"))
        )
    if not include_admin_granted:
        query = query.filter(Transaction.is_admin_granted.is_(False))

    total = query.count()
    rows = query.order_by(Transaction.created_at.desc()).offset(offset).limit(limit).all()
    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in rows],
        total=total,
    )
