from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.plan import Plan, PLAN_ORDER
from app.schemas.profiles import PlanResponse

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get("", response_model=List[PlanResponse])
def list_plans(db: Session = Depends(get_db)):
    """Active plans, cheapest tier first"""
    plans = db.query(Plan).filter(Plan.is_active.is_(True)).all()
    return sorted(plans, key=lambda p: PLAN_ORDER.index(p.slug))
