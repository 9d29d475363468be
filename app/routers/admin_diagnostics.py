"""Admin diagnostics: table counts, external function checks and the route map."""
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user, require_admin
from app.models.user import User
from app.schemas.diagnostics import FunctionCheck, RouteInfo, TableCount
from app.services import diagnostics

router = APIRouter(prefix="/admin/diagnostics", tags=["admin-diagnostics"])


@router.get("/tables", response_model=List[TableCount])
def table_counts(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return diagnostics.count_tables(db)


@router.get("/functions", response_model=List[FunctionCheck])
def function_checks(_: User = Depends(require_admin)):
    return diagnostics.check_functions()


@router.get("/routes", response_model=List[RouteInfo])
def route_map(request: Request, _: User = Depends(require_admin)):
    return diagnostics.list_routes(request.app, get_current_user)
