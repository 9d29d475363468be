"""Funnel templates: admin library management and the user-facing catalogue."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user, require_admin
from app.models.user import User
from app.models.funnel_template import FunnelTemplate
from app.schemas.templates import (
    FunnelTemplateCreate,
    FunnelTemplateImport,
    FunnelTemplateResponse,
    FunnelTemplateSummary,
    FunnelTemplateUpdate,
)
from app.services import revisions
from app.services import settings as feature_settings
from app.services.subscriptions import plan_allows, resolve_current_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/templates", tags=["Admin Templates"])
user_router = APIRouter(prefix="/templates", tags=["Templates"])

RESOURCE = "funnel_templates"
SCHEMA_VERSION = 1


def _get_template(db: Session, template_id: int) -> FunnelTemplate:
    template = db.query(FunnelTemplate).filter(FunnelTemplate.id == template_id).first()
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


def _save(db: Session, template: FunnelTemplate) -> FunnelTemplate:
    db.commit()
    db.refresh(template)
    revisions.bump(RESOURCE)
    return template


@router.get("", response_model=List[FunnelTemplateResponse])
def list_templates(
    search: Optional[str] = Query(None, description="Search by name or description"),
    category: Optional[str] = Query(None),
    active: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    query = db.query(FunnelTemplate)
    if search:
        query = query.filter(
            (FunnelTemplate.name.ilike(f"%{search}%")) |
            (FunnelTemplate.description.ilike(f"%{search}%"))
        )
    if category:
        query = query.filter(FunnelTemplate.category == category)
    if active is not None:
        query = query.filter(FunnelTemplate.is_active.is_(active))
    return query.order_by(FunnelTemplate.created_at.desc()).all()


@router.post("", response_model=FunnelTemplateResponse, status_code=status.HTTP_201_CREATED)
def create_template(
    data: FunnelTemplateCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    template = FunnelTemplate(**data.model_dump(), schema_version=SCHEMA_VERSION, template_version=1)
    db.add(template)
    return _save(db, template)


@router.post("/import", response_model=FunnelTemplateResponse, status_code=status.HTTP_201_CREATED)
def import_template(
    data: FunnelTemplateImport,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Create an inactive template from an exported funnel ({nodes, edges})"""
    template = FunnelTemplate(
        name=data.name or "Funil importado",
        description=data.description,
        category=data.category or "general",
        nodes=data.nodes,
        edges=data.edges,
        is_active=False,
        is_free=True,
        schema_version=SCHEMA_VERSION,
        template_version=1,
    )
    db.add(template)
    return _save(db, template)


@router.get("/{template_id}", response_model=FunnelTemplateResponse)
def get_template(
    template_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    return _get_template(db, template_id)


@router.patch("/{template_id}", response_model=FunnelTemplateResponse)
def update_template(
    template_id: int,
    data: FunnelTemplateUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Every saved edit produces a new template version"""
    template = _get_template(db, template_id)
    changes = data.model_dump(exclude_unset=True)
    if "nodes" in changes and not changes["nodes"]:
        raise HTTPException(status_code=400, detail="A template needs at least one block")
    for field_name, value in changes.items():
        setattr(template, field_name, value)
    template.template_version = (template.template_version or 0) + 1
    return _save(db, template)


@router.post("/{template_id}/duplicate", response_model=FunnelTemplateResponse,
             status_code=status.HTTP_201_CREATED)
def duplicate_template(
    template_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    original = _get_template(db, template_id)
    copy = FunnelTemplate(
        name=f"{original.name} (Cópia)",
        description=original.description,
        category=original.category,
        is_free=original.is_free,
        is_active=False,
        min_plan=original.min_plan,
        nodes=list(original.nodes or []),
        edges=list(original.edges or []),
        schema_version=original.schema_version,
        template_version=1,
    )
    db.add(copy)
    return _save(db, copy)


@router.patch("/{template_id}/toggle-active", response_model=FunnelTemplateResponse)
def toggle_active(
    template_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    template = _get_template(db, template_id)
    template.is_active = not template.is_active
    return _save(db, template)


@router.patch("/{template_id}/toggle-free", response_model=FunnelTemplateResponse)
def toggle_free(
    template_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    template = _get_template(db, template_id)
    template.is_free = not template.is_free
    return _save(db, template)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    template = _get_template(db, template_id)
    db.delete(template)
    db.commit()
    revisions.bump(RESOURCE)


def _allowed(template: FunnelTemplate, plan) -> bool:
    return template.is_free or plan_allows(plan, template.min_plan)


def _ensure_funnels_enabled(db: Session):
    if not feature_settings.is_enabled(db, "funnels_enabled"):
        raise HTTPException(status_code=403, detail="Funnels are currently disabled")


@user_router.get("", response_model=List[FunnelTemplateSummary])
def list_available_templates(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Active templates the caller's plan can use"""
    _ensure_funnels_enabled(db)
    plan = resolve_current_plan(db, current_user)
    query = db.query(FunnelTemplate).filter(FunnelTemplate.is_active.is_(True))
    if category:
        query = query.filter(FunnelTemplate.category == category)
    templates = query.order_by(FunnelTemplate.created_at.desc()).all()
    return [
        FunnelTemplateSummary(
            id=t.id,
            name=t.name,
            description=t.description,
            category=t.category,
            is_free=t.is_free,
            min_plan=t.min_plan,
            node_count=len(t.nodes or []),
            template_version=t.template_version,
        )
        for t in templates
        if _allowed(t, plan)
    ]


@user_router.get("/{template_id}", response_model=FunnelTemplateResponse)
def get_available_template(
    template_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_funnels_enabled(db)
    template = _get_template(db, template_id)
    if not template.is_active:
        raise HTTPException(status_code=404, detail="Template not found")
    if not _allowed(template, resolve_current_plan(db, current_user)):
        raise HTTPException(status_code=403, detail="Upgrade your plan to use this template")
    return template
