"""Smart link pages: owner management plus the public landing endpoints."""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth.dependencies import get_current_user
from app.models.user import User
from app.models.smart_link import SmartLinkPage, SmartLinkButton
from app.schemas.smart_links import (
    ButtonReorderRequest,
    PublicSmartLinkPage,
    SmartLinkButtonCreate,
    SmartLinkButtonResponse,
    SmartLinkButtonUpdate,
    SmartLinkLimitsResponse,
    SmartLinkPageCreate,
    SmartLinkPageResponse,
    SmartLinkPageUpdate,
)
from app.services import revisions
from app.services import system_config
from app.services.subscriptions import resolve_current_plan, smart_link_limits

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/smart-links", tags=["Smart Links"])
public_router = APIRouter(prefix="/s", tags=["Smart Links"])

RESOURCE = "smart_link_pages"


def _public_base(db: Session) -> str:
    base = system_config.get_value(db, "smart_link_base_url")
    if not base:
        base = f"{system_config.get_value(db, 'APP_BASE_URL').rstrip('/')}/s"
    return base.rstrip("/")


def _page_response(page: SmartLinkPage, base: str) -> SmartLinkPageResponse:
    response = SmartLinkPageResponse.model_validate(page)
    response.public_url = f"{base}/{page.slug}"
    return response


def _get_own_page(db: Session, page_id: int, user: User) -> SmartLinkPage:
    page = (
        db.query(SmartLinkPage)
        .filter(SmartLinkPage.id == page_id, SmartLinkPage.user_id == user.id)
        .first()
    )
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


def _get_own_button(page: SmartLinkPage, button_id: int) -> SmartLinkButton:
    for button in page.buttons:
        if button.id == button_id:
            return button
    raise HTTPException(status_code=404, detail="Button not found")


def _ensure_slug_free(db: Session, slug: str, page_id: int = None):
    query = db.query(SmartLinkPage).filter(SmartLinkPage.slug == slug)
    if page_id is not None:
        query = query.filter(SmartLinkPage.id != page_id)
    if query.first():
        raise HTTPException(status_code=409, detail="Slug already in use")


@router.get("/limits", response_model=SmartLinkLimitsResponse)
def get_limits(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    plan = resolve_current_plan(db, current_user)
    limits = smart_link_limits(current_user, plan)
    used = db.query(SmartLinkPage).filter(SmartLinkPage.user_id == current_user.id).count()
    return SmartLinkLimitsResponse(
        plan=plan.value,
        max_pages=limits.pages,
        max_buttons=limits.buttons,
        pages_used=used,
    )


@router.get("", response_model=List[SmartLinkPageResponse])
def list_pages(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pages = (
        db.query(SmartLinkPage)
        .filter(SmartLinkPage.user_id == current_user.id)
        .order_by(SmartLinkPage.created_at.desc())
        .all()
    )
    base = _public_base(db)
    return [_page_response(p, base) for p in pages]


@router.post("", response_model=SmartLinkPageResponse, status_code=status.HTTP_201_CREATED)
def create_page(
    data: SmartLinkPageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Check plan limit
    limits = smart_link_limits(current_user, resolve_current_plan(db, current_user))
    if limits.pages is not None:
        used = db.query(SmartLinkPage).filter(SmartLinkPage.user_id == current_user.id).count()
        if used >= limits.pages:
            raise HTTPException(
                status_code=403,
                detail=f"Your plan allows up to {limits.pages} smart link pages",
            )

    # Slugs are global across users
    _ensure_slug_free(db, data.slug)

    page = SmartLinkPage(**data.model_dump(), user_id=current_user.id)
    db.add(page)
    db.commit()
    db.refresh(page)
    revisions.bump(RESOURCE)
    logger.info("User %s created smart link page %s", current_user.id, page.slug)
    return _page_response(page, _public_base(db))


@router.get("/{page_id}", response_model=SmartLinkPageResponse)
def get_page(
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _page_response(_get_own_page(db, page_id, current_user), _public_base(db))


@router.patch("/{page_id}", response_model=SmartLinkPageResponse)
def update_page(
    page_id: int,
    data: SmartLinkPageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page = _get_own_page(db, page_id, current_user)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("slug") and changes["slug"] != page.slug:
        _ensure_slug_free(db, changes["slug"], page.id)
    for field_name, value in changes.items():
        setattr(page, field_name, value)
    db.commit()
    db.refresh(page)
    revisions.bump(RESOURCE)
    return _page_response(page, _public_base(db))


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page = _get_own_page(db, page_id, current_user)
    db.delete(page)
    db.commit()
    revisions.bump(RESOURCE)


@router.post("/{page_id}/buttons", response_model=SmartLinkButtonResponse,
             status_code=status.HTTP_201_CREATED)
def add_button(
    page_id: int,
    data: SmartLinkButtonCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page = _get_own_page(db, page_id, current_user)
    limits = smart_link_limits(current_user, resolve_current_plan(db, current_user))
    if limits.buttons is not None and len(page.buttons) >= limits.buttons:
        raise HTTPException(
            status_code=403,
            detail=f"Your plan allows up to {limits.buttons} buttons per page",
        )

    position = max((b.position for b in page.buttons), default=-1) + 1
    button = SmartLinkButton(**data.model_dump(), page_id=page.id, position=position)
    db.add(button)
    db.commit()
    db.refresh(button)
    revisions.bump(RESOURCE)
    return button


@router.patch("/{page_id}/buttons/{button_id}", response_model=SmartLinkButtonResponse)
def update_button(
    page_id: int,
    button_id: int,
    data: SmartLinkButtonUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page = _get_own_page(db, page_id, current_user)
    button = _get_own_button(page, button_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(button, field_name, value)
    db.commit()
    db.refresh(button)
    revisions.bump(RESOURCE)
    return button


@router.delete("/{page_id}/buttons/{button_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_button(
    page_id: int,
    button_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page = _get_own_page(db, page_id, current_user)
    button = _get_own_button(page, button_id)
    db.delete(button)
    db.commit()
    revisions.bump(RESOURCE)


@router.put("/{page_id}/buttons/reorder", response_model=List[SmartLinkButtonResponse])
def reorder_buttons(
    page_id: int,
    data: ButtonReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Positions follow the order of ``button_ids``, which must list every button once"""
    page = _get_own_page(db, page_id, current_user)
    by_id = {b.id: b for b in page.buttons}
    if len(data.button_ids) != len(by_id) or set(data.button_ids) != set(by_id):
        raise HTTPException(status_code=400, detail="button_ids must list each button of the page once")

    for position, button_id in enumerate(data.button_ids):
        by_id[button_id].position = position
    db.commit()
    revisions.bump(RESOURCE)
    return [by_id[i] for i in data.button_ids]


@public_router.get("/{slug}", response_model=PublicSmartLinkPage)
def view_page(slug: str, db: Session = Depends(get_db)):
    """Public page; each fetch counts as a view"""
    page = (
        db.query(SmartLinkPage)
        .filter(SmartLinkPage.slug == slug.lower(), SmartLinkPage.is_active.is_(True))
        .first()
    )
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")

    db.query(SmartLinkPage).filter(SmartLinkPage.id == page.id).update(
        {SmartLinkPage.total_views: SmartLinkPage.total_views + 1},
        synchronize_session=False,
    )
    db.commit()

    return PublicSmartLinkPage(
        slug=page.slug,
        title=page.title,
        description=page.description,
        avatar_url=page.avatar_url,
        background_color=page.background_color,
        text_color=page.text_color,
        button_style=page.button_style,
        meta_pixel_id=page.meta_pixel_id,
        tiktok_pixel_id=page.tiktok_pixel_id,
        google_analytics_id=page.google_analytics_id,
        buttons=[SmartLinkButtonResponse.model_validate(b) for b in page.buttons if b.is_active],
    )


@public_router.post("/{slug}/buttons/{button_id}/click", status_code=status.HTTP_204_NO_CONTENT)
def register_click(slug: str, button_id: int, db: Session = Depends(get_db)):
    button = (
        db.query(SmartLinkButton)
        .join(SmartLinkPage, SmartLinkButton.page_id == SmartLinkPage.id)
        .filter(SmartLinkPage.slug == slug.lower(), SmartLinkButton.id == button_id)
        .first()
    )
    if not button:
        raise HTTPException(status_code=404, detail="Button not found")

    db.query(SmartLinkButton).filter(SmartLinkButton.id == button.id).update(
        {SmartLinkButton.clicks: SmartLinkButton.clicks + 1},
        synchronize_session=False,
    )
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
