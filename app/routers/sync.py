"""Revision counters polled by clients to know when to re-fetch."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

import redis

from app.auth.dependencies import get_current_user
from app.models.user import User
from app.schemas.sync import RevisionsResponse
from app.services import revisions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/revisions", response_model=RevisionsResponse)
def get_revisions(
    resources: str = Query(None, description="Comma-separated resource names; all when omitted"),
    _: User = Depends(get_current_user),
):
    if resources:
        requested = [r.strip() for r in resources.split(",") if r.strip()]
    else:
        requested = list(revisions.RESOURCES)

    unknown = [r for r in requested if r not in revisions.RESOURCES]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown resources: {', '.join(unknown)}")

    try:
        return RevisionsResponse(revisions=revisions.current(requested))
    except redis.RedisError as e:
        logger.error("Revision lookup failed: %s", e)
        raise HTTPException(status_code=503, detail="Revision service unavailable")
