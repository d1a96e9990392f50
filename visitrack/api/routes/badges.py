# visitrack/api/routes/badges.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.badges import BadgeCreateRequest
from ...services.badge_service import badge_service

router = APIRouter()

badges_page = require_page_access(PageKey.BADGE_MANAGEMENT)


@router.get("/badges")
def list_badges(scope: TenantScope = Depends(badges_page), db=Depends(get_db)):
    try:
        return badge_service.list_badges(db, scope)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error fetching badges", e)


@router.post("/badges", status_code=status.HTTP_201_CREATED)
def create_badge(request: BadgeCreateRequest, scope: TenantScope = Depends(badges_page), db=Depends(get_db)):
    try:
        return badge_service.create_badge(db, scope, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error creating badge", e)


@router.delete("/badges")
def delete_badge(
    badge_id: Optional[str] = Query(None, alias="id"),
    scope: TenantScope = Depends(badges_page),
    db=Depends(get_db)
):
    try:
        return badge_service.delete_badge(db, scope, badge_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error deleting badge", e)


@router.get("/badges/event/{event_id}")
def get_event_badge(event_id: str, scope: TenantScope = Depends(badges_page), db=Depends(get_db)):
    try:
        return badge_service.get_event_badge(db, scope, event_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Failed to fetch event badge", e)
