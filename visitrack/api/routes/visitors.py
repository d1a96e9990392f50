# visitrack/api/routes/visitors.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.visitors import CheckVisitorRequest, VisitorRegistrationRequest
from ...services.visitor_service import visitor_service

router = APIRouter()


@router.post("/register-visitor", status_code=status.HTTP_201_CREATED)
def register_visitor(request: VisitorRegistrationRequest, db=Depends(get_db)):
    """Public event registration"""
    try:
        return visitor_service.register_visitor(db, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Failed to complete registration", e)


@router.post("/check-visitor")
def check_visitor(request: CheckVisitorRequest, db=Depends(get_db)):
    """Public; tells the registration page whether this email already registered"""
    try:
        return visitor_service.check_visitor(db, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Failed to check registration status", e)


@router.get("/visitors")
def list_visitors(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    event_id: Optional[str] = Query(None, alias="eventId"),
    visitor_status: Optional[str] = Query(None, alias="status"),
    scope: TenantScope = Depends(require_page_access(PageKey.VISITORS)),
    db=Depends(get_db)
):
    try:
        return visitor_service.list_visitors(db, scope, page, limit, search, event_id, visitor_status)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error fetching visitors", e)
