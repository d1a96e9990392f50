# visitrack/api/routes/events.py
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.events import EventCreateRequest, EventUpdateRequest
from ...services.event_service import event_service

router = APIRouter()

events_page = require_page_access(PageKey.EVENTS)


@router.get("/events")
def list_events(scope: TenantScope = Depends(events_page), db=Depends(get_db)):
    try:
        return event_service.list_events(db, scope)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error fetching events", e)


@router.post("/events", status_code=status.HTTP_201_CREATED)
def create_event(request: EventCreateRequest, scope: TenantScope = Depends(events_page), db=Depends(get_db)):
    try:
        return event_service.create_event(db, scope, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error creating event", e)


@router.get("/events/{event_id}")
def get_event(event_id: str, scope: TenantScope = Depends(events_page), db=Depends(get_db)):
    try:
        return event_service.get_event(db, scope, event_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error fetching event", e)


@router.put("/events/{event_id}")
def update_event(
    event_id: str,
    request: EventUpdateRequest,
    scope: TenantScope = Depends(events_page),
    db=Depends(get_db)
):
    try:
        return event_service.update_event(db, scope, event_id, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error updating event", e)


@router.delete("/events/{event_id}")
def delete_event(event_id: str, scope: TenantScope = Depends(events_page), db=Depends(get_db)):
    try:
        return event_service.delete_event(db, scope, event_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error deleting event", e)


@router.get("/public-events/{event_id}")
def get_public_event(event_id: str, db=Depends(get_db)):
    """Event details for the public registration page"""
    try:
        return event_service.get_public_event(db, event_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error fetching event", e)
