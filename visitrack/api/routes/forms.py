# visitrack/api/routes/forms.py
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.forms import FormCreateRequest, FormUpdateRequest
from ...services.form_service import form_service

router = APIRouter()

forms_page = require_page_access(PageKey.FORM_BUILDER)


@router.get("/forms")
def list_forms(scope: TenantScope = Depends(forms_page), db=Depends(get_db)):
    try:
        return form_service.list_forms(db, scope)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error fetching forms", e)


@router.post("/forms", status_code=status.HTTP_201_CREATED)
def create_form(request: FormCreateRequest, scope: TenantScope = Depends(forms_page), db=Depends(get_db)):
    try:
        return form_service.create_form(db, scope, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error creating form", e)


@router.put("/forms/{form_id}")
def update_form(
    form_id: str,
    request: FormUpdateRequest,
    scope: TenantScope = Depends(forms_page),
    db=Depends(get_db)
):
    try:
        return form_service.update_form(db, scope, form_id, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error updating form", e)


@router.delete("/forms/{form_id}")
def delete_form(form_id: str, scope: TenantScope = Depends(forms_page), db=Depends(get_db)):
    try:
        return form_service.delete_form(db, scope, form_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Error deleting form", e)


@router.get("/forms/event/{event_id}")
def get_event_form(event_id: str, db=Depends(get_db)):
    """Active registration form for an event (public)"""
    try:
        return form_service.get_event_form(db, event_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Failed to fetch event form", e)
