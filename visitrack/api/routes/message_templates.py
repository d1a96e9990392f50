# visitrack/api/routes/message_templates.py
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.message_templates import MessageTemplateRequest
from ...services.message_template_service import message_template_service

router = APIRouter()

messages_page = require_page_access(PageKey.MESSAGES)


@router.get("/message-templates")
def list_templates(scope: TenantScope = Depends(messages_page), db=Depends(get_db)):
    """Tenant's templates, most recently edited first"""
    try:
        return message_template_service.list_templates(db, scope)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/message-templates", status_code=status.HTTP_201_CREATED)
def create_template(request: MessageTemplateRequest, scope: TenantScope = Depends(messages_page),
                    db=Depends(get_db)):
    try:
        return message_template_service.create_template(db, scope, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.get("/message-templates/{template_id}")
def get_template(template_id: str, scope: TenantScope = Depends(messages_page), db=Depends(get_db)):
    try:
        return message_template_service.get_template(db, scope, template_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.put("/message-templates/{template_id}")
def update_template(
    template_id: str,
    request: MessageTemplateRequest,
    scope: TenantScope = Depends(messages_page),
    db=Depends(get_db)
):
    try:
        return message_template_service.update_template(db, scope, template_id, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.delete("/message-templates/{template_id}")
def delete_template(template_id: str, scope: TenantScope = Depends(messages_page), db=Depends(get_db)):
    try:
        return message_template_service.delete_template(db, scope, template_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)
