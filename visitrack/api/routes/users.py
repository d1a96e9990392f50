# visitrack/api/routes/users.py
from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, status
from typing import Any, Dict
from loguru import logger

from ..dependencies import get_db, get_tenant_scope, require_page_access, require_roles
from ..errors import server_error
from ...core.page_access import PageKey, backfill_page_access
from ...middleware.tenant import TenantScope
from ...models.users import CreateUserRequest, PageAccessResponse, UpdateUserRequest, USER_MANAGER_ROLES
from ...services.user_service import user_service

router = APIRouter()

admin_only = require_roles("admin", message="Access denied. Admin role required.")
user_managers = require_roles(*USER_MANAGER_ROLES, message="Access denied. Admin or Sub-Admin role required.")
settings_page = Depends(require_page_access(PageKey.SETTING))


@router.get("/users", dependencies=[settings_page])
def list_users(scope: TenantScope = Depends(admin_only), db=Depends(get_db)):
    """Members of the caller's organization, newest first"""
    try:
        return user_service.list_users(db, scope)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/users", status_code=status.HTTP_201_CREATED, dependencies=[settings_page])
def create_user(
    request: CreateUserRequest,
    scope: TenantScope = Depends(user_managers),
    db=Depends(get_db)
):
    try:
        return user_service.create_user(db, scope, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.get("/users/me/page-access", response_model=PageAccessResponse)
def my_page_access(scope: TenantScope = Depends(get_tenant_scope), db=Depends(get_db)):
    """Caller's page flags and the admin paths they unlock"""
    try:
        return user_service.get_page_access(db, scope)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.put("/users/{user_id}", dependencies=[settings_page])
def update_user(
    user_id: str,
    request: UpdateUserRequest,
    scope: TenantScope = Depends(user_managers),
    db=Depends(get_db)
):
    try:
        return user_service.update_user(db, scope, user_id, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.delete("/users/{user_id}", dependencies=[settings_page])
def delete_user(user_id: str, scope: TenantScope = Depends(user_managers), db=Depends(get_db)):
    try:
        return user_service.delete_user(db, scope, user_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.put("/users/{user_id}/page-access", dependencies=[settings_page])
def update_page_access(
    user_id: str,
    flags: Dict[str, Any] = Body(...),
    scope: TenantScope = Depends(user_managers),
    db=Depends(get_db)
):
    """Partial update of a member's page flags, e.g. {"reports:true": false}"""
    try:
        return user_service.update_page_access(db, scope, user_id, flags)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/users/page-access/backfill", status_code=status.HTTP_202_ACCEPTED)
def backfill(
    background_tasks: BackgroundTasks,
    scope: TenantScope = Depends(admin_only),
    db=Depends(get_db)
):
    """
    Give default page flags to users created before flags existed

    Runs in the background over the caller's tenant only; safe to repeat.
    """
    try:
        background_tasks.add_task(backfill_page_access, db, scope.owner_id)
        logger.info(f"Page access backfill scheduled by {scope.user_id}")
        return {"message": "Page access backfill started"}
    except Exception as e:
        raise server_error("Failed to start page access backfill", e)
