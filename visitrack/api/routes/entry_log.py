# visitrack/api/routes/entry_log.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.visitors import ManualEntryRequest, QrEntryRequest
from ...services.visitor_service import visitor_service

router = APIRouter()


@router.get("/entry-log")
def entry_log(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    scope: TenantScope = Depends(require_page_access(PageKey.ENTRY_LOG)),
    db=Depends(get_db)
):
    """Checked-in visitors, most recent first"""
    try:
        return visitor_service.entry_log(db, scope, page, limit)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/entry-log/manual-entry")
def manual_entry(
    request: ManualEntryRequest,
    scope: TenantScope = Depends(require_page_access(PageKey.ENTRY_LOG)),
    db=Depends(get_db)
):
    try:
        return visitor_service.manual_entry(db, scope, request.visitor_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/scanner/qr-entry")
def qr_entry(
    request: QrEntryRequest,
    scope: TenantScope = Depends(require_page_access(PageKey.SCANNER)),
    db=Depends(get_db)
):
    """Check in from a scanned badge QR code"""
    try:
        return visitor_service.qr_entry(db, scope, request.visitor_id, request.qr_data)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error while processing QR code", e)


@router.post("/scanner/qr-entry/{visitor_id}")
def qr_entry_by_path(
    visitor_id: str,
    scope: TenantScope = Depends(require_page_access(PageKey.SCANNER)),
    db=Depends(get_db)
):
    """Same check-in for scanners that put the visitor id in the URL"""
    try:
        return visitor_service.qr_entry(db, scope, visitor_id)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error while processing QR code", e)
