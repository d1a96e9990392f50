# visitrack/api/routes/visitor_dataset.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from typing import Optional
from loguru import logger

from ..dependencies import get_db, require_page_access
from ..errors import server_error
from ...core.page_access import PageKey
from ...middleware.tenant import TenantScope
from ...models.errors import ImportErrorResponse
from ...models.visitor_dataset import VisitorDatasetRequest, VisitorLookupRequest
from ...services.visitor_dataset_service import import_rejection, visitor_dataset_service

router = APIRouter()

visitors_page = require_page_access(PageKey.VISITORS)

import_responses = {400: {"model": ImportErrorResponse}, 413: {"model": ImportErrorResponse}}


def read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None or not file.filename:
        raise import_rejection("No file uploaded")
    try:
        return file.file.read()
    finally:
        file.file.close()


@router.get("/visitor-dataset")
def get_visitor_dataset(
    email: Optional[str] = Query(None),
    all_records: Optional[str] = Query(None, alias="all"),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    scope: TenantScope = Depends(visitors_page),
    db=Depends(get_db)
):
    """Single record by email, or the paginated listing with ?all=true"""
    try:
        if all_records == "true":
            return visitor_dataset_service.list_records(db, scope, page, limit, search)
        return visitor_dataset_service.get_by_email(db, scope, email)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/visitor-dataset")
def upsert_visitor_dataset(
    request: VisitorDatasetRequest,
    response: Response,
    scope: TenantScope = Depends(visitors_page),
    db=Depends(get_db)
):
    try:
        status_code, body = visitor_dataset_service.upsert_record(db, scope, request)
        response.status_code = status_code
        return body
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/visitor-dataset/lookup")
def lookup_visitor(request: VisitorLookupRequest, db=Depends(get_db)):
    """Prefill data for the public registration form"""
    try:
        return visitor_dataset_service.lookup(db, request)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Internal server error", e)


@router.post("/visitor-dataset/import", responses=import_responses)
def import_visitor_dataset(
    file: Optional[UploadFile] = File(None),
    scope: TenantScope = Depends(visitors_page),
    db=Depends(get_db)
):
    """Import a CSV or Excel file using automatic header mapping"""
    try:
        content = read_upload(file)
        logger.info(f"Import of {file.filename} ({len(content)} bytes) for owner {scope.owner_id}")
        return visitor_dataset_service.import_file(db, scope, content, file.filename)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Failed to import data", e)


@router.post("/visitor-dataset/import-confirm", responses=import_responses)
def import_visitor_dataset_with_mappings(
    file: Optional[UploadFile] = File(None),
    column_mappings: Optional[str] = Form(None, alias="columnMappings"),
    scope: TenantScope = Depends(visitors_page),
    db=Depends(get_db)
):
    """Import a CSV or Excel file using the column mappings chosen in the UI"""
    try:
        content = read_upload(file)
        logger.info(f"Mapped import of {file.filename} ({len(content)} bytes) for owner {scope.owner_id}")
        return visitor_dataset_service.import_with_mappings(db, scope, content, file.filename, column_mappings)
    except HTTPException:
        raise
    except Exception as e:
        raise server_error("Failed to import data", e)
