# visitrack/services/visitor_dataset_service.py
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException
from loguru import logger

from ..config.logging_config import log_tenant_action
from ..config.setting import settings
from ..core import importer
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.visitor_dataset import VisitorDatasetRequest, VisitorLookupRequest
from ..utilities.helpers.data_formatters import serialize_document, total_pages_for
from ..utilities.helpers.date_utils import utc_now
from ..utilities.helpers.query_helpers import VISITOR_DATASET_SEARCH_FIELDS, paged, resolve_pagination

# Contact fields handed to the public registration page
LOOKUP_FIELDS = ["fullName", "phoneNumber", "company", "city", "state", "country", "pincode"]


def import_rejection(message: str, status_code: int = 400, total: int = 0) -> HTTPException:
    return HTTPException(
        status_code,
        {"message": message, "imported": 0, "total": total, "skipped": total},
    )


class VisitorDatasetService:
    """Reusable visitor contact data per tenant"""

    def get_by_email(self, db, scope: TenantScope, email: Optional[str]) -> Dict[str, Any]:
        email = ValidationMiddleware.validate_email(email)
        record = db.visitordataset.find_one(scope.filter({"email": email}))
        if not record:
            raise HTTPException(404, "Visitor data not found")
        return serialize_document(record)

    def list_records(self, db, scope: TenantScope, page: int = 1, limit: int = None,
                     search: str = None) -> Dict[str, Any]:
        page, limit, skip = resolve_pagination(page, limit, default_limit=settings.DATASET_PAGE_SIZE)

        query = scope.search_filter(search, VISITOR_DATASET_SEARCH_FIELDS)
        total_count = db.visitordataset.count_documents(query)
        records = paged(db.visitordataset.find(query).sort("updatedAt", -1), skip, limit, total_count)
        total_pages = total_pages_for(total_count, limit)

        return {
            "visitorDataset": [serialize_document(record) for record in records],
            "pagination": {
                "current": page,
                "total": total_pages,
                "count": total_count,
                "limit": limit,
                "hasNextPage": page < total_pages,
            },
        }

    def upsert_record(self, db, scope: TenantScope, request: VisitorDatasetRequest) -> Tuple[int, Dict[str, Any]]:
        """Create or update by (email, tenant); returns (status code, body)"""
        if not scope.owns(request.owner_id):
            logger.warning(f"ownerId mismatch on dataset write by {scope.user_id}")
            raise HTTPException(403, "Tenant access denied")

        ValidationMiddleware.require_fields(
            request.model_dump(),
            ["full_name", "email", "phone_number"],
            "Full name, email, and phone number are required"
        )
        email = ValidationMiddleware.validate_email(request.email)

        now = utc_now()
        record = scope.stamp({
            "fullName": request.full_name.strip(),
            "email": email,
            "phoneNumber": request.phone_number.strip(),
            "company": request.company or "",
            "city": request.city or "",
            "state": request.state or "",
            "country": request.country or "",
            "pincode": request.pincode or "",
            "updatedAt": now,
        })

        existing = db.visitordataset.find_one(scope.filter({"email": email}))
        if existing:
            db.visitordataset.update_one(scope.filter({"_id": existing["_id"]}), {"$set": record})
            log_tenant_action(scope.owner_id, "update_dataset_record", email=email)
            return 200, {
                "message": "Visitor data updated successfully",
                "data": serialize_document({**existing, **record}),
            }

        record["createdAt"] = now
        result = db.visitordataset.insert_one(record)
        record["_id"] = result.inserted_id

        log_tenant_action(scope.owner_id, "create_dataset_record", email=email)
        return 201, {"message": "Visitor data created successfully", "data": serialize_document(record)}

    def lookup(self, db, request: VisitorLookupRequest) -> Dict[str, Any]:
        """Public prefill for a registration form; tenant comes from the event"""
        if not request.email or not request.event_id:
            raise HTTPException(400, "Email and event ID are required")

        email = ValidationMiddleware.validate_email(request.email)
        event_id = ValidationMiddleware.validate_object_id(request.event_id, "event ID")

        event = db.events.find_one({"_id": event_id}, {"ownerId": 1})
        if not event:
            raise HTTPException(404, "Event not found")

        record = db.visitordataset.find_one({"email": email, "ownerId": event.get("ownerId")})
        if not record:
            raise HTTPException(404, "No existing visitor data found")

        return {
            "found": True,
            "data": {field: record.get(field) or "" for field in LOOKUP_FIELDS},
        }

    def _insert_records(self, db, scope: TenantScope, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        records = importer.build_dataset_records(rows, scope.owner_id, utc_now())
        result = importer.ImportResult(total=len(rows), skipped=len(rows) - len(records))

        if records:
            inserted = db.visitordataset.insert_many(records)
            result.imported = len(inserted.inserted_ids)

        log_tenant_action(scope.owner_id, "import_dataset", imported=result.imported,
                          total=result.total, skipped=result.skipped)
        return {
            "message": f"Successfully imported {result.imported} records",
            **result.model_dump(),
        }

    def _parse_upload(self, content: bytes, filename: Optional[str]) -> List[Dict[str, Any]]:
        if len(content) > settings.MAX_UPLOAD_SIZE_BYTES:
            raise import_rejection("File too large", status_code=413)

        try:
            rows = importer.parse_spreadsheet(content, filename, tmp_dir=settings.UPLOAD_TMP_DIR)
        except importer.SpreadsheetError as e:
            logger.info(f"Rejected upload {filename}: {e}")
            raise import_rejection(str(e))

        if not rows:
            raise import_rejection("No valid data found in the file")
        return rows

    def import_file(self, db, scope: TenantScope, content: bytes, filename: Optional[str]) -> Dict[str, Any]:
        """Import with automatic header mapping"""
        rows = [importer.normalize_headers(row) for row in self._parse_upload(content, filename)]
        return self._insert_records(db, scope, rows)

    def import_with_mappings(self, db, scope: TenantScope, content: bytes, filename: Optional[str],
                             column_mappings: Optional[str]) -> Dict[str, Any]:
        """Import with client supplied column mappings"""
        try:
            mappings = importer.parse_column_mappings(column_mappings)
        except ValueError as e:
            raise import_rejection(str(e))

        rows = [importer.apply_column_mappings(row, mappings) for row in self._parse_upload(content, filename)]
        response = self._insert_records(db, scope, rows)
        response["columnMappings"] = mappings
        return response


# Global service instance
visitor_dataset_service = VisitorDatasetService()
