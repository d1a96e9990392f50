# visitrack/services/visitor_service.py
from typing import Any, Dict, Optional

from fastapi import HTTPException
from loguru import logger
from pymongo.errors import PyMongoError

from ..config.logging_config import log_tenant_action
from ..core.entry_types import EntryType, VisitorStatus, entry_log_filter, normalize_entry_type
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.visitors import CheckVisitorRequest, VisitorRegistrationRequest
from ..utilities.helpers.data_formatters import build_pagination_response, serialize_document
from ..utilities.helpers.date_utils import parse_date_string, today_string, utc_now
from ..utilities.helpers.query_helpers import VISITOR_SEARCH_FIELDS, paged, resolve_pagination

# Keys a registration body may carry that never become form answers
RESERVED_REGISTRATION_KEYS = {
    "_id", "ownerId", "eventName", "eventLocation", "eventStartDate", "eventEndDate",
    "status", "entryType", "createdAt", "updatedAt", "lastScannedAt", "scannedBy",
}


class VisitorService:
    """Registrations, check-ins and the entry log"""

    @staticmethod
    def _label_answers(answers: Dict[str, Any], form: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Re-key custom form answers from field id to field label"""
        labels = {}
        if form:
            labels = {
                field.get("id"): field.get("label")
                for field in form.get("fields", [])
                if not field.get("isDefault") and field.get("id") and field.get("label")
            }

        labelled = {}
        for key, value in answers.items():
            if key in RESERVED_REGISTRATION_KEYS:
                continue
            labelled[labels.get(key, key)] = value
        return labelled

    @staticmethod
    def _registration_date(value: Optional[str]) -> str:
        if value:
            try:
                return parse_date_string(value).strftime("%Y-%m-%d")
            except ValueError:
                raise HTTPException(400, "Invalid visitor registration date")
        return today_string()

    def get_scoped_visitor(self, db, scope: TenantScope, visitor_id: Optional[str]) -> Dict[str, Any]:
        if visitor_id is None or not str(visitor_id).strip():
            raise HTTPException(400, "Visitor ID is required")

        object_id = ValidationMiddleware.validate_object_id(visitor_id, "visitor ID")
        visitor = db.visitors.find_one(scope.filter({"_id": object_id}))
        if not visitor:
            raise HTTPException(404, "Visitor not found or access denied")
        return visitor

    def register_visitor(self, db, request: VisitorRegistrationRequest) -> Dict[str, Any]:
        """Public registration; the tenant comes from the event"""
        ValidationMiddleware.require_fields(
            request.model_dump(),
            ["event_id", "full_name", "email", "phone_number"],
            "Event ID, full name, email, and phone number are required"
        )
        email = ValidationMiddleware.validate_email(request.email)
        event_object_id = ValidationMiddleware.validate_object_id(request.event_id, "event ID")

        event = db.events.find_one({"_id": event_object_id})
        if not event:
            raise HTTPException(404, "Event not found")

        event_id = str(event["_id"])
        owner_id = event.get("ownerId")
        phone_number = request.phone_number.strip()

        existing = db.visitors.find_one({
            "eventId": event_id,
            "ownerId": owner_id,
            "$or": [{"email": email}, {"phoneNumber": phone_number}],
        })
        if existing:
            raise HTTPException(409, "You have already registered for this event with this phone number or email")

        form = db.forms.find_one({"eventId": event_id, "ownerId": owner_id})
        answers = self._label_answers(request.additional_fields(), form)

        now = utc_now()
        visitor = {
            **answers,
            "ownerId": owner_id,
            "eventId": event_id,
            "eventName": event.get("eventName"),
            "eventLocation": event.get("eventLocation"),
            "eventStartDate": event.get("eventStartDate"),
            "eventEndDate": event.get("eventEndDate"),
            "fullName": request.full_name.strip(),
            "email": email,
            "phoneNumber": phone_number,
            "company": request.company or "",
            "city": request.city or "",
            "state": request.state or "",
            "country": request.country or "",
            "pincode": request.pincode or "",
            "source": request.source or "Website",
            "visitorRegistrationDate": self._registration_date(request.visitor_registration_date),
            "status": VisitorStatus.REGISTRATION.value,
            "createdAt": now,
            "updatedAt": now,
        }

        result = db.visitors.insert_one(visitor)

        try:
            db.events.update_one({"_id": event["_id"]}, {"$inc": {"visitorCount": 1}})
        except PyMongoError as e:
            # Registration stands even when the counter update fails
            logger.warning(f"visitorCount increment failed for event {event_id}: {e}")

        log_tenant_action(owner_id, "register_visitor", visitor=str(result.inserted_id), event=event_id)
        return {
            "message": "Registration completed successfully",
            "visitorId": str(result.inserted_id),
            "eventName": event.get("eventName"),
            "status": visitor["status"],
        }

    def check_visitor(self, db, request: CheckVisitorRequest) -> Dict[str, Any]:
        """Public lookup of an existing registration by email, within the event's tenant"""
        ValidationMiddleware.require_fields(
            request.model_dump(), ["event_id", "email"], "Email and event ID are required"
        )
        email = ValidationMiddleware.validate_email(request.email)
        event_object_id = ValidationMiddleware.validate_object_id(request.event_id, "event ID")

        event = db.events.find_one({"_id": event_object_id})
        if not event:
            return {"isRegistered": False}

        visitor = db.visitors.find_one({
            "eventId": str(event["_id"]),
            "ownerId": event.get("ownerId"),
            "email": email,
        })
        if not visitor:
            return {"isRegistered": False}

        return {
            "isRegistered": True,
            "visitorData": {
                "visitorId": str(visitor["_id"]),
                "fullName": visitor.get("fullName"),
                "email": visitor.get("email"),
                "phoneNumber": visitor.get("phoneNumber"),
                "company": visitor.get("company") or "",
                "city": visitor.get("city") or "",
                "state": visitor.get("state") or "",
                "country": visitor.get("country") or "",
                "pincode": visitor.get("pincode") or "",
                "eventName": visitor.get("eventName"),
                "eventLocation": visitor.get("eventLocation"),
                "eventStartDate": visitor.get("eventStartDate"),
                "eventEndDate": visitor.get("eventEndDate"),
                "eventStartTime": event.get("eventStartTime") or "",
                "eventEndTime": event.get("eventEndTime") or "",
                "registrationDate": visitor.get("visitorRegistrationDate"),
                "status": visitor.get("status"),
            },
        }

    def list_visitors(self, db, scope: TenantScope, page: int = 1, limit: int = None,
                      search: str = None, event_id: str = None, status: str = None) -> Dict[str, Any]:
        page, limit, skip = resolve_pagination(page, limit)

        extra = {}
        if event_id and event_id != "all":
            extra["eventId"] = event_id
        if status and status != "all":
            extra["status"] = status

        query = scope.search_filter(search, VISITOR_SEARCH_FIELDS, extra)
        total_count = db.visitors.count_documents(query)
        visitors = paged(db.visitors.find(query).sort("createdAt", -1), skip, limit, total_count)

        return build_pagination_response(
            [serialize_document(visitor) for visitor in visitors],
            total_count, page, limit, items_key="visitors"
        )

    def entry_log(self, db, scope: TenantScope, page: int = 1, limit: int = None) -> Dict[str, Any]:
        """Visitors checked in manually or by QR, most recent first"""
        page, limit, skip = resolve_pagination(page, limit)

        query = scope.filter(entry_log_filter())
        total_count = db.visitors.count_documents(query)
        visitors = paged(
            db.visitors.find(query).sort([("updatedAt", -1), ("createdAt", -1)]),
            skip, limit, total_count
        )

        return build_pagination_response(
            [serialize_document(visitor) for visitor in visitors],
            total_count, page, limit, items_key="visitors"
        )

    @staticmethod
    def _entry_log_record(scope: TenantScope, visitor: Dict[str, Any], entry_type: EntryType, now) -> Dict[str, Any]:
        return scope.stamp({
            "visitorId": visitor["_id"],
            "visitorName": visitor.get("fullName"),
            "visitorEmail": visitor.get("email"),
            "eventId": visitor.get("eventId"),
            "eventName": visitor.get("eventName"),
            "entryType": entry_type.value,
            "entryBy": scope.user_id,
            "entryByUsername": scope.username,
            "previousEntryType": visitor.get("entryType") or "None",
            "previousStatus": visitor.get("status"),
            "newStatus": VisitorStatus.VISITED.value,
            "entryDate": now,
            "createdAt": now,
        })

    def manual_entry(self, db, scope: TenantScope, visitor_id: Optional[str]) -> Dict[str, Any]:
        visitor = self.get_scoped_visitor(db, scope, visitor_id)

        now = utc_now()
        db.visitors.update_one(
            scope.filter({"_id": visitor["_id"]}),
            {"$set": {
                "entryType": EntryType.MANUAL.value,
                "status": VisitorStatus.VISITED.value,
                "updatedAt": now,
            }}
        )
        db.entryLogs.insert_one(self._entry_log_record(scope, visitor, EntryType.MANUAL, now))

        log_tenant_action(scope.owner_id, "manual_entry", visitor=str(visitor["_id"]), by=scope.user_id)
        return {
            "message": "Entry type updated successfully",
            "visitorId": str(visitor["_id"]),
            "visitorName": visitor.get("fullName"),
            "previousEntryType": visitor.get("entryType"),
            "newEntryType": EntryType.MANUAL.value,
            "previousStatus": visitor.get("status"),
            "newStatus": VisitorStatus.VISITED.value,
        }

    def qr_entry(self, db, scope: TenantScope, visitor_id: Optional[str], qr_data: Optional[str] = None) -> Dict[str, Any]:
        """Check a visitor in from a scanned badge; repeat scans change nothing"""
        visitor = self.get_scoped_visitor(db, scope, visitor_id)
        visitor_id = str(visitor["_id"])

        summary = {
            "visitorId": visitor_id,
            "visitorName": visitor.get("fullName"),
            "visitorEmail": visitor.get("email"),
            "visitorPhone": visitor.get("phoneNumber"),
            "visitorCompany": visitor.get("company"),
            "eventName": visitor.get("eventName"),
            "eventLocation": visitor.get("eventLocation"),
            "previousEntryType": visitor.get("entryType") or "None",
            "newEntryType": EntryType.QR.value,
            "previousStatus": visitor.get("status"),
        }

        if normalize_entry_type(visitor.get("entryType")) == EntryType.QR:
            return {
                **summary,
                "message": f"{visitor.get('fullName')} already checked in via QR code",
                "newStatus": visitor.get("status"),
                "alreadyCheckedIn": True,
            }

        now = utc_now()
        db.visitors.update_one(
            scope.filter({"_id": visitor["_id"]}),
            {"$set": {
                "entryType": EntryType.QR.value,
                "status": VisitorStatus.VISITED.value,
                "lastScannedAt": now,
                "scannedBy": scope.user_id,
                "updatedAt": now,
            }}
        )

        record = self._entry_log_record(scope, visitor, EntryType.QR, now)
        record["qrData"] = qr_data or None
        record["scanMethod"] = "QR Scanner"
        db.entryLogs.insert_one(record)

        db.scanStats.update_one(
            scope.filter({"date": today_string()}),
            {
                "$inc": {"totalScans": 1, "qrScans": 1},
                "$set": {"lastScanAt": now, "lastScannedBy": scope.user_id},
            },
            upsert=True
        )

        log_tenant_action(scope.owner_id, "qr_entry", visitor=visitor_id, by=scope.user_id)
        return {
            **summary,
            "message": f"{visitor.get('fullName')} successfully checked in via QR code",
            "newStatus": VisitorStatus.VISITED.value,
            "alreadyCheckedIn": False,
            "scanTimestamp": now.isoformat(),
        }


# Global service instance
visitor_service = VisitorService()
