# visitrack/services/event_service.py
from typing import Any, Dict, List

from fastapi import HTTPException
from loguru import logger

from ..config.logging_config import log_tenant_action
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.events import EventCreateRequest, EventUpdateRequest
from ..utilities.helpers.data_formatters import serialize_document
from ..utilities.helpers.date_utils import to_day, utc_now
from .user_service import user_service

REQUIRED_EVENT_FIELDS = [
    "event_name", "status", "event_start_date", "event_end_date", "event_start_time",
    "event_end_time", "event_location", "registration_deadline", "event_information",
]

# Fields a public registration page may see
PUBLIC_EVENT_FIELDS = [
    "_id", "eventName", "status", "eventStartDate", "eventEndDate", "eventStartTime",
    "eventEndTime", "eventLocation", "registrationDeadline", "eventInformation", "eventBanner",
]


class EventService:

    @staticmethod
    def validate_schedule(start_date, end_date, registration_deadline):
        """Dates must parse, end on or after start, deadline not after start"""
        try:
            start = to_day(start_date)
            end = to_day(end_date)
            deadline = to_day(registration_deadline)
        except ValueError as e:
            raise HTTPException(400, str(e))

        if end < start:
            raise HTTPException(400, "End date cannot be before start date")

        if deadline > start:
            raise HTTPException(400, "Registration deadline must be before event start date")

    def get_scoped_event(self, db, scope: TenantScope, event_id: str) -> Dict[str, Any]:
        object_id = ValidationMiddleware.validate_object_id(event_id, "event ID")
        event = db.events.find_one(scope.filter({"_id": object_id}))
        if not event:
            raise HTTPException(404, "Event not found")
        return event

    def list_events(self, db, scope: TenantScope) -> List[Dict[str, Any]]:
        events = db.events.find(scope.filter()).sort("createdAt", -1)
        return [serialize_document(event) for event in events]

    def get_event(self, db, scope: TenantScope, event_id: str) -> Dict[str, Any]:
        return serialize_document(self.get_scoped_event(db, scope, event_id))

    def get_public_event(self, db, event_id: str) -> Dict[str, Any]:
        """Registration page view of one event, no tenant data"""
        object_id = ValidationMiddleware.validate_object_id(event_id, "event ID")
        event = db.events.find_one({"_id": object_id}, {field: 1 for field in PUBLIC_EVENT_FIELDS})
        if not event:
            raise HTTPException(404, "Event not found")
        return serialize_document(event)

    def create_event(self, db, scope: TenantScope, request: EventCreateRequest) -> Dict[str, Any]:
        ValidationMiddleware.require_fields(request.model_dump(), REQUIRED_EVENT_FIELDS, "All fields are required")
        self.validate_schedule(request.event_start_date, request.event_end_date, request.registration_deadline)

        creator = user_service.get_scoped_user(db, scope, scope.user_id, not_found="User not found")

        now = utc_now()
        event = scope.stamp({
            **request.model_dump(by_alias=True, exclude={"event_banner"}),
            "eventBanner": request.event_banner or None,
            "capacity": creator.get("capacity"),
            "visitorCount": 0,
            "createdBy": {
                "userId": str(creator["_id"]),
                "username": creator.get("username"),
                "email": creator.get("email"),
                "role": creator.get("role"),
            },
            "createdAt": now,
            "updatedAt": now,
        })

        result = db.events.insert_one(event)
        event["_id"] = result.inserted_id

        log_tenant_action(scope.owner_id, "create_event", event=str(result.inserted_id), by=scope.user_id)
        return {
            "message": "Event created successfully",
            "eventId": str(result.inserted_id),
            "event": serialize_document(event),
        }

    def update_event(self, db, scope: TenantScope, event_id: str, request: EventUpdateRequest) -> Dict[str, Any]:
        existing = self.get_scoped_event(db, scope, event_id)

        # ownerId and _id are not model fields so they can never be written here
        changes = request.model_dump(by_alias=True, exclude_unset=True)
        if not changes:
            raise HTTPException(400, "No fields to update")

        merged = {**existing, **changes}
        if {"eventStartDate", "eventEndDate", "registrationDeadline"} & changes.keys():
            self.validate_schedule(merged.get("eventStartDate"), merged.get("eventEndDate"),
                                   merged.get("registrationDeadline"))

        now = utc_now()
        changes["updatedAt"] = now
        changes["lastUpdatedBy"] = {
            "userId": scope.user_id,
            "username": scope.username,
            "email": scope.account.email,
            "updatedAt": now,
        }

        db.events.update_one(scope.filter({"_id": existing["_id"]}), {"$set": changes})
        updated = db.events.find_one(scope.filter({"_id": existing["_id"]}))

        log_tenant_action(scope.owner_id, "update_event", event=event_id, by=scope.user_id)
        return {"message": "Event updated successfully", "event": serialize_document(updated)}

    def delete_event(self, db, scope: TenantScope, event_id: str) -> Dict[str, Any]:
        object_id = ValidationMiddleware.validate_object_id(event_id, "event ID")
        result = db.events.delete_one(scope.filter({"_id": object_id}))
        if result.deleted_count == 0:
            logger.info(f"Delete of event {event_id} matched nothing for owner {scope.owner_id}")
            raise HTTPException(404, "Event not found")

        log_tenant_action(scope.owner_id, "delete_event", event=event_id, by=scope.user_id)
        return {"message": "Event deleted successfully"}


# Global service instance
event_service = EventService()
