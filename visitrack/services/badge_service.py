# visitrack/services/badge_service.py
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from ..config.logging_config import log_tenant_action
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.badges import BadgeCreateRequest
from ..utilities.helpers.data_formatters import serialize_document
from ..utilities.helpers.date_utils import utc_now
from .event_service import event_service
from .user_service import user_service


class BadgeService:

    def list_badges(self, db, scope: TenantScope) -> List[Dict[str, Any]]:
        badges = db.badges.find(scope.filter()).sort("createdAt", -1)
        return [serialize_document(badge) for badge in badges]

    def create_badge(self, db, scope: TenantScope, request: BadgeCreateRequest) -> Dict[str, Any]:
        ValidationMiddleware.require_fields(
            request.model_dump(),
            ["badge_name", "badge_image", "event_id"],
            "Badge name, badge image, and event selection are required"
        )

        event = event_service.get_scoped_event(db, scope, request.event_id)
        creator = user_service.get_scoped_user(db, scope, scope.user_id, not_found="User not found")

        now = utc_now()
        badge = scope.stamp({
            "badgeName": request.badge_name.strip(),
            "badgeImage": request.badge_image,
            "eventName": event.get("eventName"),
            "eventId": str(event["_id"]),
            "createdBy": {
                "userId": str(creator["_id"]),
                "username": creator.get("username"),
                "email": creator.get("email"),
                "role": creator.get("role"),
            },
            "createdAt": now,
            "updatedAt": now,
        })

        result = db.badges.insert_one(badge)
        badge["_id"] = result.inserted_id

        log_tenant_action(scope.owner_id, "create_badge", badge=str(result.inserted_id), event=badge["eventId"])
        return {"message": "Badge created successfully", "badge": serialize_document(badge)}

    def delete_badge(self, db, scope: TenantScope, badge_id: Optional[str]) -> Dict[str, Any]:
        if not badge_id:
            raise HTTPException(400, "Valid badge ID is required")
        object_id = ValidationMiddleware.validate_object_id(badge_id, "badge ID")

        result = db.badges.delete_one(scope.filter({"_id": object_id}))
        if result.deleted_count == 0:
            raise HTTPException(404, "Badge not found or access denied")

        log_tenant_action(scope.owner_id, "delete_badge", badge=badge_id)
        return {"message": "Badge deleted successfully"}

    def get_event_badge(self, db, scope: TenantScope, event_id: str) -> Dict[str, Any]:
        ValidationMiddleware.validate_object_id(event_id, "event ID")
        badge = db.badges.find_one(scope.filter({"eventId": event_id.strip()}))
        if not badge:
            raise HTTPException(404, "Badge not found for this event")
        return serialize_document(badge)


# Global service instance
badge_service = BadgeService()
