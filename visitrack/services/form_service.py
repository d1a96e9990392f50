# visitrack/services/form_service.py
from typing import Any, Dict, List

from fastapi import HTTPException

from ..config.logging_config import log_tenant_action
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.forms import FormCreateRequest, FormField, FormUpdateRequest
from ..utilities.helpers.data_formatters import serialize_document
from ..utilities.helpers.date_utils import utc_now
from .event_service import event_service
from .user_service import user_service


class FormService:
    """Registration forms, one per event"""

    @staticmethod
    def _field_documents(fields: List[FormField]) -> List[Dict[str, Any]]:
        for field in fields:
            if not field.id or not field.type or not field.label:
                raise HTTPException(400, "Each field must have id, type, and label")
        return [field.to_document() for field in fields]

    @staticmethod
    def _ensure_single_form(db, scope: TenantScope, event: Dict[str, Any], exclude_id=None):
        query = scope.filter({"eventId": str(event["_id"])})
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}

        if db.forms.find_one(query):
            raise HTTPException(
                400,
                f'A form already exists for the event "{event.get("eventName")}". Each event can have only one form.'
            )

    def get_scoped_form(self, db, scope: TenantScope, form_id: str) -> Dict[str, Any]:
        object_id = ValidationMiddleware.validate_object_id(form_id, "form ID")
        form = db.forms.find_one(scope.filter({"_id": object_id}))
        if not form:
            raise HTTPException(404, "Form not found or access denied")
        return form

    def list_forms(self, db, scope: TenantScope) -> List[Dict[str, Any]]:
        forms = db.forms.find(scope.filter()).sort("createdAt", -1)
        return [serialize_document(form) for form in forms]

    def create_form(self, db, scope: TenantScope, request: FormCreateRequest) -> Dict[str, Any]:
        if not request.form_name or not request.form_name.strip() or not request.event_id or request.fields is None:
            raise HTTPException(400, "Form name, event ID, and fields are required")

        fields = self._field_documents(request.fields)
        event = event_service.get_scoped_event(db, scope, request.event_id)
        self._ensure_single_form(db, scope, event)

        creator = user_service.get_scoped_user(db, scope, scope.user_id, not_found="User not found")

        now = utc_now()
        form = scope.stamp({
            "formName": request.form_name.strip(),
            "eventId": str(event["_id"]),
            "eventName": event.get("eventName"),
            "fields": fields,
            "isActive": True,
            "submissionCount": 0,
            "createdBy": {
                "userId": str(creator["_id"]),
                "username": creator.get("username"),
                "email": creator.get("email"),
                "role": creator.get("role"),
            },
            "createdAt": now,
            "updatedAt": now,
        })

        result = db.forms.insert_one(form)
        form["_id"] = result.inserted_id

        log_tenant_action(scope.owner_id, "create_form", form=str(result.inserted_id), event=form["eventId"])
        return {"message": "Form created successfully", "form": serialize_document(form)}

    def update_form(self, db, scope: TenantScope, form_id: str, request: FormUpdateRequest) -> Dict[str, Any]:
        form = self.get_scoped_form(db, scope, form_id)

        changes: Dict[str, Any] = {}
        if request.form_name is not None:
            if not request.form_name.strip():
                raise HTTPException(400, "Form name cannot be empty")
            changes["formName"] = request.form_name.strip()

        if request.event_id is not None and request.event_id != form.get("eventId"):
            event = event_service.get_scoped_event(db, scope, request.event_id)
            self._ensure_single_form(db, scope, event, exclude_id=form["_id"])
            changes["eventId"] = str(event["_id"])
            changes["eventName"] = event.get("eventName")

        if request.fields is not None:
            changes["fields"] = self._field_documents(request.fields)

        if request.is_active is not None:
            changes["isActive"] = request.is_active

        changes["updatedAt"] = utc_now()
        db.forms.update_one(scope.filter({"_id": form["_id"]}), {"$set": changes})
        updated = db.forms.find_one(scope.filter({"_id": form["_id"]}))

        log_tenant_action(scope.owner_id, "update_form", form=form_id)
        return {"message": "Form updated successfully", "form": serialize_document(updated)}

    def delete_form(self, db, scope: TenantScope, form_id: str) -> Dict[str, Any]:
        object_id = ValidationMiddleware.validate_object_id(form_id, "form ID")
        result = db.forms.delete_one(scope.filter({"_id": object_id}))
        if result.deleted_count == 0:
            raise HTTPException(404, "Form not found or access denied")

        log_tenant_action(scope.owner_id, "delete_form", form=form_id)
        return {"message": "Form deleted successfully"}

    def get_event_form(self, db, event_id: str) -> Dict[str, Any]:
        """Active form for an event, served to the public registration page"""
        if not event_id or not event_id.strip():
            raise HTTPException(400, "Valid event ID is required")

        form = db.forms.find_one({"eventId": event_id.strip(), "isActive": True})
        if not form:
            raise HTTPException(404, "Registration form not found for this event")
        return serialize_document(form, hidden=("createdBy", "ownerId"))


# Global service instance
form_service = FormService()
