# visitrack/services/message_template_service.py
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import HTTPException

from ..config.logging_config import log_tenant_action
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.message_templates import MessageTemplateRequest
from ..utilities.helpers.data_formatters import serialize_document
from ..utilities.helpers.date_utils import utc_now


class MessageTemplateService:
    """Reusable subject/body pairs for visitor messages, one set per tenant"""

    @staticmethod
    def _template_fields(request: MessageTemplateRequest) -> Dict[str, str]:
        ValidationMiddleware.require_fields(
            request.model_dump(),
            ["template_name", "subject", "message"],
            "Template name, subject, and message are required"
        )
        return {
            "templateName": request.template_name.strip(),
            "subject": request.subject.strip(),
            "message": request.message.strip(),
        }

    @staticmethod
    def _ensure_unique_name(db, scope: TenantScope, name: str, exclude_id: Optional[ObjectId] = None) -> None:
        query = {"templateName": name}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        if db.messageTemplates.find_one(scope.filter(query)):
            raise HTTPException(400, "Template name already exists")

    def get_scoped_template(self, db, scope: TenantScope, template_id: Optional[str]) -> Dict[str, Any]:
        if not template_id or not ObjectId.is_valid(template_id.strip()):
            raise HTTPException(400, "Invalid template ID")

        template = db.messageTemplates.find_one(scope.filter({"_id": ObjectId(template_id.strip())}))
        if not template:
            raise HTTPException(404, "Template not found")
        return template

    def list_templates(self, db, scope: TenantScope) -> List[Dict[str, Any]]:
        templates = db.messageTemplates.find(scope.filter()).sort("updatedAt", -1)
        return [serialize_document(template) for template in templates]

    def get_template(self, db, scope: TenantScope, template_id: str) -> Dict[str, Any]:
        return serialize_document(self.get_scoped_template(db, scope, template_id))

    def create_template(self, db, scope: TenantScope, request: MessageTemplateRequest) -> Dict[str, Any]:
        fields = self._template_fields(request)
        self._ensure_unique_name(db, scope, fields["templateName"])

        now = utc_now()
        result = db.messageTemplates.insert_one(scope.stamp({**fields, "createdAt": now, "updatedAt": now}))

        log_tenant_action(scope.owner_id, "create_message_template", template=str(result.inserted_id))
        return {"message": "Template created successfully", "templateId": str(result.inserted_id)}

    def update_template(self, db, scope: TenantScope, template_id: str,
                        request: MessageTemplateRequest) -> Dict[str, Any]:
        template = self.get_scoped_template(db, scope, template_id)
        fields = self._template_fields(request)
        self._ensure_unique_name(db, scope, fields["templateName"], exclude_id=template["_id"])

        db.messageTemplates.update_one(
            scope.filter({"_id": template["_id"]}),
            {"$set": {**fields, "updatedAt": utc_now()}}
        )

        log_tenant_action(scope.owner_id, "update_message_template", template=str(template["_id"]))
        return {"message": "Template updated successfully"}

    def delete_template(self, db, scope: TenantScope, template_id: str) -> Dict[str, Any]:
        template = self.get_scoped_template(db, scope, template_id)
        db.messageTemplates.delete_one(scope.filter({"_id": template["_id"]}))

        log_tenant_action(scope.owner_id, "delete_message_template", template=str(template["_id"]))
        return {"message": "Template deleted successfully"}


# Global service instance
message_template_service = MessageTemplateService()
