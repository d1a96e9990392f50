# visitrack/services/user_service.py
from typing import Any, Dict, List

from bson import ObjectId
from fastapi import HTTPException
from loguru import logger

from ..config.logging_config import log_tenant_action
from ..core.page_access import (
    PageAccess, generate_default_page_access, get_accessible_pages, validate_page_access
)
from ..middleware.tenant import TenantScope
from ..middleware.validation import ValidationMiddleware
from ..models.users import ASSIGNABLE_ROLES, CreateUserRequest, UpdateUserRequest, UserRole
from ..utilities.helpers.data_formatters import serialize_user
from ..utilities.helpers.date_utils import utc_now
from .auth_service import auth_service


class UserService:
    """Team members inside one tenant"""

    @staticmethod
    def get_scoped_user(db, scope: TenantScope, user_id: str, not_found: str = "User not found or access denied") -> Dict[str, Any]:
        object_id = ValidationMiddleware.validate_object_id(user_id, "user ID")
        user = db.users.find_one(scope.filter({"_id": object_id}))
        if not user:
            raise HTTPException(404, not_found)
        return user

    @staticmethod
    def _check_duplicates(db, scope: TenantScope, username: str, email: str, exclude_id: ObjectId = None):
        query = scope.filter({"$or": [{"username": username}, {"email": email}]})
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}

        existing = db.users.find_one(query)
        if existing:
            field = "Username" if existing.get("username") == username else "Email"
            raise HTTPException(409, f"{field} already exists in your organization")

    def list_users(self, db, scope: TenantScope) -> List[Dict[str, Any]]:
        users = db.users.find(scope.filter()).sort("createdAt", -1)
        return [serialize_user(user) for user in users]

    def create_user(self, db, scope: TenantScope, request: CreateUserRequest) -> Dict[str, Any]:
        ValidationMiddleware.require_fields(
            request.model_dump(),
            ["full_name", "phone_number", "email", "username", "password", "role"],
            "All fields are required"
        )

        if request.role not in ASSIGNABLE_ROLES:
            raise HTTPException(400, "Invalid role. Must be sub-admin, manager, or staff")

        email = ValidationMiddleware.validate_email(request.email)
        ValidationMiddleware.validate_password(request.password)

        creator = self.get_scoped_user(db, scope, scope.user_id, not_found="Admin user not found")

        username = request.username.strip().lower()
        self._check_duplicates(db, scope, username, email)

        now = utc_now()
        new_user = scope.stamp({
            "fullName": request.full_name.strip(),
            "phoneNumber": request.phone_number.strip(),
            "email": email,
            "capacity": creator.get("capacity"),
            "username": username,
            "password": auth_service.hash_password(request.password),
            "role": request.role,
            "isActive": True,
            "emailVerified": False,
            "lastLoginAt": None,
            "createdAt": now,
            "updatedAt": now,
            **generate_default_page_access(),
        })

        result = db.users.insert_one(new_user)
        new_user["_id"] = result.inserted_id

        log_tenant_action(scope.owner_id, "create_user", user=str(result.inserted_id), role=request.role,
                          by=scope.user_id)
        return {"message": "User created successfully", "user": serialize_user(new_user)}

    def update_user(self, db, scope: TenantScope, user_id: str, request: UpdateUserRequest) -> Dict[str, Any]:
        ValidationMiddleware.require_fields(
            request.model_dump(),
            ["full_name", "phone_number", "email", "username", "role"],
            "All fields except password are required"
        )

        if request.role not in ASSIGNABLE_ROLES:
            raise HTTPException(400, "Invalid role")

        email = ValidationMiddleware.validate_email(request.email)

        target = self.get_scoped_user(db, scope, user_id)
        if target.get("role") == UserRole.ADMIN.value:
            raise HTTPException(403, "Cannot edit admin users")

        username = request.username.strip().lower()
        self._check_duplicates(db, scope, username, email, exclude_id=target["_id"])

        update = {
            "fullName": request.full_name.strip(),
            "phoneNumber": request.phone_number.strip(),
            "email": email,
            "username": username,
            "role": request.role,
            "updatedAt": utc_now(),
        }

        if request.password and request.password.strip():
            ValidationMiddleware.validate_password(request.password)
            update["password"] = auth_service.hash_password(request.password)

        db.users.update_one(scope.filter({"_id": target["_id"]}), {"$set": update})
        updated = db.users.find_one(scope.filter({"_id": target["_id"]}))

        log_tenant_action(scope.owner_id, "update_user", user=user_id, fields=",".join(update), by=scope.user_id)
        return {"message": "User updated successfully", "user": serialize_user(updated)}

    def delete_user(self, db, scope: TenantScope, user_id: str) -> Dict[str, Any]:
        target = self.get_scoped_user(db, scope, user_id)

        if str(target["_id"]) == scope.user_id:
            raise HTTPException(400, "Cannot delete your own account")

        if target.get("role") == UserRole.ADMIN.value:
            raise HTTPException(403, "Cannot delete admin users")

        db.users.delete_one(scope.filter({"_id": target["_id"]}))

        log_tenant_action(scope.owner_id, "delete_user", user=user_id, by=scope.user_id)
        return {
            "message": "User deleted successfully",
            "deletedUser": {
                "_id": str(target["_id"]),
                "fullName": target.get("fullName"),
                "email": target.get("email"),
                "role": target.get("role"),
            },
        }

    def get_page_access(self, db, scope: TenantScope) -> Dict[str, Any]:
        user = self.get_scoped_user(db, scope, scope.user_id, not_found="User not found")
        return {
            "userId": str(user["_id"]),
            "pageAccess": PageAccess.from_document(user).to_document(),
            "accessiblePages": get_accessible_pages(user),
        }

    def update_page_access(self, db, scope: TenantScope, user_id: str, flags: Dict[str, Any]) -> Dict[str, Any]:
        """Partial update of another member's page flags"""
        if not flags or not validate_page_access(flags):
            raise HTTPException(400, "Invalid page access data")

        target = self.get_scoped_user(db, scope, user_id)
        if target.get("role") == UserRole.ADMIN.value:
            raise HTTPException(403, "Cannot edit admin users")

        db.users.update_one(
            scope.filter({"_id": target["_id"]}),
            {"$set": {**flags, "updatedAt": utc_now()}}
        )
        updated = db.users.find_one(scope.filter({"_id": target["_id"]}))

        logger.info(f"Page access updated for {user_id}: {flags}")
        log_tenant_action(scope.owner_id, "update_page_access", user=user_id, by=scope.user_id)
        return {
            "message": "Page access updated successfully",
            "userId": user_id,
            "pageAccess": PageAccess.from_document(updated).to_document(),
            "accessiblePages": get_accessible_pages(updated),
        }


# Global service instance
user_service = UserService()
