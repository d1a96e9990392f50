# visitrack/models/users.py
from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class UserRole(str, Enum):
    ADMIN = "admin"
    SUB_ADMIN = "sub-admin"
    MANAGER = "manager"
    STAFF = "staff"


# Roles an admin may hand out inside their tenant
ASSIGNABLE_ROLES = [UserRole.SUB_ADMIN.value, UserRole.MANAGER.value, UserRole.STAFF.value]
USER_MANAGER_ROLES = [UserRole.ADMIN.value, UserRole.SUB_ADMIN.value]
VALID_CAPACITIES = [3000, 6000, 10000]


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    """Public admin sign-up"""
    full_name: Optional[str] = Field(None, alias="fullName")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    email: Optional[str] = None
    capacity: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    # Accepted for client compatibility, never stored
    owner_id: Optional[str] = Field(None, alias="ownerId")

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


class CreateUserRequest(BaseModel):
    full_name: Optional[str] = Field(None, alias="fullName")
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


class UpdateUserRequest(CreateUserRequest):
    """Same fields as creation; password is optional"""


class GlobalVariables(BaseModel):
    """Identity values the web client keeps after login"""
    user_id: str = Field(..., alias="userId")
    owner_id: str = Field(..., alias="ownerId")
    username: str
    role: str
    email: Optional[str] = None

    class Config:
        populate_by_name = True


class LoginResponse(BaseModel):
    message: str
    token: str
    user: Dict[str, Any]
    global_variables: GlobalVariables = Field(..., alias="globalVariables")
    page_access: Dict[str, bool] = Field(default_factory=dict, alias="pageAccess")

    class Config:
        populate_by_name = True


class PageAccessResponse(BaseModel):
    user_id: str = Field(..., alias="userId")
    page_access: Dict[str, bool] = Field(..., alias="pageAccess")
    accessible_pages: List[str] = Field(default_factory=list, alias="accessiblePages")

    class Config:
        populate_by_name = True
