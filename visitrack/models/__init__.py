# visitrack/models/__init__.py
from .users import (
    UserRole, LoginRequest, RegisterRequest, CreateUserRequest, UpdateUserRequest,
    GlobalVariables, LoginResponse, PageAccessResponse
)
from .events import EventCreateRequest, EventUpdateRequest
from .badges import BadgeCreateRequest
from .forms import FormField, FormCreateRequest, FormUpdateRequest
from .visitors import VisitorRegistrationRequest, CheckVisitorRequest, ManualEntryRequest, QrEntryRequest
from .message_templates import MessageTemplateRequest
from .visitor_dataset import VisitorDatasetRequest, VisitorLookupRequest
from .database import HealthResponse
from .errors import ErrorResponse, ImportErrorDetail, ImportErrorResponse

__all__ = [
    # User models
    "UserRole", "LoginRequest", "RegisterRequest", "CreateUserRequest", "UpdateUserRequest",
    "GlobalVariables", "LoginResponse", "PageAccessResponse",

    # Event models
    "EventCreateRequest", "EventUpdateRequest",

    # Badge and form models
    "BadgeCreateRequest", "FormField", "FormCreateRequest", "FormUpdateRequest",

    # Visitor models
    "VisitorRegistrationRequest", "CheckVisitorRequest", "ManualEntryRequest", "QrEntryRequest",
    "VisitorDatasetRequest", "VisitorLookupRequest",

    # Messaging models
    "MessageTemplateRequest",

    # Database models
    "HealthResponse",

    # Error models
    "ErrorResponse", "ImportErrorDetail", "ImportErrorResponse"
]
