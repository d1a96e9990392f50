# visitrack/models/forms.py
from pydantic import BaseModel, Field
from typing import Any, List, Optional


class FormField(BaseModel):
    """One input on a registration form"""
    id: Optional[str] = None
    type: Optional[str] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    default_value: Optional[Any] = Field(None, alias="defaultValue")
    is_default: Optional[bool] = Field(None, alias="isDefault")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class FormCreateRequest(BaseModel):
    form_name: Optional[str] = Field(None, alias="formName")
    event_id: Optional[str] = Field(None, alias="eventId")
    fields: Optional[List[FormField]] = None

    class Config:
        populate_by_name = True


class FormUpdateRequest(FormCreateRequest):
    is_active: Optional[bool] = Field(None, alias="isActive")
