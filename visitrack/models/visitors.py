# visitrack/models/visitors.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class VisitorRegistrationRequest(BaseModel):
    """Public registration; unknown keys are dynamic form answers"""
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    event_id: Optional[str] = Field(None, alias="eventId")
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = None
    source: Optional[str] = None
    visitor_registration_date: Optional[str] = Field(None, alias="visitorRegistrationDate")

    def additional_fields(self) -> dict:
        return dict(self.model_extra or {})


class ManualEntryRequest(BaseModel):
    visitor_id: Optional[str] = Field(None, alias="visitorId")

    class Config:
        populate_by_name = True


class QrEntryRequest(BaseModel):
    visitor_id: Optional[str] = Field(None, alias="visitorId")
    qr_data: Optional[str] = Field(None, alias="qrData")

    class Config:
        populate_by_name = True


class CheckVisitorRequest(BaseModel):
    """Public "already registered?" check run before showing the form"""
    event_id: Optional[str] = Field(None, alias="eventId")
    email: Optional[str] = None

    class Config:
        populate_by_name = True
