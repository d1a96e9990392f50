# visitrack/models/visitor_dataset.py
from pydantic import BaseModel, Field
from typing import Optional


class VisitorDatasetRequest(BaseModel):
    owner_id: Optional[str] = Field(None, alias="ownerId")
    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = None

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


class VisitorLookupRequest(BaseModel):
    email: Optional[str] = None
    event_id: Optional[str] = Field(None, alias="eventId")

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True
