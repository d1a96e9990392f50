# visitrack/models/events.py
from pydantic import BaseModel, Field
from typing import Optional


class EventCreateRequest(BaseModel):
    event_name: Optional[str] = Field(None, alias="eventName")
    status: Optional[str] = None
    event_start_date: Optional[str] = Field(None, alias="eventStartDate")
    event_end_date: Optional[str] = Field(None, alias="eventEndDate")
    event_start_time: Optional[str] = Field(None, alias="eventStartTime")
    event_end_time: Optional[str] = Field(None, alias="eventEndTime")
    event_location: Optional[str] = Field(None, alias="eventLocation")
    registration_deadline: Optional[str] = Field(None, alias="registrationDeadline")
    event_information: Optional[str] = Field(None, alias="eventInformation")
    event_banner: Optional[str] = Field(None, alias="eventBanner")

    class Config:
        populate_by_name = True


class EventUpdateRequest(EventCreateRequest):
    """Partial update; only the fields sent are written"""
    visitor_count: Optional[int] = Field(None, alias="visitorCount")
