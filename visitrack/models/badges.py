# visitrack/models/badges.py
from pydantic import BaseModel, Field
from typing import Optional


class BadgeCreateRequest(BaseModel):
    badge_name: Optional[str] = Field(None, alias="badgeName")
    badge_image: Optional[str] = Field(None, alias="badgeImage")
    event_id: Optional[str] = Field(None, alias="eventId")

    class Config:
        populate_by_name = True
