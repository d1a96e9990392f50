# visitrack/models/message_templates.py
from pydantic import BaseModel, Field
from typing import Optional


class MessageTemplateRequest(BaseModel):
    """Body for both create and full update"""
    template_name: Optional[str] = Field(None, alias="templateName")
    subject: Optional[str] = None
    message: Optional[str] = None

    class Config:
        populate_by_name = True
