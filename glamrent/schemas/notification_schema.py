from datetime import datetime
from typing import Optional
from pydantic.alias_generators import to_camel
from glamrent.schemas.booking_schema import CamelModel


class NotificationResponse(CamelModel):
    id: str
    recipient_id: str
    kind: str
    title: str
    body: str
    related_booking_id: Optional[str] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class MarkReadResponse(CamelModel):
    message: str
    updated: int


class UnreadCountResponse(CamelModel):
    unread: int
