from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, Index
import uuid
from glamrent.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    recipient_id = Column(String(36), nullable=False)
    kind = Column(String(50), nullable=False)  # new_booking, booking_confirmed, ...
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    related_booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_notifications_recipient_created", "recipient_id", "created_at"),
    )
