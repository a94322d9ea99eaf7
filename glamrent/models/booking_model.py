from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Boolean, Integer, Numeric, Text, Index, text
import uuid
from glamrent.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    booking_code = Column(String(20), unique=True, nullable=False, index=True)

    customer_id = Column(String(36), nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    owner_id = Column(String(36), nullable=False, index=True)
    owner_username = Column(String, nullable=False, default="")

    # Snapshot of the listing at creation time
    listing_id = Column(String(36), nullable=False)
    service_name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    # Kept as the client sent them: YYYY-MM-DD and HH:MM
    date = Column(String(10), nullable=False)
    time = Column(String(5), nullable=False)

    status = Column(String(20), nullable=False, default="pending")

    include_makeup_addon = Column(Boolean, nullable=False, default=False)
    addon_price = Column(Numeric(10, 2), nullable=False, default=0)
    makeup_duration = Column(Integer, nullable=False, default=0)

    location = Column(String, nullable=False, default="")
    product_image = Column(String, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    event_type = Column(String, nullable=False, default="")
    event_location = Column(String, nullable=False, default="")
    event_time_period = Column(String(2), nullable=False, default="PM")
    fitting_time = Column(String, nullable=False, default="")
    fitting_time_period = Column(String(2), nullable=False, default="AM")
    rejection_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        # One pending booking per customer, listing and date
        Index(
            "uq_bookings_pending_listing_customer_date",
            "listing_id",
            "customer_id",
            "date",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, code={self.booking_code}, status={self.status})>"
