from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, Numeric, DateTime
import uuid
from glamrent.database import Base


class Listing(Base):
    """Catalog entry (gown, dress or makeup service). Read-only for the booking core."""

    __tablename__ = "listings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    owner_id = Column(String(36), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    location = Column(String, nullable=False, default="")
    image = Column(String, nullable=False, default="")
    has_makeup_service = Column(Boolean, default=False)
    makeup_price = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
