from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"
    cancelled = "cancelled"
    completed = "completed"


class TimePeriod(str, Enum):
    AM = "AM"
    PM = "PM"


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class BookingCreate(CamelModel):
    # Required fields are checked by the lifecycle engine so that every
    # missing one can be reported together.
    customer_name: Optional[str] = Field(None, examples=["Maria Santos"])
    service_name: Optional[str] = Field(None, examples=["Emerald Ball Gown"])
    listing_id: Optional[str] = Field(None, description="ID of the listing being booked")
    date: Optional[str] = Field(None, examples=["2025-06-21"], description="YYYY-MM-DD")
    time: Optional[str] = Field(None, examples=["14:30"], description="HH:MM")
    price: Optional[float] = Field(None, ge=0, examples=[2500.0])
    owner_id: Optional[str] = Field(None, description="Ignored in favour of the listing's owner")
    owner_username: Optional[str] = Field(None, examples=["emeraldgowns"])
    location: Optional[str] = None
    notes: Optional[str] = None
    product_image: Optional[str] = None
    event_type: Optional[str] = None
    event_location: Optional[str] = None
    event_time_period: TimePeriod = TimePeriod.PM
    fitting_time: Optional[str] = Field(None, examples=["10:00"])
    fitting_time_period: TimePeriod = TimePeriod.AM
    include_makeup_addon: bool = False
    addon_price: Optional[float] = Field(None, ge=0)
    makeup_duration: Optional[int] = Field(None, ge=0, description="Minutes")


class BookingStatusUpdate(CamelModel):
    status: BookingStatus = Field(..., description="Target booking status")
    message: Optional[str] = Field(None, max_length=1000, description="Rejection reason")


class BookingResponse(CamelModel):
    id: str
    booking_code: str
    customer_id: str
    customer_name: str
    owner_id: str
    owner_username: str = ""
    listing_id: str
    service_name: str
    price: float
    date: str
    time: str
    status: BookingStatus = BookingStatus.pending
    include_makeup_addon: bool = False
    addon_price: float = 0
    makeup_duration: int = 0
    location: str = ""
    product_image: str = ""
    notes: str = ""
    event_type: str = ""
    event_location: str = ""
    event_time_period: TimePeriod = TimePeriod.PM
    fitting_time: str = ""
    fitting_time_period: TimePeriod = TimePeriod.AM
    rejection_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
