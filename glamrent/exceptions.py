from typing import Iterable
from fastapi import HTTPException, status


class BookingError(Exception):
    """Base class for failures of the booking core.

    Each subclass knows the HTTP status it maps to, so the route layer can
    turn any of them into an ``HTTPException`` without a lookup table.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Booking operation failed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.detail)


class ValidationError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, fields: Iterable[str], detail: str = None):
        self.fields = list(fields)
        super().__init__(detail or f"Missing required fields: {', '.join(self.fields)}")


class ListingNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Listing not found"


class BookingNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Booking not found"


class DuplicatePendingBooking(BookingError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Duplicate Booking: you already have a pending booking for this item on this date"


class Forbidden(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Not authorized to perform this action"


class InvalidTransition(BookingError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change booking status from {current} to {requested}")


class StorageError(BookingError):
    detail = "A storage error occurred"
