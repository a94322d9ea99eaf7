from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from glamrent.config import DEFAULT_PAGE_LIMIT
from glamrent.exceptions import BookingError
from glamrent.services.booking_lifecycle import BookingLifecycle
from glamrent.schemas.booking_schema import BookingCreate, BookingStatusUpdate, BookingResponse, BookingStatus
from glamrent.database import get_db
from glamrent.security.auth import Principal, get_current_principal
from glamrent.logger import get_logger

booking_router = APIRouter()
logger = get_logger(__name__)


@booking_router.post(
    "/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED
)
def create_booking(
    booking: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create a new booking request for a listing (customer creates)"""
    try:
        logger.info(f"Principal {principal.id} creating booking for listing {booking.listing_id}")
        db_booking = BookingLifecycle.for_session(db).create_booking(booking, principal)
        return BookingResponse.model_validate(db_booking)

    except BookingError as e:
        logger.info(f"Booking creation refused for {principal.id}: {e.detail}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error creating booking: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while creating booking",
        )


@booking_router.get(
    "/bookings", response_model=List[BookingResponse], status_code=status.HTTP_200_OK
)
def get_my_bookings(
    skip: int = Query(0, ge=0, description="Number of bookings to skip"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=100, description="Number of bookings to retrieve"),
    booking_status: Optional[BookingStatus] = Query(
        None, alias="status", description="Filter by booking status"
    ),
    q: Optional[str] = Query(None, description="Search by service name"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Bookings the current principal made as a customer"""
    try:
        logger.info(f"Principal {principal.id} fetching own bookings")
        bookings = BookingLifecycle.for_session(db).list_customer_bookings(
            principal, status=booking_status, q=q, skip=skip, limit=limit
        )
        return [BookingResponse.model_validate(booking) for booking in bookings]

    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error fetching customer bookings: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching bookings",
        )


@booking_router.get(
    "/bookings/owner", response_model=List[BookingResponse], status_code=status.HTTP_200_OK
)
def get_owner_bookings(
    skip: int = Query(0, ge=0, description="Number of bookings to skip"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=100, description="Number of bookings to retrieve"),
    booking_status: Optional[BookingStatus] = Query(
        None, alias="status", description="Filter by booking status"
    ),
    q: Optional[str] = Query(None, description="Search by service name"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Bookings made against listings the current principal owns"""
    try:
        logger.info(f"Owner {principal.id} fetching received bookings")
        bookings = BookingLifecycle.for_session(db).list_owner_bookings(
            principal, status=booking_status, q=q, skip=skip, limit=limit
        )
        return [BookingResponse.model_validate(booking) for booking in bookings]

    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error fetching owner bookings: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching bookings",
        )


@booking_router.get(
    "/bookings/{booking_ref}",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def get_booking(
    booking_ref: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Get a booking by id or booking code (customer or owner)"""
    try:
        logger.info(f"Fetching booking: {booking_ref}")
        booking = BookingLifecycle.for_session(db).get_booking(booking_ref, principal)
        return BookingResponse.model_validate(booking)

    except BookingError as e:
        logger.info(f"Booking {booking_ref} not returned to {principal.id}: {e.detail}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error fetching booking {booking_ref}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching booking",
        )


@booking_router.patch(
    "/bookings/{booking_ref}/status",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
)
def update_booking_status(
    booking_ref: str,
    update: BookingStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Confirm, reject, complete (owner) or cancel (either party) a booking"""
    try:
        logger.info(f"Principal {principal.id} updating booking {booking_ref} status to {update.status.value}")
        booking = BookingLifecycle.for_session(db).update_status(
            booking_ref, update.status, principal, update.message
        )
        return BookingResponse.model_validate(booking)

    except BookingError as e:
        logger.warning(f"Status update on {booking_ref} refused for {principal.id}: {e.detail}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error updating booking status {booking_ref}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating booking status",
        )
