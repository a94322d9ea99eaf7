from dataclasses import dataclass
from typing import List, Optional, Union
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from glamrent.exceptions import BookingNotFound, DuplicatePendingBooking, InvalidTransition, StorageError
from glamrent.models.booking_model import Booking
from glamrent.logger import get_logger

logger = get_logger(__name__)

PENDING_INDEX = "uq_bookings_pending_listing_customer_date"


@dataclass(frozen=True)
class ById:
    value: str


@dataclass(frozen=True)
class ByCode:
    value: str


BookingRef = Union[ById, ByCode]


class BookingStore:
    """Sole writer of Booking rows.

    The pending-uniqueness rule lives in the ``uq_bookings_pending_listing_customer_date``
    partial index, so ``insert`` simply writes and lets the database decide.
    Transition rules are not checked here; see ``BookingLifecycle``.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, booking: Booking) -> Booking:
        listing_id, customer_id, date = booking.listing_id, booking.customer_id, booking.date
        try:
            self.db.add(booking)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if self._is_pending_conflict(e, listing_id, customer_id, date):
                logger.info(
                    f"Pending booking already exists for listing {listing_id}, "
                    f"customer {customer_id}, date {date}"
                )
                raise DuplicatePendingBooking()
            logger.error(f"Integrity error inserting booking: {str(e)}")
            raise StorageError()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting booking: {str(e)}")
            raise StorageError()

        self.db.refresh(booking)
        logger.info(f"Booking stored: {booking.id} ({booking.booking_code})")
        return booking

    def _is_pending_conflict(self, error: IntegrityError, listing_id: str, customer_id: str, date: str) -> bool:
        message = str(error.orig)
        if PENDING_INDEX in message:
            return True
        # SQLite names the columns rather than the index
        if "bookings.listing_id" in message and "bookings.customer_id" in message:
            return True
        return self._pending_exists(listing_id, customer_id, date)

    def _pending_exists(self, listing_id: str, customer_id: str, date: str) -> bool:
        try:
            return (
                self.db.query(Booking.id)
                .filter(
                    Booking.listing_id == listing_id,
                    Booking.customer_id == customer_id,
                    Booking.date == date,
                    Booking.status == "pending",
                )
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error classifying booking conflict: {str(e)}")
            return False

    def find(self, ref: BookingRef) -> Booking:
        """Get a booking by durable id or booking code"""
        query = self.db.query(Booking)
        if isinstance(ref, ById):
            query = query.filter(Booking.id == str(ref.value))
        elif isinstance(ref, ByCode):
            query = query.filter(Booking.booking_code == str(ref.value))
        else:
            raise TypeError(f"Unsupported booking reference: {ref!r}")

        try:
            booking = query.first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error looking up booking {ref}: {str(e)}")
            raise StorageError()

        if not booking:
            raise BookingNotFound()
        return booking

    def resolve(self, identifier: str) -> Booking:
        """Accept either identifier: try the durable id, then the booking code"""
        try:
            return self.find(ById(identifier))
        except BookingNotFound:
            return self.find(ByCode(identifier))

    def find_by_customer(
            self,
            customer_id: str,
            status: Optional[str] = None,
            q: Optional[str] = None,
            skip: int = 0,
            limit: int = 100,
    ) -> List[Booking]:
        return self._find_by_party(Booking.customer_id, customer_id, status, q, skip, limit)

    def find_by_owner(
            self,
            owner_id: str,
            status: Optional[str] = None,
            q: Optional[str] = None,
            skip: int = 0,
            limit: int = 100,
    ) -> List[Booking]:
        return self._find_by_party(Booking.owner_id, owner_id, status, q, skip, limit)

    def _find_by_party(self, column, party_id, status, q, skip, limit) -> List[Booking]:
        query = self.db.query(Booking).filter(column == str(party_id))

        if status:
            query = query.filter(Booking.status == getattr(status, "value", status))

        # Free-text search over the service name
        if q:
            query = query.filter(Booking.service_name.ilike(f"%{q}%"))

        try:
            return (
                query.order_by(Booking.created_at.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error listing bookings for {party_id}: {str(e)}")
            raise StorageError()

    def update_status(
            self,
            booking_id: str,
            new_status: str,
            message: Optional[str] = None,
            expected_status: Optional[str] = None,
    ) -> Booking:
        """Write the new status, only if the row still holds ``expected_status``.

        Without ``expected_status`` the write is unconditional. When the row has
        moved on since the caller read it, nothing is written and
        ``InvalidTransition`` reports the status actually stored.
        """
        new_value = getattr(new_status, "value", new_status)
        values = {Booking.status: new_value}
        if message is not None:
            values[Booking.rejection_message] = message

        query = self.db.query(Booking).filter(Booking.id == str(booking_id))
        if expected_status is not None:
            expected_status = getattr(expected_status, "value", expected_status)
            query = query.filter(Booking.status == expected_status)

        try:
            updated = query.update(values, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating booking {booking_id}: {str(e)}")
            raise StorageError()

        if updated == 0:
            current = self._current_status(booking_id)
            if current is None:
                raise BookingNotFound()
            logger.info(
                f"Booking {booking_id} changed to {current} before {expected_status} -> {new_value} was written"
            )
            raise InvalidTransition(current, new_value)

        booking = self.find(ById(booking_id))
        self.db.refresh(booking)
        logger.info(f"Booking {booking_id} status stored as {booking.status}")
        return booking

    def _current_status(self, booking_id: str) -> Optional[str]:
        try:
            return self.db.query(Booking.status).filter(Booking.id == str(booking_id)).scalar()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error reading status of booking {booking_id}: {str(e)}")
            raise StorageError()
