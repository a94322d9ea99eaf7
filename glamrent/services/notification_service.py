from dataclasses import dataclass, field
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from glamrent.exceptions import StorageError
from glamrent.models.booking_model import Booking
from glamrent.models.notification_model import Notification
from glamrent.schemas.booking_schema import BookingStatus
from glamrent.logger import get_logger

logger = get_logger(__name__)


@dataclass
class EmitResult:
    """Outcome of a best-effort notification write.

    Callers inspect or log it; it is never raised.
    """
    ok: bool
    notifications: List[Notification] = field(default_factory=list)
    error: Optional[str] = None


class NotificationEmitter:
    def __init__(self, db: Session):
        self.db = db

    def emit_created(self, booking: Booking) -> EmitResult:
        return self._emit(booking, self._created_records)

    def emit_transition(self, booking: Booking, actor_id: str) -> EmitResult:
        """Write the alerts for the status the booking has just moved to"""
        return self._emit(booking, lambda b: self._transition_records(b, actor_id))

    def _emit(self, booking: Booking, build) -> EmitResult:
        # Runs after the booking change has committed; nothing here may fail it
        try:
            records = build(booking)
        except Exception as e:
            logger.error(f"Failed to build notifications for booking {booking.id}: {str(e)}")
            return EmitResult(ok=False, error=str(e))

        if not records:
            return EmitResult(ok=True)
        return self._write(records)

    def _created_records(self, booking: Booking) -> List[Notification]:
        return [
            self._build(
                booking,
                recipient_id=booking.owner_id,
                kind="new_booking",
                title="New Booking Received",
                body=f"You have a new booking for {booking.service_name} from {booking.customer_name}.",
            )
        ]

    def _transition_records(self, booking: Booking, actor_id: str) -> List[Notification]:
        status = BookingStatus(booking.status)
        service = booking.service_name
        by_owner = f" by {booking.owner_username}" if booking.owner_username else ""

        if status == BookingStatus.confirmed:
            return [self._build(
                booking, booking.customer_id, "booking_confirmed", "Booking Confirmed",
                f"Your booking for {service} has been confirmed{by_owner}.",
            )]
        if status == BookingStatus.completed:
            return [self._build(
                booking, booking.customer_id, "booking_completed", "Booking Completed",
                f"Your booking for {service} has been marked as completed.",
            )]
        if status == BookingStatus.rejected:
            body = f"Your booking for {service} was rejected{by_owner}."
            if booking.rejection_message:
                body = f"{body} Reason: {booking.rejection_message}"
            return [self._build(
                booking, booking.customer_id, "booking_rejected", "Booking Rejected", body,
            )]
        if status == BookingStatus.cancelled:
            cancelled_by = "the owner" if actor_id == booking.owner_id else "the customer"
            return [
                self._build(
                    booking, booking.customer_id, "booking_cancelled", "Booking Cancelled",
                    f"Your booking for {service} has been cancelled by {cancelled_by}.",
                ),
                self._build(
                    booking, booking.owner_id, "booking_cancelled", "Booking Cancelled",
                    f"A booking for {service} has been cancelled by {cancelled_by}.",
                ),
            ]
        return []

    @staticmethod
    def _build(booking: Booking, recipient_id: str, kind: str, title: str, body: str) -> Notification:
        return Notification(
            recipient_id=recipient_id,
            kind=kind,
            title=title,
            body=body,
            related_booking_id=booking.id,
            is_read=False,
        )

    def _write(self, records: List[Notification]) -> EmitResult:
        try:
            self.db.add_all(records)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to write {len(records)} notification(s): {str(e)}")
            return EmitResult(ok=False, error=str(e))

        for record in records:
            logger.info(f"Notification {record.kind} sent to {record.recipient_id}")
        return EmitResult(ok=True, notifications=records)

    def list_for_recipient(self, recipient_id: str, skip: int = 0, limit: int = 100) -> List[Notification]:
        try:
            return (
                self.db.query(Notification)
                .filter(Notification.recipient_id == str(recipient_id))
                .order_by(Notification.created_at.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching notifications for {recipient_id}: {str(e)}")
            raise StorageError()

    def unread_count(self, recipient_id: str) -> int:
        try:
            return (
                self.db.query(Notification)
                .filter(Notification.recipient_id == str(recipient_id), Notification.is_read == False)
                .count()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error counting notifications for {recipient_id}: {str(e)}")
            raise StorageError()

    def mark_all_read(self, recipient_id: str) -> int:
        try:
            updated = (
                self.db.query(Notification)
                .filter(Notification.recipient_id == str(recipient_id), Notification.is_read == False)
                .update({Notification.is_read: True}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error marking notifications read for {recipient_id}: {str(e)}")
            raise StorageError()

        logger.info(f"Marked {updated} notification(s) read for {recipient_id}")
        return updated
