import secrets
import string
import time
from typing import List, Optional, Union
from sqlalchemy.orm import Session
from glamrent.exceptions import Forbidden, ListingNotFound, ValidationError
from glamrent.models.booking_model import Booking
from glamrent.schemas.booking_schema import BookingCreate, BookingStatus
from glamrent.security.auth import Principal, Role
from glamrent.services.booking_rules import ensure_authorized, ensure_transition
from glamrent.services.booking_store import BookingStore, BookingRef, ById, ByCode
from glamrent.services.catalog import ListingCatalog
from glamrent.services.notification_service import NotificationEmitter, EmitResult
from glamrent.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = (
    "customer_name",
    "service_name",
    "listing_id",
    "date",
    "time",
    "price",
    "owner_id",
)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_booking_code() -> str:
    """Short reference such as ``BK17503412QX7RT`` for support and receipts"""
    stamp = f"BK{int(time.time() * 1000)}"[:10]
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(5))
    return stamp + suffix


def missing_fields(payload: BookingCreate) -> List[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(payload, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


class BookingLifecycle:
    """Creates bookings and moves them through their statuses.

    Every call takes the requesting principal explicitly; authorization is
    decided from the booking's parties and the target status on each call.
    Notifications are best effort: a failed write is logged and the booking
    change stands.
    """

    def __init__(self, store: BookingStore, catalog: ListingCatalog, notifier: NotificationEmitter):
        self.store = store
        self.catalog = catalog
        self.notifier = notifier

    @classmethod
    def for_session(cls, db: Session) -> "BookingLifecycle":
        return cls(BookingStore(db), ListingCatalog(db), NotificationEmitter(db))

    def create_booking(self, payload: BookingCreate, requester: Principal) -> Booking:
        if requester.role != Role.customer:
            raise Forbidden("Only customers can create bookings")

        missing = missing_fields(payload)
        if missing:
            logger.info(f"Rejected booking payload from {requester.id}, missing: {missing}")
            raise ValidationError(missing)

        listing = self.catalog.get_listing(payload.listing_id)
        if listing is None:
            raise ListingNotFound()
        if listing.owner_id == requester.id:
            raise Forbidden("You cannot book your own listing")

        # The client's owner id is never trusted
        if payload.owner_id != listing.owner_id:
            logger.warning(
                f"Owner mismatch for listing {listing.id}: payload {payload.owner_id}, "
                f"catalog {listing.owner_id}; using catalog owner"
            )

        if payload.include_makeup_addon:
            addon_price = payload.addon_price
            if addon_price is None:
                addon_price = listing.makeup_price or 0
            makeup_duration = payload.makeup_duration or 0
        else:
            addon_price = 0
            makeup_duration = 0

        booking = Booking(
            booking_code=generate_booking_code(),
            customer_id=requester.id,
            customer_name=payload.customer_name.strip(),
            owner_id=listing.owner_id,
            owner_username=(payload.owner_username or "").strip(),
            listing_id=listing.id,
            service_name=payload.service_name,
            price=payload.price,
            date=payload.date,
            time=payload.time,
            status=BookingStatus.pending.value,
            include_makeup_addon=payload.include_makeup_addon,
            addon_price=addon_price,
            makeup_duration=makeup_duration,
            location=payload.location or listing.location,
            product_image=payload.product_image or listing.image,
            notes=payload.notes or payload.event_location or "",
            event_type=payload.event_type or "",
            event_location=payload.event_location or "",
            event_time_period=payload.event_time_period.value,
            fitting_time=payload.fitting_time or "",
            fitting_time_period=payload.fitting_time_period.value,
        )
        booking = self.store.insert(booking)
        logger.info(
            f"Booking {booking.booking_code} created by {requester.id} for listing {listing.id} on {booking.date}"
        )

        self._log_emit(booking.id, self.notifier.emit_created(booking))
        return booking

    def update_status(
            self,
            booking_ref: Union[BookingRef, str],
            new_status: Union[BookingStatus, str],
            requester: Principal,
            message: Optional[str] = None,
    ) -> Booking:
        try:
            target = BookingStatus(new_status)
        except ValueError:
            raise ValidationError(["status"], f"Invalid status value: {new_status}")

        booking = self._resolve(booking_ref)
        ensure_authorized(booking.customer_id, booking.owner_id, requester.id, target)
        ensure_transition(booking.status, target)

        stored_message = message if target == BookingStatus.rejected else None
        previous = booking.status
        # The store only writes if the status is still the one checked above
        booking = self.store.update_status(booking.id, target, stored_message, expected_status=previous)
        logger.info(f"Booking {booking.id} moved {previous} -> {target.value} by {requester.id}")

        self._log_emit(booking.id, self.notifier.emit_transition(booking, requester.id))
        return booking

    def get_booking(self, booking_ref: Union[BookingRef, str], requester: Principal) -> Booking:
        booking = self._resolve(booking_ref)
        if requester.id not in (booking.customer_id, booking.owner_id):
            raise Forbidden("Not authorized to view this booking")
        return booking

    def list_customer_bookings(self, requester: Principal, status=None, q=None, skip=0, limit=100) -> List[Booking]:
        return self.store.find_by_customer(requester.id, status=status, q=q, skip=skip, limit=limit)

    def list_owner_bookings(self, requester: Principal, status=None, q=None, skip=0, limit=100) -> List[Booking]:
        return self.store.find_by_owner(requester.id, status=status, q=q, skip=skip, limit=limit)

    def _resolve(self, booking_ref: Union[BookingRef, str]) -> Booking:
        if isinstance(booking_ref, (ById, ByCode)):
            return self.store.find(booking_ref)
        return self.store.resolve(str(booking_ref))

    @staticmethod
    def _log_emit(booking_id: str, result: EmitResult) -> None:
        if not result.ok:
            logger.warning(f"Booking {booking_id} saved but notifications were not written: {result.error}")
