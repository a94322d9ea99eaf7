from datetime import datetime, timedelta, timezone

import pytest

from glamrent.models.booking_model import Booking
from glamrent.models.notification_model import Notification
from glamrent.services.notification_service import NotificationEmitter


@pytest.fixture
def emitter(db):
    return NotificationEmitter(db)


@pytest.fixture
def booking(db):
    booking = Booking(
        booking_code="BK00000001AAAAA",
        customer_id="c1",
        customer_name="Carla",
        owner_id="o1",
        listing_id="listing-1",
        service_name="Ruby Cocktail Dress",
        price=1800,
        date="2025-06-21",
        time="09:00",
        status="pending",
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.mark.parametrize(
    "status,recipients,kind",
    [
        ("confirmed", ["c1"], "booking_confirmed"),
        ("completed", ["c1"], "booking_completed"),
        ("rejected", ["c1"], "booking_rejected"),
        ("cancelled", ["c1", "o1"], "booking_cancelled"),
    ],
)
def test_transition_fan_out(emitter, booking, db, status, recipients, kind):
    booking.status = status
    db.commit()

    result = emitter.emit_transition(booking, actor_id="o1")

    assert result.ok
    assert sorted(n.recipient_id for n in result.notifications) == recipients
    assert {n.kind for n in result.notifications} == {kind}
    assert all(n.related_booking_id == booking.id for n in result.notifications)
    assert all("Ruby Cocktail Dress" in n.body for n in result.notifications)


def test_pending_emits_nothing_on_transition(emitter, booking, db):
    result = emitter.emit_transition(booking, actor_id="c1")
    assert result.ok
    assert result.notifications == []
    assert db.query(Notification).count() == 0


def test_owner_cancellation_wording(emitter, booking, db):
    booking.status = "cancelled"
    db.commit()

    result = emitter.emit_transition(booking, actor_id="o1")
    assert all("by the owner" in n.body for n in result.notifications)


def test_created_goes_to_owner(emitter, booking):
    result = emitter.emit_created(booking)
    [sent] = result.notifications
    assert sent.recipient_id == "o1"
    assert sent.kind == "new_booking"
    assert sent.title == "New Booking Received"
    assert sent.is_read is False


def test_list_newest_first_and_scoped(emitter, db):
    now = datetime.now(timezone.utc)
    db.add_all([
        Notification(recipient_id="u1", kind="new_booking", title="old", body="b",
                     created_at=now - timedelta(minutes=5)),
        Notification(recipient_id="u1", kind="new_booking", title="new", body="b", created_at=now),
        Notification(recipient_id="u2", kind="new_booking", title="other", body="b", created_at=now),
    ])
    db.commit()

    assert [n.title for n in emitter.list_for_recipient("u1")] == ["new", "old"]
    assert [n.title for n in emitter.list_for_recipient("u2")] == ["other"]


def test_mark_all_read_is_idempotent_and_scoped(emitter, db):
    db.add_all([
        Notification(recipient_id="u1", kind="new_booking", title="a", body="b"),
        Notification(recipient_id="u1", kind="new_booking", title="c", body="d"),
        Notification(recipient_id="u2", kind="new_booking", title="e", body="f"),
    ])
    db.commit()

    assert emitter.unread_count("u1") == 2
    assert emitter.mark_all_read("u1") == 2
    assert emitter.mark_all_read("u1") == 0
    assert emitter.unread_count("u1") == 0
    assert emitter.unread_count("u2") == 1


def test_owner_name_in_confirmation(emitter, booking, db):
    booking.status = "confirmed"
    booking.owner_username = "rubyrentals"
    db.commit()

    [sent] = emitter.emit_transition(booking, actor_id="o1").notifications
    assert sent.body == "Your booking for Ruby Cocktail Dress has been confirmed by rubyrentals."


def test_any_write_error_is_reported_not_raised(emitter, booking, db, monkeypatch):
    def broken_add_all(instances):
        raise RuntimeError("writer crashed")

    monkeypatch.setattr(db, "add_all", broken_add_all)
    result = emitter.emit_created(booking)

    assert result.ok is False
    assert result.error == "writer crashed"
    assert result.notifications == []


def test_build_error_is_reported_not_raised(emitter, booking, monkeypatch):
    def broken_build(*args, **kwargs):
        raise ValueError("bad template")

    monkeypatch.setattr(NotificationEmitter, "_build", staticmethod(broken_build))
    result = emitter.emit_created(booking)

    assert result.ok is False
    assert result.error == "bad template"
