"""
Slot-booking rules shared by the self-service and admin booking paths.

A date carries two slots (opening/closing). A slot holds at most one
booking and a user holds at most one booking across all dates. Both
limits are also unique constraints on the bookings table, so a race
between two requests ends in IntegrityError and is reported as 409.
"""
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking, SLOT_TYPES
from models.cancellation import Cancellation
from models.date_slot import DateSlot
from models.user import User


class BookingError(Exception):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def utcnow() -> datetime:
    """Separated for monkeypatching in tests."""
    return datetime.utcnow()


def validate_slot_type(slot_type):
    if slot_type not in SLOT_TYPES:
        raise BookingError("Invalid slot type", 400)


def reserve_slot(day: DateSlot, slot_type: str, user: User, title: str, name: str):
    """
    Books `slot_type` on `day` for `user`. Returns (booking, created).

    Re-booking the slot a user already holds is idempotent and only
    refreshes the display title/name.
    """
    validate_slot_type(slot_type)

    if not user.enabled:
        raise BookingError("User account is disabled", 403)

    existing = day.booking_for(slot_type)
    if existing is not None:
        if existing.user_id != user.id:
            raise BookingError(f"{slot_type.capitalize()} slot already booked", 409)
        existing.title = title
        existing.name = name
        db.session.commit()
        return existing, False

    held = Booking.query.filter_by(user_id=user.id).first()
    if held is not None:
        raise BookingError("User has already booked a slot.", 409)

    booking = Booking(date_slot=day, slot_type=slot_type, user_id=user.id, title=title, name=name)
    db.session.add(booking)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning(
            "Booking race lost: user=%s date=%s slot=%s", user.id, day.date, slot_type
        )
        raise BookingError("Slot already booked.", 409)

    return booking, True


def release_slot(booking: Booking, reason: str, cancelled_by=None) -> Cancellation:
    """
    Removes the booking and records it in the cancellation history.
    Caller commits.
    """
    row = Cancellation(
        user_id=booking.user_id,
        cancelled_by=cancelled_by,
        date=booking.date_slot.date,
        slot_type=booking.slot_type,
        reason=reason or "",
        timestamp=utcnow(),
    )
    db.session.add(row)
    db.session.delete(booking)
    return row


def hours_until(day: date, now: datetime = None) -> float:
    """Hours from `now` (UTC) until midnight UTC at the start of `day`."""
    now = now or utcnow()
    start = datetime(day.year, day.month, day.day)
    return (start - now).total_seconds() / 3600


def check_cancellation_window(day: date):
    cutoff_hours = current_app.config.get("CANCEL_CUTOFF_HOURS", 24)
    if hours_until(day) < cutoff_hours:
        raise BookingError(
            f"Cancellations must be made at least {cutoff_hours} hours in advance.", 400
        )
