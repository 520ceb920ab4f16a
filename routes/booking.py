from flask import Blueprint, request, jsonify, current_app

from models import db
from models.date_slot import DateSlot
from models.user import User
from utils.audit import log_event
from utils.booking_rules import (
    BookingError,
    check_cancellation_window,
    release_slot,
    reserve_slot,
    validate_slot_type,
)
from utils.dates import parse_date, format_date
from utils.users import parse_user_id

booking_bp = Blueprint("booking", __name__)


# ---------- everyone: view open dates ----------
@booking_bp.get("/dates")
def list_dates():
    rows = DateSlot.query.order_by(DateSlot.date.asc()).all()
    return jsonify(availableDates=[format_date(d.date) for d in rows]), 200


# ---------- users: book a slot ----------
@booking_bp.post("/book-date")
def book_date():
    data = request.get_json(silent=True) or {}
    title = data.get("title")
    name = data.get("name")
    raw_user_id = data.get("userId")
    date_str = data.get("date")
    slot_type = data.get("type")

    if not title or not name or raw_user_id in (None, "") or not date_str or not slot_type:
        return jsonify(error="Missing required fields"), 400

    user_id = parse_user_id(raw_user_id)
    day = parse_date(date_str)
    if user_id is None or day is None:
        return jsonify(error="Malformed date or userId"), 400

    slot = DateSlot.query.filter_by(date=day).first()
    if not slot:
        return jsonify(error="Date not found"), 404

    user = db.session.get(User, user_id)
    if not user:
        return jsonify(error="User not found"), 404

    try:
        booking, created = reserve_slot(slot, slot_type, user, str(title), str(name))
    except BookingError as e:
        current_app.logger.info("Booking refused: %s (user=%s date=%s)", e.message, user_id, date_str)
        return jsonify(error=e.message), e.status_code

    if created:
        log_event(
            "BOOKING_CREATE",
            user_id=user.id,
            context={"date": format_date(day), "slotType": slot_type},
        )
    return jsonify(message="Booking confirmed"), 200


# ---------- users: cancel own booking (24h window) ----------
@booking_bp.post("/api/cancel-booking")
def cancel_booking():
    data = request.get_json(silent=True) or {}
    raw_user_id = data.get("userId")
    date_str = data.get("date")
    slot_type = data.get("slotType")
    reason = data.get("reason")
    reason = reason.strip() if isinstance(reason, str) else ""

    if raw_user_id in (None, "") or not date_str or not slot_type:
        return jsonify(error="userId, date and slotType are required."), 400

    user_id = parse_user_id(raw_user_id)
    day = parse_date(date_str)
    if user_id is None or day is None:
        return jsonify(error="Malformed date or userId."), 400

    try:
        validate_slot_type(slot_type)
    except BookingError as e:
        return jsonify(error=e.message), e.status_code

    slot = DateSlot.query.filter_by(date=day).first()
    booking = slot.booking_for(slot_type) if slot else None
    if booking is None:
        return jsonify(error="Booking not found."), 404

    if booking.user_id != user_id:
        return jsonify(error="You can only cancel your own booking."), 403

    try:
        check_cancellation_window(day)
    except BookingError as e:
        return jsonify(error=e.message), e.status_code

    release_slot(booking, reason, cancelled_by=user_id)
    db.session.commit()

    log_event(
        "BOOKING_CANCEL",
        user_id=user_id,
        context={"date": format_date(day), "slotType": slot_type, "reason": reason},
    )
    return jsonify(success=True, message="Booking cancelled successfully."), 200
