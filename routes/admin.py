from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking
from models.date_slot import DateSlot
from models.session import Session
from models.user import User
from security.password import hash_password
from security.rbac import require_admin
from utils.audit import log_event, acting_user_id
from utils.booking_rules import BookingError, release_slot, reserve_slot
from utils.dates import parse_date, is_booking_day, format_date
from utils.serializers import user_to_dict, full_document
from utils.users import next_user_id, display_name, parse_user_id

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""


# ---------- snapshots ----------
@admin_bp.get("/data")
@require_admin
def get_data():
    return jsonify(full_document()), 200


@admin_bp.get("/users")
@require_admin
def list_users():
    users = User.query.order_by(User.id.asc()).all()
    return jsonify([user_to_dict(u) for u in users]), 200


# ---------- users ----------
@admin_bp.post("/add-user")
@require_admin
def add_user():
    data = request.get_json(silent=True) or {}
    username = _text(data, "username")
    password = data.get("password")

    if not username or not isinstance(password, str) or not password:
        return jsonify(error="username and password are required"), 400

    if User.query.filter_by(username=username).first():
        return jsonify(error="Username already exists."), 409

    user = User(
        id=next_user_id(),
        username=username,
        password_hash=hash_password(password),
        title=_text(data, "title"),
        first_name=_text(data, "firstName"),
        last_name=_text(data, "lastName"),
        enabled=True,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Username already exists."), 409

    log_event("USER_ADD", context={"username": username, "id": user.id})
    return jsonify(message="User added", id=user.id), 200


@admin_bp.post("/toggle-user")
@require_admin
def toggle_user():
    data = request.get_json(silent=True) or {}
    username = _text(data, "username")

    if username == current_app.config.get("ADMIN_USERNAME", "admin"):
        return jsonify(error="Cannot disable admin account."), 403

    user = User.query.filter_by(username=username).first()
    if not user:
        return jsonify(error="User not found"), 404

    user.enabled = not user.enabled
    db.session.commit()

    log_event("USER_TOGGLE", context={"username": username, "enabled": user.enabled})
    return jsonify(message="User updated", enabled=user.enabled), 200


@admin_bp.post("/delete-user")
@require_admin
def delete_user():
    data = request.get_json(silent=True) or {}
    username = _text(data, "username")

    if username == current_app.config.get("ADMIN_USERNAME", "admin"):
        return jsonify(error="Cannot delete admin account."), 403

    user = User.query.filter_by(username=username).first()
    if not user:
        return jsonify(error="User not found"), 404

    user_id = user.id
    released = None
    held = Booking.query.filter_by(user_id=user_id).first()
    if held is not None:
        released = release_slot(held, "User deleted", cancelled_by=acting_user_id())
        db.session.flush()

    Session.query.filter_by(user_id=user_id).delete()
    db.session.delete(user)
    db.session.commit()

    context = {"username": username, "id": user_id}
    if released is not None:
        context["releasedBooking"] = {"date": format_date(released.date), "slotType": released.slot_type}
    log_event("USER_DELETE", context=context)
    return jsonify(message="User deleted"), 200


# ---------- dates ----------
@admin_bp.post("/add-date")
@require_admin
def add_date():
    data = request.get_json(silent=True) or {}
    day = parse_date(data.get("date"))

    if day is None or not is_booking_day(day):
        return jsonify(error="Date must be a Sunday in YYYY-MM-DD format."), 400

    if DateSlot.query.filter_by(date=day).first():
        return jsonify(message="Date already listed"), 200

    db.session.add(DateSlot(date=day))
    try:
        db.session.commit()
    except IntegrityError:
        # added concurrently; same outcome
        db.session.rollback()
        return jsonify(message="Date already listed"), 200

    log_event("DATE_ADD", context={"date": format_date(day)})
    return jsonify(message="Date added"), 200


@admin_bp.post("/delete-date")
@require_admin
def delete_date():
    data = request.get_json(silent=True) or {}
    day = parse_date(data.get("date"))

    slot = DateSlot.query.filter_by(date=day).first() if day else None
    if not slot:
        return jsonify(error="Date not found"), 404

    if slot.is_booked:
        return jsonify(error="Cannot delete a booked date."), 403

    db.session.delete(slot)
    db.session.commit()

    log_event("DATE_DELETE", context={"date": format_date(day)})
    return jsonify(message="Date deleted"), 200


@admin_bp.post("/unlock-date")
@require_admin
def unlock_date():
    data = request.get_json(silent=True) or {}
    day = parse_date(data.get("date"))
    slot_type = data.get("type")

    slot = DateSlot.query.filter_by(date=day).first() if day else None
    booking = slot.booking_for(slot_type) if slot else None
    if booking is None:
        return jsonify(error="Booking not found"), 404

    owner_id = booking.user_id
    release_slot(booking, "Unlocked by administrator", cancelled_by=acting_user_id())
    db.session.commit()

    log_event("DATE_UNLOCK", context={"date": format_date(day), "slotType": slot_type, "userId": owner_id})
    return jsonify(message="Slot unlocked"), 200


# ---------- bookings ----------
@admin_bp.post("/book-slot")
@require_admin
def book_slot():
    data = request.get_json(silent=True) or {}
    date_str = data.get("date")
    slot_type = data.get("slot")
    raw_user_id = data.get("userId")

    if not date_str or not slot_type or raw_user_id in (None, ""):
        return jsonify(error="Missing required fields."), 400

    user_id = parse_user_id(raw_user_id)
    day = parse_date(date_str)
    if user_id is None or day is None:
        return jsonify(error="Malformed date or userId."), 400

    slot = DateSlot.query.filter_by(date=day).first()
    if not slot:
        return jsonify(error="Date not found."), 404

    user = db.session.get(User, user_id)
    if not user:
        return jsonify(error="User not found."), 404

    try:
        booking, created = reserve_slot(slot, slot_type, user, user.title or "", display_name(user))
    except BookingError as e:
        current_app.logger.info("Admin booking refused: %s (user=%s date=%s)", e.message, user_id, date_str)
        return jsonify(error=e.message), e.status_code

    if created:
        log_event(
            "ADMIN_BOOKING_CREATE",
            context={"date": format_date(day), "slotType": slot_type, "userId": user.id},
        )
    return jsonify(message="Booking confirmed."), 200
