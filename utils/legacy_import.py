"""
Loader for the legacy single-document store (data.json).

The document has four top-level arrays: users, dates, cancellations and
auditLog. Passwords in it are plaintext and are hashed on the way in.
Rows that clash with existing data are skipped and logged, never merged.
"""
import json
from datetime import datetime, timezone

from flask import current_app

from models import db
from models.audit_log import AuditLog
from models.booking import Booking, SLOT_TYPES
from models.cancellation import Cancellation
from models.date_slot import DateSlot
from models.user import User
from security.password import hash_password
from utils.dates import parse_date
from utils.users import next_user_id, parse_user_id


def _parse_timestamp(value):
    if not isinstance(value, str) or not value:
        return datetime.utcnow()
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.utcnow()
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def _import_users(rows, counts):
    for row in rows or []:
        username = (row.get("username") or "").strip()
        password = row.get("password") or ""
        if not username or not password:
            current_app.logger.warning("Skipping user without username/password: %r", row.get("id"))
            counts["skipped"] += 1
            continue
        if User.query.filter_by(username=username).first():
            current_app.logger.warning("Skipping duplicate username %s", username)
            counts["skipped"] += 1
            continue

        user_id = parse_user_id(row.get("id"))
        if user_id is None or db.session.get(User, user_id) is not None:
            user_id = next_user_id()

        db.session.add(User(
            id=user_id,
            username=username,
            password_hash=hash_password(password),
            title=row.get("title") or "",
            first_name=row.get("firstName") or "",
            last_name=row.get("lastName") or "",
            enabled=bool(row.get("enabled", True)),
        ))
        db.session.flush()
        counts["users"] += 1


def _import_dates(rows, counts):
    for row in rows or []:
        day = parse_date(row.get("date"))
        if day is None:
            current_app.logger.warning("Skipping malformed date %r", row.get("date"))
            counts["skipped"] += 1
            continue

        slot = DateSlot.query.filter_by(date=day).first()
        if slot is None:
            slot = DateSlot(date=day)
            db.session.add(slot)
            db.session.flush()
            counts["dates"] += 1

        for slot_type in SLOT_TYPES:
            entry = row.get(slot_type)
            if not entry:
                continue
            user_id = parse_user_id(entry.get("userId"))
            if user_id is None or db.session.get(User, user_id) is None:
                current_app.logger.warning("Skipping %s booking on %s: unknown user %r",
                                           slot_type, day, entry.get("userId"))
                counts["skipped"] += 1
                continue
            if slot.booking_for(slot_type) or Booking.query.filter_by(user_id=user_id).first():
                current_app.logger.warning("Skipping %s booking on %s: conflicts with an existing booking",
                                           slot_type, day)
                counts["skipped"] += 1
                continue
            db.session.add(Booking(
                date_slot=slot,
                slot_type=slot_type,
                user_id=user_id,
                title=entry.get("title") or "",
                name=entry.get("name") or "",
            ))
            db.session.flush()
            counts["bookings"] += 1


def _import_cancellations(rows, counts):
    for row in rows or []:
        day = parse_date(row.get("date"))
        user_id = parse_user_id(row.get("userId"))
        slot_type = row.get("slotType")
        if day is None or user_id is None or slot_type not in SLOT_TYPES:
            counts["skipped"] += 1
            continue
        db.session.add(Cancellation(
            user_id=user_id,
            cancelled_by=user_id,
            date=day,
            slot_type=slot_type,
            reason=row.get("reason") or "",
            timestamp=_parse_timestamp(row.get("timestamp")),
        ))
        counts["cancellations"] += 1


def _import_audit(rows, counts):
    for row in rows or []:
        action = row.get("action")
        if not action:
            counts["skipped"] += 1
            continue
        context = row.get("context")
        db.session.add(AuditLog(
            action=action,
            user_id=parse_user_id(row.get("userId")),
            context_json=json.dumps(context, default=str) if context else None,
            timestamp=_parse_timestamp(row.get("timestamp")),
        ))
        counts["audit"] += 1


def import_document(doc: dict) -> dict:
    """Imports a parsed data.json document in one transaction. Returns per-collection counts."""
    counts = {"users": 0, "dates": 0, "bookings": 0, "cancellations": 0, "audit": 0, "skipped": 0}
    try:
        _import_users(doc.get("users"), counts)
        _import_dates(doc.get("dates"), counts)
        _import_cancellations(doc.get("cancellations"), counts)
        _import_audit(doc.get("auditLog"), counts)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return counts
