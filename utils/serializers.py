import json

from models.audit_log import AuditLog
from models.cancellation import Cancellation
from models.date_slot import DateSlot
from models.user import User
from models.booking import SLOT_TYPES
from utils.dates import format_date

def user_to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "username": u.username,
        "title": u.title,
        "firstName": u.first_name,
        "lastName": u.last_name,
        "enabled": u.enabled,
    }

def date_to_dict(d: DateSlot) -> dict:
    out = {"date": format_date(d.date)}
    for slot_type in SLOT_TYPES:
        b = d.booking_for(slot_type)
        if b is not None:
            out[slot_type] = {"title": b.title, "name": b.name, "userId": b.user_id}
    return out

def cancellation_to_dict(c: Cancellation) -> dict:
    return {
        "id": c.id,
        "userId": c.user_id,
        "date": format_date(c.date),
        "slotType": c.slot_type,
        "reason": c.reason,
        "cancelledBy": c.cancelled_by,
        "timestamp": c.timestamp.isoformat(),
    }

def audit_to_dict(a: AuditLog) -> dict:
    return {
        "id": a.id,
        "action": a.action,
        "userId": a.user_id,
        "context": json.loads(a.context_json) if a.context_json else {},
        "ip": a.ip,
        "timestamp": a.timestamp.isoformat(),
    }

def full_document() -> dict:
    """The whole state in the legacy data.json shape."""
    return {
        "users": [user_to_dict(u) for u in User.query.order_by(User.id.asc()).all()],
        "dates": [date_to_dict(d) for d in DateSlot.query.order_by(DateSlot.date.asc()).all()],
        "cancellations": [
            cancellation_to_dict(c)
            for c in Cancellation.query.order_by(Cancellation.timestamp.asc()).all()
        ],
        "auditLog": [audit_to_dict(a) for a in AuditLog.query.order_by(AuditLog.timestamp.asc()).all()],
    }
