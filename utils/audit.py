import json
from flask import g, has_request_context, request
from models import db
from models.audit_log import AuditLog

def acting_user_id():
    user = getattr(g, "user", None) if has_request_context() else None
    return user.id if user is not None else None

def log_event(action: str, user_id=None, context=None):
    ip = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    if user_id is None:
        user_id = acting_user_id()

    row = AuditLog(
        user_id=user_id,
        action=action,
        ip=ip,
        context_json=json.dumps(context, default=str) if context else None
    )
    db.session.add(row)
    db.session.commit()
    return row
