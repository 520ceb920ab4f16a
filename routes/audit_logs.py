from flask import Blueprint, jsonify, request, current_app
from models.audit_log import AuditLog
from security.rbac import require_admin
from utils.serializers import audit_to_dict

audit_bp = Blueprint("audit", __name__, url_prefix="/admin")


@audit_bp.get("/audit-log")
@require_admin
def list_audit_log():
    max_limit = current_app.config.get("AUDIT_LOG_MAX_LIMIT", 500)
    limit = request.args.get("limit", type=int)
    if limit is None:
        limit = 200
    limit = max(1, min(limit, max_limit))

    action = request.args.get("action")
    user_id = request.args.get("userId", type=int)

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action)
    if user_id is not None:
        q = q.filter(AuditLog.user_id == user_id)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify([audit_to_dict(r) for r in rows]), 200
