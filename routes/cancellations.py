from flask import Blueprint, jsonify, request
from sqlalchemy import func

from models import db
from models.cancellation import Cancellation
from models.user import User
from security.rbac import require_admin
from utils.dates import parse_date
from utils.serializers import cancellation_to_dict

cancellations_bp = Blueprint("cancellations", __name__, url_prefix="/admin/cancellations")


def _filtered(q):
    """
    Applies ?userId=&from=&to= to a cancellation query.
    Returns (query, error_response).
    """
    user_id = request.args.get("userId", type=int)
    start_str = request.args.get("from")
    end_str = request.args.get("to")

    if user_id is not None:
        q = q.filter(Cancellation.user_id == user_id)

    if start_str:
        start = parse_date(start_str)
        if start is None:
            return None, (jsonify(error="Invalid from date. Use YYYY-MM-DD"), 400)
        q = q.filter(Cancellation.date >= start)

    if end_str:
        end = parse_date(end_str)
        if end is None:
            return None, (jsonify(error="Invalid to date. Use YYYY-MM-DD"), 400)
        q = q.filter(Cancellation.date <= end)

    return q, None


@cancellations_bp.get("")
@require_admin
def list_cancellations():
    q, error = _filtered(Cancellation.query)
    if error:
        return error

    rows = q.order_by(Cancellation.timestamp.desc(), Cancellation.id.desc()).all()
    return jsonify([cancellation_to_dict(c) for c in rows]), 200


@cancellations_bp.get("/summary")
@require_admin
def cancellation_summary():
    q, error = _filtered(
        db.session.query(Cancellation.user_id, func.count(Cancellation.id).label("total"))
    )
    if error:
        return error

    rows = q.group_by(Cancellation.user_id).all()
    user_ids = [r.user_id for r in rows]
    users = {u.id: u for u in User.query.filter(User.id.in_(user_ids)).all()} if user_ids else {}

    out = [
        {
            "userId": r.user_id,
            "username": users[r.user_id].username if r.user_id in users else None,
            "count": r.total,
        }
        for r in rows
    ]
    out.sort(key=lambda row: (-row["count"], row["userId"]))
    return jsonify(out), 200
