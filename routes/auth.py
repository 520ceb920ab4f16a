from flask import Blueprint, request, jsonify, current_app

from models.user import User
from security.password import verify_password
from security.session import create_session, revoke_session, bearer_token
from security.bruteforce import is_locked, register_failure, reset_attempts
from security.rbac import require_admin
from utils.audit import log_event


auth_bp = Blueprint("auth", __name__)


def _credentials():
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")
    if not isinstance(username, str):
        username = ""
    if not isinstance(password, str):
        password = ""
    return username.strip(), password


def _locked_response(username: str, action: str):
    locked, seconds_left = is_locked(username)
    if not locked:
        return None
    log_event(action, context=_context(username, seconds_left=seconds_left))
    return jsonify(error="Account temporarily locked. Try again later.", retry_after_seconds=seconds_left), 429


def _context(username: str, **extra) -> dict:
    ctx = {"username": username}
    ctx.update(extra)
    return ctx


@auth_bp.post("/login")
def login():
    username, password = _credentials()

    locked = _locked_response(username, "LOGIN_LOCKED")
    if locked:
        return locked

    user = User.query.filter_by(username=username, enabled=True).first()
    if not user or not verify_password(password, user.password_hash):
        fail_count, locked_now = register_failure(username)
        log_event(
            "LOGIN_FAIL",
            user_id=user.id if user else None,
            context=_context(username, fail_count=fail_count, locked_now=locked_now),
        )
        current_app.logger.warning("Login failed for %r (%d)", username, fail_count)
        return jsonify(error="Invalid credentials"), 401

    reset_attempts(username)
    log_event("LOGIN_SUCCESS", user_id=user.id)

    return jsonify(
        username=user.username,
        title=user.title or current_app.config.get("DEFAULT_TITLE", "Brother"),
        userId=user.id,
        lastName=user.last_name or "",
    ), 200


@auth_bp.post("/admin/login")
def admin_login():
    username, password = _credentials()
    admin_username = current_app.config.get("ADMIN_USERNAME", "admin")

    if username != admin_username:
        log_event("ADMIN_LOGIN_FAIL", context=_context(username, reason="not admin"))
        return jsonify(error="Forbidden"), 403

    locked = _locked_response(username, "ADMIN_LOGIN_LOCKED")
    if locked:
        return locked

    user = User.query.filter_by(username=admin_username, enabled=True).first()
    if not user or not verify_password(password, user.password_hash):
        fail_count, locked_now = register_failure(username)
        log_event(
            "ADMIN_LOGIN_FAIL",
            context=_context(username, fail_count=fail_count, locked_now=locked_now),
        )
        current_app.logger.warning("Admin login failed (%d)", fail_count)
        return jsonify(error="Forbidden"), 403

    reset_attempts(username)
    raw_token, expires_at = create_session(user.id)
    log_event("ADMIN_LOGIN_SUCCESS", user_id=user.id)

    return jsonify(token=raw_token, userId=user.id, expiresAt=expires_at.isoformat()), 200


@auth_bp.post("/admin/logout")
@require_admin
def admin_logout():
    revoked = revoke_session(bearer_token())
    log_event("ADMIN_LOGOUT", context={"revoked": revoked})
    return jsonify(message="Logged out"), 200
