from datetime import datetime, timedelta
from flask import request, current_app

from models import db
from models.login_attempt import LoginAttempt

def client_ip() -> str:
    return request.headers.get("X-Forwarded-For", request.remote_addr) or "unknown"

def _attempt_row(username: str, create=False):
    row = LoginAttempt.query.filter_by(username=username, ip=client_ip()).first()
    if row is None and create:
        row = LoginAttempt(username=username, ip=client_ip(), fail_count=0)
        db.session.add(row)
    return row

def _lock_remaining(row, now: datetime) -> int:
    """Seconds left on the row's lock, 0 when unlocked or lapsed."""
    if row is None or row.locked_until is None or row.locked_until <= now:
        return 0
    return max(int((row.locked_until - now).total_seconds()), 1)

def is_locked(username: str) -> tuple[bool, int]:
    """
    Returns (locked, seconds_remaining) for this username from this client.
    """
    remaining = _lock_remaining(_attempt_row(username), datetime.utcnow())
    return remaining > 0, remaining

def register_failure(username: str) -> tuple[int, bool]:
    """
    Counts a failed login. Returns (fail_count, locked_now); the lock
    starts once MAX_LOGIN_ATTEMPTS is reached.
    """
    now = datetime.utcnow()
    row = _attempt_row(username, create=True)

    if row.locked_until is not None and _lock_remaining(row, now) == 0:
        # lapsed lock: count afresh
        row.fail_count = 0
        row.locked_until = None

    row.fail_count = (row.fail_count or 0) + 1
    row.last_fail_at = now

    locked_now = row.fail_count >= current_app.config.get("MAX_LOGIN_ATTEMPTS", 5)
    if locked_now:
        row.locked_until = now + timedelta(minutes=current_app.config.get("LOCKOUT_MINUTES", 1))

    db.session.commit()
    return row.fail_count, locked_now

def reset_attempts(username: str):
    row = _attempt_row(username)
    if row is None:
        return
    row.fail_count = 0
    row.last_fail_at = None
    row.locked_until = None
    db.session.commit()
