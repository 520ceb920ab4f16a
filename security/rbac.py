from functools import wraps
from flask import g, jsonify, current_app

def is_admin(user) -> bool:
    if user is None or not user.enabled:
        return False
    return user.username == current_app.config.get("ADMIN_USERNAME", "admin")

def require_admin(fn):
    """
    Guards /admin/* handlers. Open when ADMIN_AUTH_REQUIRED is off.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_app.config.get("ADMIN_AUTH_REQUIRED", True):
            return fn(*args, **kwargs)

        user = getattr(g, "user", None)
        if user is None:
            return jsonify(error="Authentication required"), 401
        if not is_admin(user):
            return jsonify(error="Forbidden"), 403

        return fn(*args, **kwargs)
    return wrapper
