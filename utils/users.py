from flask import current_app
from sqlalchemy import func

from models import db
from models.user import User

def next_user_id() -> int:
    floor = current_app.config.get("USER_ID_FLOOR", 212399)
    current_max = db.session.query(func.max(User.id)).scalar()
    return max(current_max or floor, floor) + 1

def display_name(user: User) -> str:
    return user.last_name or user.username

def parse_user_id(value):
    """Accepts ints and digit strings; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
