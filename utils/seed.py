from flask import current_app

from models import db
from models.user import User
from security.password import hash_password
from utils.users import next_user_id

def ensure_admin(password: str) -> tuple[User, bool]:
    """
    Creates the reserved admin account, or resets its password and
    re-enables it. Returns (user, created).
    """
    username = current_app.config.get("ADMIN_USERNAME", "admin")
    user = User.query.filter_by(username=username).first()
    created = False
    if not user:
        user = User(id=next_user_id(), username=username, title="", first_name="", last_name="")
        db.session.add(user)
        created = True

    user.password_hash = hash_password(password)
    user.enabled = True
    db.session.commit()
    return user, created
