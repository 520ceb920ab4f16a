from datetime import datetime
from models.db import db

class User(db.Model):
    __tablename__ = "users"

    # ids are assigned by the app (see utils.users.next_user_id), not autoincremented
    id = db.Column(db.Integer, primary_key=True, autoincrement=False)

    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    title = db.Column(db.String(40), nullable=False, default="")
    first_name = db.Column(db.String(80), nullable=False, default="")
    last_name = db.Column(db.String(80), nullable=False, default="")

    enabled = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    booking = db.relationship("Booking", back_populates="user", uselist=False)
