from datetime import datetime
from models.db import db

SLOT_TYPES = ("opening", "closing")

class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    date_id = db.Column(db.Integer, db.ForeignKey("dates.id"), nullable=False, index=True)
    slot_type = db.Column(db.String(10), nullable=False)  # opening, closing
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # display values shown on the rota
    title = db.Column(db.String(40), nullable=False, default="")
    name = db.Column(db.String(120), nullable=False, default="")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    date_slot = db.relationship("DateSlot", back_populates="bookings")
    user = db.relationship("User", back_populates="booking")

    __table_args__ = (
        # one booking per slot
        db.UniqueConstraint("date_id", "slot_type", name="uq_booking_date_slot"),
        # one booking per user across all dates
        db.UniqueConstraint("user_id", name="uq_booking_user_once"),
    )
