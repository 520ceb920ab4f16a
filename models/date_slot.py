from datetime import datetime
from models.db import db

class DateSlot(db.Model):
    __tablename__ = "dates"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    bookings = db.relationship("Booking", back_populates="date_slot", lazy="selectin")

    def booking_for(self, slot_type: str):
        for b in self.bookings:
            if b.slot_type == slot_type:
                return b
        return None

    @property
    def is_booked(self) -> bool:
        return len(self.bookings) > 0
