from datetime import datetime
from models.db import db

class Cancellation(db.Model):
    __tablename__ = "cancellations"

    id = db.Column(db.Integer, primary_key=True)

    # plain ints: history survives user deletion
    user_id = db.Column(db.Integer, nullable=False, index=True)
    cancelled_by = db.Column(db.Integer, nullable=True)

    date = db.Column(db.Date, nullable=False, index=True)
    slot_type = db.Column(db.String(10), nullable=False)
    reason = db.Column(db.String(255), nullable=False, default="")

    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
