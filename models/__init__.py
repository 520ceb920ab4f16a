from .db import db
from .user import User
from .date_slot import DateSlot
from .booking import Booking, SLOT_TYPES
from .cancellation import Cancellation
from .audit_log import AuditLog
from .session import Session
from .login_attempt import LoginAttempt
