from .health import health_bp
from .auth import auth_bp
from .admin import admin_bp
from .booking import booking_bp
from .cancellations import cancellations_bp
from .audit_logs import audit_bp
