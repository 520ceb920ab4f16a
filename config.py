import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the app as sundayslot.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "sundayslot.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Admin bearer-token lifetime: 8 hours
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", str(8 * 60 * 60)))

    # When false, /admin/* routes are open (legacy behaviour)
    ADMIN_AUTH_REQUIRED = os.getenv("ADMIN_AUTH_REQUIRED", "true").lower() == "true"

    # Reserved account: the only one allowed to log in as admin, never deletable
    ADMIN_USERNAME = "admin"

    # bcrypt cost factor
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Brute-force protection
    MAX_LOGIN_ATTEMPTS = 5
    LOCKOUT_MINUTES = 1

    # Cancellation policy
    CANCEL_CUTOFF_HOURS = 24

    # Bookable dates must fall on this weekday (Monday=0 ... Sunday=6)
    BOOKING_WEEKDAY = 6

    # New user ids continue above this value
    USER_ID_FLOOR = 212399

    # Title returned on login when the user has none
    DEFAULT_TITLE = "Brother"

    AUDIT_LOG_MAX_LIMIT = 500

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
