import re
from datetime import date, datetime

from flask import current_app

DATE_FORMAT = "%Y-%m-%d"
# strptime alone accepts single-digit months and days
_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}")

def parse_date(value):
    """Parse a YYYY-MM-DD string. Returns None when malformed."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not _DATE_SHAPE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None

def is_booking_day(day: date) -> bool:
    return day.weekday() == current_app.config.get("BOOKING_WEEKDAY", 6)

def format_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)
