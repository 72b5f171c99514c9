"""
Time utilities
"""
import time
from datetime import datetime, timezone

# Fixed width, UTC, sorts lexicographically in chronological order
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

def now() -> datetime:
    """Get current UTC time"""
    return datetime.now(timezone.utc)

def now_ms() -> int:
    """Get current timestamp in milliseconds"""
    return int(time.time() * 1000)

def format_date(value: datetime) -> str:
    """Serialize a datetime as a stored date string. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(DATE_FORMAT)

def parse_date(value: str) -> datetime:
    """Parse a stored date string into an aware UTC datetime"""
    return datetime.strptime(value, DATE_FORMAT).replace(tzinfo=timezone.utc)
