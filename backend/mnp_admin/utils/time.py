"""Time Utilities - UTC timestamps and tolerant timestamp resolution"""
from datetime import datetime, timezone
from typing import Any, Optional
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string
    
    Args:
        dt: Datetime object
        
    Returns:
        ISO formatted string with Z suffix for UTC
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 string to datetime
    
    Returns:
        Datetime object in UTC
    """
    dt = date_parser.isoparse(iso_string)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def resolve_timestamp(value: Any) -> Optional[datetime]:
    """
    Resolve a stored submission timestamp to an aware UTC datetime.
    
    Accepts datetime objects, ISO 8601 strings, epoch milliseconds and
    {"seconds": ..., "nanoseconds": ...} maps (exported server timestamps).
    Anything else, including None, resolves to None.
    """
    if value is None or isinstance(value, bool):
        return None
    
    try:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        
        if isinstance(value, str):
            if not value.strip():
                return None
            return parse_iso(value.strip())
        
        if isinstance(value, dict) and "seconds" in value:
            seconds = float(value["seconds"])
            nanos = float(value.get("nanoseconds", 0) or 0)
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
    except (ValueError, TypeError, OverflowError, OSError):
        return None
    
    return None


def timestamp_millis(dt: Optional[datetime]) -> int:
    """Epoch milliseconds for sorting; unresolved timestamps sort as 0"""
    if dt is None:
        return 0
    return int(dt.timestamp() * 1000)
