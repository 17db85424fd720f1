"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import Any, Optional

ONE_DAY = timedelta(days=1)


def ceil_days(start: datetime, end: datetime) -> int:
    """Whole days between two timestamps, rounded up (partial days count as one)"""
    full_days, remainder = divmod(end - start, ONE_DAY)
    return full_days + (1 if remainder else 0)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or date; unparseable input yields None"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    # Backend timestamps use a trailing Z for UTC
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
