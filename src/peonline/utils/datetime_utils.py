# peonline/utils/datetime_utils.py
"""
Datetime utilities for PE-online attendance submissions.

The ProcessXML operation expects endDate as an ISO 8601 timestamp. Callers
often only know the calendar day, so date-only values are widened to a fixed
submission time before they go on the wire.
"""

import re
from datetime import UTC, date, datetime

# Exactly YYYY-MM-DD, nothing before or after
DATE_ONLY_PATTERN: re.Pattern[str] = re.compile(r'\d{4}-\d{2}-\d{2}')

# Default submission time appended to date-only values (09:00 UTC)
DEFAULT_SUBMISSION_TIME: str = 'T09:00:00+00:00'


def is_date_only(value: str) -> bool:
    """Return True if value is a bare YYYY-MM-DD date without time component."""
    return DATE_ONLY_PATTERN.fullmatch(value) is not None


def normalize_end_date(value: str) -> str:
    """
    Widen a date-only endDate to the default submission timestamp.

    Args:
        value: The endDate as supplied by the caller.

    Returns:
        'YYYY-MM-DDT09:00:00+00:00' for a date-only value, otherwise the
        value unchanged.

    Examples:
        >>> normalize_end_date('2024-09-27')
        '2024-09-27T09:00:00+00:00'
        >>> normalize_end_date('2024-09-27T14:15:00+02:00')
        '2024-09-27T14:15:00+02:00'
    """
    if is_date_only(value):
        return f'{value}{DEFAULT_SUBMISSION_TIME}'
    return value


def format_for_attendance(dt: date | datetime) -> str:
    """
    Format a date or datetime object as an endDate string.

    A date is formatted as YYYY-MM-DD (and is therefore widened to the
    default submission time by the builder). A datetime is formatted as
    YYYY-MM-DDThh:mm:ss+hh:mm with second precision; naive datetimes are
    assumed to be UTC.

    Args:
        dt: A date or datetime object.

    Returns:
        ISO 8601 string suitable for the endDate element.

    Examples:
        >>> format_for_attendance(date(2024, 9, 27))
        '2024-09-27'
        >>> format_for_attendance(datetime(2024, 9, 27, 14, 15))
        '2024-09-27T14:15:00+00:00'
    """
    # datetime is a subclass of date, so it has to be checked first
    if isinstance(dt, datetime):
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.isoformat(timespec='seconds')

    return dt.isoformat()


def parse_end_date(value: str) -> date | datetime | None:
    """
    Parse an endDate string for comparison purposes.

    Args:
        value: The endDate string.

    Returns:
        A date for date-only values, a timezone-aware datetime for timestamps
        (naive timestamps are assumed to be UTC), or None if the value is not
        ISO 8601.
    """
    if is_date_only(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            # e.g. '2024-02-30' matches the pattern but is not a real day
            return None

    try:
        parsed: datetime = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
