"""
Date and time utilities for the mapping engine.
Provides parsing of loosely formatted source values and the timestamps used for
system defaults.
"""

from datetime import datetime, date, time, timezone
from typing import Optional

from dateutil import parser

from docmapper.utils.logger import get_logger

logger = get_logger(__name__)

# Common date formats
COMMON_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y%m%d",
    "%Y%m%d%H%M%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d-%m-%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
]

COMMON_TIME_FORMATS = [
    "%H:%M:%S",
    "%H:%M",
    "%H:%M:%S.%f",
]


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, as stored by the models."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utc_now().date()


def parse_datetime(date_string: str,
                   format_string: Optional[str] = None) -> Optional[datetime]:
    """
    Parse string to datetime with multiple format support.

    Args:
        date_string: String to parse
        format_string: Specific format to try first

    Returns:
        Parsed datetime object or None if parsing fails
    """
    if not date_string or not isinstance(date_string, str):
        return None

    date_string = date_string.strip()

    if format_string:
        try:
            return datetime.strptime(date_string, format_string)
        except ValueError:
            pass

    for fmt in COMMON_DATE_FORMATS:
        try:
            return datetime.strptime(date_string, fmt)
        except ValueError:
            continue

    # dateutil handles ISO variants and offsets the fixed formats miss
    try:
        dt = parser.isoparse(date_string)
    except ValueError:
        try:
            dt = parser.parse(date_string, fuzzy=False)
        except (ValueError, OverflowError, parser.ParserError):
            logger.debug(f"Unparseable date value: {date_string!r}")
            return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_time(time_string: str, format_string: Optional[str] = None) -> Optional[time]:
    """
    Parse string to time. Falls back to the time part of a full date-time.

    Args:
        time_string: String to parse
        format_string: Specific format to try first

    Returns:
        Parsed time or None if parsing fails
    """
    if not time_string or not isinstance(time_string, str):
        return None

    time_string = time_string.strip()
    formats = [format_string] if format_string else []

    for fmt in formats + COMMON_TIME_FORMATS:
        try:
            return datetime.strptime(time_string, fmt).time()
        except ValueError:
            continue

    dt = parse_datetime(time_string)
    return dt.time() if dt else None
