# fitbit_tcx/tcx/timestamps.py
"""
RFC 3339 timestamp handling for TCX fields.
"""

from __future__ import annotations
import re
from datetime import datetime, timedelta, timezone

from ..errors import TimestampParseError

# date "T" time, optional fraction, mandatory "Z" or numeric offset
RFC3339_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Raises:
        TimestampParseError: empty or malformed input
    """
    if not value:
        raise TimestampParseError("cannot parse empty timestamp")

    text = value.strip()
    match = RFC3339_RE.match(text)
    if not match:
        raise TimestampParseError(f"cannot parse '{value}' as RFC 3339")

    year, month, day, hour, minute, second, fraction, offset = match.groups()
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if offset[0] == "+" else -1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise TimestampParseError(f"cannot parse '{value}' as RFC 3339: bad offset")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    microseconds = int((fraction or ".0")[1:7].ljust(6, "0"))
    try:
        parsed = datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second),
            microseconds, tzinfo=tz,
        )
    except ValueError as e:
        raise TimestampParseError(f"cannot parse '{value}' as RFC 3339: {e}") from e

    return parsed.astimezone(timezone.utc)


def format_utc(when: datetime) -> str:
    """Format as RFC 3339 in UTC with whole seconds ("...Z")."""
    return when.astimezone(timezone.utc).strftime(UTC_FORMAT)


def convert_timestamp(timestamp: str, offset: timedelta = timedelta(0)) -> str:
    """
    Convert an RFC 3339 timestamp to UTC and shift it.

    Examples:
        >>> convert_timestamp("2024-09-07T10:00:00Z", timedelta(seconds=30))
        '2024-09-07T10:00:30Z'
    """
    return format_utc(parse_rfc3339(timestamp) + offset)
