"""Julian day conversions for Visual FoxPro datetime (T) fields.

A T field stores two little-endian int32 values: the Julian day number and
the milliseconds elapsed since midnight. The day number is converted with
the Fliegel-Van Flandern algorithm; the time of day keeps whole seconds
only, so 23:59:59.999 stays on the same day.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def julian_to_date_parts(julian_day: int) -> tuple[int, int, int]:
    """Return (year, month, day) for a Julian day number."""
    s1 = julian_day + 68569
    n = (4 * s1) // 146097
    s2 = s1 - (146097 * n + 3) // 4
    i = (4000 * (s2 + 1)) // 1461001
    s3 = s2 - (1461 * i) // 4 + 31
    q = (80 * s3) // 2447
    f = q // 11
    year = 100 * (n - 49) + i + f
    month = q + 2 - 12 * f
    day = s3 - (2447 * q) // 80
    return year, month, day


def split_milliseconds(ms_since_midnight: int) -> tuple[int, int, int]:
    """Return (hour, minute, second); the sub-second remainder is dropped."""
    total_seconds = ms_since_midnight // 1000
    hour = total_seconds // 3600
    minute = (total_seconds // 60) % 60
    second = total_seconds % 60
    return hour, minute, second


def julian_to_datetime(julian_day: int, ms_since_midnight: int) -> datetime:
    """Convert a (Julian day, ms since midnight) pair to an aware UTC datetime.

    Raises ValueError/OverflowError when the day falls outside the years
    Python can represent (1-9999). Hours past 23 roll over to the next day.
    """
    year, month, day = julian_to_date_parts(julian_day)
    midnight = datetime(year, month, day, tzinfo=timezone.utc)
    hour, minute, second = split_milliseconds(ms_since_midnight)
    return midnight + timedelta(hours=hour, minutes=minute, seconds=second)


def datetime_to_julian(value: datetime) -> tuple[int, int]:
    """Inverse of `julian_to_datetime`. Naive datetimes are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    a = (14 - value.month) // 12
    y = value.year + 4800 - a
    m = value.month + 12 * a - 3
    julian_day = value.day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045
    ms = ((value.hour * 60 + value.minute) * 60 + value.second) * 1000 + value.microsecond // 1000
    return julian_day, ms
