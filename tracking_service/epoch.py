"""
TLE Epoch Handling

Decodes the epoch field of a two-line element set (2-digit year plus
fractional day-of-year) and resolves "minutes since epoch" for propagation.

Two resolution policies share one interface:

* ABSOLUTE: the epoch decoded once at parse time. Used while sweeping a pass
  search window so every sample shares the same reference.
* NEAREST_YEAR: the stored day-of-year re-anchored to whichever of the
  previous, current or next calendar year of the requested instant lies
  closest to it. Used for live positions so a calendar-year rollover never
  produces a huge minutes-since-epoch value.
"""

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Tuple

from config import EPOCH_PIVOT_YEAR
from tracking_service.errors import ParseError


class EpochResolution(Enum):
    """How an instant is referenced to an element set's epoch."""

    ABSOLUTE = "absolute"
    NEAREST_YEAR = "nearest_year"


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def full_year(two_digit_year: int) -> int:
    """Expand a 2-digit TLE year using the 1957 pivot."""
    if two_digit_year >= EPOCH_PIVOT_YEAR:
        return 1900 + two_digit_year
    return 2000 + two_digit_year


def decode_epoch_field(field: str) -> Tuple[int, float]:
    """
    Decode a ``YYDDD.DDDDDDDD`` epoch field.

    Args:
        field: Epoch text, e.g. characters [18, 32) of TLE line 1

    Returns:
        Tuple of (full_year, day_of_year)

    Raises:
        ParseError: If the field is not numeric or the day is out of range
    """
    try:
        value = float(field.strip())
    except ValueError:
        raise ParseError(f"Invalid epoch field {field!r}")

    if not math.isfinite(value) or value < 0:
        raise ParseError(f"Invalid epoch field {field!r}")

    two_digit_year = int(value // 1000)
    day_of_year = value % 1000.0

    if two_digit_year > 99 or not 1.0 <= day_of_year < 367.0:
        raise ParseError(f"Epoch field {field!r} out of range")

    return full_year(two_digit_year), day_of_year


def year_day_to_datetime(year: int, day_of_year: float) -> datetime:
    """Convert year and fractional day-of-year (1.0 = Jan 1 00:00) to UTC."""
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    # Millisecond resolution keeps the conversion exact for round day values
    return start + timedelta(milliseconds=int(round((day_of_year - 1.0) * 86400000.0)))


def nearest_year_epoch(day_of_year: float, instant: datetime) -> datetime:
    """
    Anchor day_of_year to the calendar year that puts it closest to instant.

    The previous or next year is only chosen when it is strictly closer than
    both other candidates; otherwise the instant's own year is kept.
    """
    instant = ensure_utc(instant)
    year = instant.year

    current = year_day_to_datetime(year, day_of_year)
    previous = year_day_to_datetime(year - 1, day_of_year)
    following = year_day_to_datetime(year + 1, day_of_year)

    diff_current = abs((instant - current).total_seconds())
    diff_previous = abs((instant - previous).total_seconds())
    diff_following = abs((instant - following).total_seconds())

    if diff_previous < diff_current and diff_previous < diff_following:
        return previous
    if diff_following < diff_current and diff_following < diff_previous:
        return following
    return current


def resolve_epoch(elements, instant: datetime,
                  mode: EpochResolution = EpochResolution.ABSOLUTE) -> datetime:
    """
    Reference epoch of elements for propagating to instant.

    Args:
        elements: Parsed element set (needs ``epoch`` and ``epoch_day_of_year``)
        instant: Target time
        mode: Epoch resolution policy
    """
    if mode is EpochResolution.NEAREST_YEAR:
        return nearest_year_epoch(elements.epoch_day_of_year, instant)
    return elements.epoch


def minutes_since_epoch(elements, instant: datetime,
                        mode: EpochResolution = EpochResolution.ABSOLUTE) -> float:
    """Minutes from the resolved epoch of elements to instant."""
    instant = ensure_utc(instant)
    epoch = resolve_epoch(elements, instant, mode)
    return (instant - epoch).total_seconds() / 60.0


def epoch_age_days(epoch: datetime, now: datetime) -> int:
    """Whole days between epoch and now, regardless of direction."""
    seconds = abs((ensure_utc(now) - ensure_utc(epoch)).total_seconds())
    return int(seconds // 86400)
