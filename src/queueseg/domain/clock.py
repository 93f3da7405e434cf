"""Time arithmetic for slot and break labels.

Two label conventions coexist and are parsed by separate functions:

- Break labels carry an explicit period ("11:15 AM").
- Slot labels do not ("1:00 - 2:00"). Their hours are resolved by range:
  10, 11 and 12 are taken as written, 1 through 9 are shifted into the
  afternoon. The default board runs from mid-morning into the evening.

Malformed labels never raise. They degrade to 0 minutes or ``None``.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

_BREAK_TIME_RE = re.compile(r"(\d+):(\d+)\s*(AM|PM)", re.IGNORECASE)
_SLOT_TIME_RE = re.compile(r"(\d+):(\d+)")
_OPTIONAL_PERIOD_RE = re.compile(r"(\d+):(\d+)\s*(AM|PM)?", re.IGNORECASE)

SLOT_SEPARATOR = " - "
MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class SlotInterval:
    """Half-open interval [start, end) in minutes from midnight."""

    start: int
    end: int

    @property
    def duration_minutes(self) -> int:
        """Length of the interval in minutes."""
        return self.end - self.start

    def overlaps(self, start: int, end: int) -> bool:
        """Check if [start, end) overlaps this interval."""
        return start < self.end and end > self.start


def parse_time_to_minutes(label: str) -> int:
    """Parse an "H:MM AM|PM" label into minutes since midnight.

    Args:
        label: Time label with explicit period.

    Returns:
        Minutes since midnight, or 0 if the label is malformed.
    """
    match = _BREAK_TIME_RE.search(label or "")
    if not match:
        return 0
    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()

    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0

    return hours * 60 + minutes


def _resolve_slot_hour(hour: int) -> int:
    # 10-12 as written, 1-9 are afternoon/evening
    if 1 <= hour <= 9:
        return hour + 12
    return hour


def parse_slot_interval(label: str) -> Optional[SlotInterval]:
    """Convert a "start - end" slot label into a minute interval.

    Args:
        label: Slot label such as "12:00 - 1:00".

    Returns:
        SlotInterval, or None if the label does not have exactly two
        parseable sides.
    """
    parts = (label or "").split(SLOT_SEPARATOR)
    if len(parts) != 2:
        return None

    start_match = _SLOT_TIME_RE.search(parts[0])
    end_match = _SLOT_TIME_RE.search(parts[1])
    if not start_match or not end_match:
        return None

    start_hour = _resolve_slot_hour(int(start_match.group(1)))
    end_hour = _resolve_slot_hour(int(end_match.group(1)))

    return SlotInterval(
        start=start_hour * 60 + int(start_match.group(2)),
        end=end_hour * 60 + int(end_match.group(2)),
    )


def parse_slot_end_minutes(label: str) -> Optional[int]:
    """Get the end time of a slot label in minutes.

    An explicit AM/PM on the end side is honoured; otherwise the slot hour
    convention applies.
    """
    parts = (label or "").split(SLOT_SEPARATOR)
    if len(parts) != 2:
        return None

    match = _OPTIONAL_PERIOD_RE.search(parts[1].strip())
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper() if match.group(3) else None

    if period is None:
        hours = _resolve_slot_hour(hours)
    elif period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    return hours * 60 + minutes


def is_valid_slot_label(label: str) -> bool:
    """Check if a slot label can be converted to an interval."""
    return parse_slot_interval(label) is not None


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as an "H:MM AM|PM" label."""
    minutes %= MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    period = "AM" if hours < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {period}"


def philippines_now(
    utc_now: Optional[datetime] = None,
    offset_hours: int = 8,
) -> datetime:
    """Get the current wall-clock time at a fixed UTC offset.

    Args:
        utc_now: Reference instant; defaults to the system clock.
        offset_hours: Offset from UTC (Philippines is +8, no DST).
    """
    if utc_now is None:
        utc_now = datetime.now(timezone.utc)
    elif utc_now.tzinfo is None:
        utc_now = utc_now.replace(tzinfo=timezone.utc)
    return utc_now.astimezone(timezone(timedelta(hours=offset_hours)))


def current_minutes(
    utc_now: Optional[datetime] = None,
    offset_hours: int = 8,
) -> int:
    """Minutes since local midnight at the fixed offset."""
    local = philippines_now(utc_now, offset_hours)
    return local.hour * 60 + local.minute
