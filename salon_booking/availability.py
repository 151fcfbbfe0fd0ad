# salon_booking/availability.py

import logging
from datetime import date as Date
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from .config import SALON_TIMEZONE
from .core import (
    MINUTE_MS,
    Interval,
    clip_interval,
    day_bounds,
    hour_to_unix,
    subtract_intervals,
    unix_to_hour,
)
from .schemas import DayOfWeek, ExceptionScope, TimeWindow, is_blocking

logger = logging.getLogger(__name__)

END_OF_DAY = "24:00"


def open_interval(entries: Iterable, day: Date, tz: ZoneInfo) -> Optional[Interval]:
    """Opening hours for `day` from weekly schedule entries, or None when closed.

    A missing row, a closed row and a malformed row all mean closed.
    """
    weekday = DayOfWeek.from_date(day)
    entry = None
    for e in entries:
        if e.day_of_week == weekday:
            entry = e
            break
    if entry is None or not entry.is_open:
        return None

    try:
        start = hour_to_unix(day, entry.start_hour, tz)
        end = hour_to_unix(day, entry.end_hour, tz)
    except ValueError as e:
        logger.warning(f"Malformed schedule for {weekday.value}, treating as closed: {e}")
        return None

    if start >= end:
        logger.warning(f"Schedule for {weekday.value} starts at or after its end, treating as closed")
        return None
    return Interval(start, end)


def _applies_to(block, staff_id: int) -> bool:
    """Staff blocks only bind their owner; salon and unrecognised scopes bind everyone."""
    scope = getattr(block.scope, "value", block.scope)
    if scope == ExceptionScope.staff.value:
        return block.owner_id == staff_id
    return True


def earliest_start(now_ms: int, later_minutes: int, granularity_minutes: int, day: Date, tz: ZoneInfo) -> int:
    """First bookable instant today: now + lead time, rounded up onto the day's step grid."""
    raw = now_ms + later_minutes * MINUTE_MS
    origin = day_bounds(day, tz).start
    step = max(1, granularity_minutes) * MINUTE_MS
    steps = -(-(raw - origin) // step)  # ceil
    return origin + steps * step


def resolve(
    staff_id: int,
    day: Date,
    reserved_minutes: int,
    weekly_schedule: Iterable,
    staff_exceptions: Iterable,
    salon_exceptions: Iterable,
    existing_reservations: Iterable,
    granularity_minutes: int,
    *,
    salon_schedule: Optional[Iterable] = None,
    not_before: Optional[int] = None,
    tz: ZoneInfo = SALON_TIMEZONE,
) -> List[TimeWindow]:
    """Bookable windows of exactly `reserved_minutes` for one staff member on one day.

    Windows start at the beginning of each free interval and step forward by
    `granularity_minutes`. The list is chronological. Never raises on bad
    schedule data; it answers with no windows instead.
    """
    if reserved_minutes <= 0 or granularity_minutes <= 0:
        return []

    # 1) Staff opening hours for the weekday
    staff_entries = [e for e in weekly_schedule if getattr(e, "staff_id", staff_id) == staff_id]
    available = open_interval(staff_entries, day, tz)
    if available is None:
        return []

    # 2) Narrow to salon hours and the earliest bookable instant
    if salon_schedule is not None:
        salon_hours = open_interval(salon_schedule, day, tz)
        if salon_hours is None:
            return []
        available = clip_interval(available, salon_hours)
        if available is None:
            return []
    if not_before is not None:
        available = clip_interval(available, Interval(not_before, available.end))
        if available is None:
            return []

    bounds = day_bounds(day, tz)
    cuts: List[Interval] = []

    # 3) Exception blocks, staff-level for this staff and every other one
    blocks = [b for b in [*staff_exceptions, *salon_exceptions] if _applies_to(b, staff_id)]
    for b in blocks:
        if b.date != day:
            continue
        if b.is_all_day:
            return []
        if b.start_time_unix is None or b.end_time_unix is None:
            logger.warning(f"Partial exception on {day} without times, treating day as closed")
            return []
        clipped = clip_interval(Interval(b.start_time_unix, b.end_time_unix), bounds)
        if clipped is not None:
            cuts.append(clipped)

    # 4) Existing reservations of this staff that still hold their time
    for r in existing_reservations:
        if r.staff_id != staff_id or not is_blocking(r.status):
            continue
        clipped = clip_interval(Interval(r.start_time_unix, r.end_time_unix), bounds)
        if clipped is not None:
            cuts.append(clipped)

    free = subtract_intervals([available], cuts)

    # 5) Slide a fixed-width window across each free interval
    duration = reserved_minutes * MINUTE_MS
    step = granularity_minutes * MINUTE_MS
    windows: List[TimeWindow] = []
    for interval in free:
        start = interval.start
        while start + duration <= interval.end:
            end = start + duration
            windows.append(
                TimeWindow(
                    start_hour=unix_to_hour(start, tz),
                    end_hour=END_OF_DAY if end == bounds.end else unix_to_hour(end, tz),
                    start_time_unix=start,
                    end_time_unix=end,
                )
            )
            start += step

    logger.debug(f"Staff {staff_id} on {day}: {len(free)} free intervals, {len(windows)} windows")
    return windows
