# salon_booking/core.py

from datetime import date as Date, datetime, time, timedelta
from typing import Iterable, List, NamedTuple, Optional
from zoneinfo import ZoneInfo

MINUTE_MS = 60 * 1000


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    return start_a < end_b and start_b < end_a


class Interval(NamedTuple):
    """Half-open interval [start, end) in Unix milliseconds."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return max(0, self.end - self.start)

    def is_empty(self) -> bool:
        return self.end <= self.start


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Union of the given intervals, sorted. Touching intervals are joined."""
    ordered = sorted(i for i in intervals if not i.is_empty())
    merged: List[Interval] = []
    for current in ordered:
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Interval(last.start, max(last.end, current.end))
        else:
            merged.append(current)
    return merged


def subtract_intervals(base: Iterable[Interval], cuts: Iterable[Interval]) -> List[Interval]:
    """Remove every cut from the base intervals.

    Cuts are merged first so overlapping cuts never re-split a piece that an
    earlier cut already removed. The result is sorted and disjoint.
    """
    merged_cuts = merge_intervals(cuts)
    result: List[Interval] = []
    for piece in merge_intervals(base):
        remaining = [piece]
        for cut in merged_cuts:
            next_remaining = []
            for slot in remaining:
                if not overlaps(slot.start, slot.end, cut.start, cut.end):
                    next_remaining.append(slot)
                    continue
                if slot.start < cut.start:
                    next_remaining.append(Interval(slot.start, cut.start))
                if cut.end < slot.end:
                    next_remaining.append(Interval(cut.end, slot.end))
            remaining = next_remaining
        result.extend(remaining)
    return sorted(result)


def clip_interval(interval: Interval, bounds: Interval) -> Optional[Interval]:
    clipped = Interval(max(interval.start, bounds.start), min(interval.end, bounds.end))
    if clipped.is_empty():
        return None
    return clipped


# --- "HH:MM" and timestamp conversions ---

def hour_to_minutes(hour: str) -> int:
    """'09:30' -> 570. Raises ValueError for anything that isn't a valid HH:MM."""
    parts = hour.split(":") if isinstance(hour, str) else []
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid hour string: {hour!r}")
    h, m = int(parts[0]), int(parts[1])
    # 24:00 is allowed as an end-of-day marker
    if not (0 <= m < 60) or not (0 <= h < 24 or (h == 24 and m == 0)):
        raise ValueError(f"Invalid hour string: {hour!r}")
    return h * 60 + m


def minutes_to_hour(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_start(day: Date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def to_unix_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def from_unix_ms(ms: int, tz: ZoneInfo) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=tz)


def hour_to_unix(day: Date, hour: str, tz: ZoneInfo) -> int:
    """Absolute timestamp of the wall-clock time `hour` on `day` in `tz`."""
    minutes = hour_to_minutes(hour)
    return to_unix_ms(day_start(day, tz) + timedelta(minutes=minutes))


def unix_to_hour(ms: int, tz: ZoneInfo) -> str:
    return from_unix_ms(ms, tz).strftime("%H:%M")


def day_bounds(day: Date, tz: ZoneInfo) -> Interval:
    start = day_start(day, tz)
    end = day_start(day + timedelta(days=1), tz)
    return Interval(to_unix_ms(start), to_unix_ms(end))
