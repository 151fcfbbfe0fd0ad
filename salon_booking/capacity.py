# salon_booking/capacity.py

from typing import Iterable, Optional

from .core import overlaps
from .schemas import CapacityResult, is_blocking


def count_overlapping(
    start_time_unix: int,
    end_time_unix: int,
    reservations: Iterable,
    exclude_reservation_id: Optional[int] = None,
) -> int:
    count = 0
    for r in reservations:
        if exclude_reservation_id is not None and r.id == exclude_reservation_id:
            continue
        if not is_blocking(r.status):
            continue
        if overlaps(start_time_unix, end_time_unix, r.start_time_unix, r.end_time_unix):
            count += 1
    return count


def validate(
    start_time_unix: int,
    end_time_unix: int,
    max_concurrent: int,
    reservations: Iterable,
    exclude_reservation_id: Optional[int] = None,
) -> CapacityResult:
    """Salon-wide seat check for [start, end), across every staff member.

    Run again right before commit: the snapshot the slot picker used may be stale.
    """
    current = count_overlapping(start_time_unix, end_time_unix, reservations, exclude_reservation_id)
    return CapacityResult(is_available=current < max_concurrent, current_count=current)


def has_staff_conflict(
    staff_id: int,
    start_time_unix: int,
    end_time_unix: int,
    reservations: Iterable,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    own = [r for r in reservations if r.staff_id == staff_id]
    return count_overlapping(start_time_unix, end_time_unix, own, exclude_reservation_id) > 0
