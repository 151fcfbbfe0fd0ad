# salon_booking/services.py

from datetime import date as Date, datetime, timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlmodel import Session

from .availability import earliest_start, resolve
from .config import SALON_TIMEZONE
from .core import day_bounds, to_unix_ms
from .models import ReservationConfig
from .queries import (
    find_salon_week_schedule,
    find_staff_week_schedule,
    list_salon_exceptions,
    list_staff_exceptions,
    list_staff_reservations,
)
from .schemas import TimeWindow


def now_ms() -> int:
    return to_unix_ms(datetime.now(SALON_TIMEZONE))


def today() -> Date:
    return datetime.now(SALON_TIMEZONE).date()


def check_bookable_date(day: Date, config: ReservationConfig):
    """422 unless `day` is between today and the salon's booking horizon."""
    first = today()
    last = first + timedelta(days=config.reservation_limit_days)
    if day < first:
        raise HTTPException(status_code=422, detail="Cannot book a date in the past")
    if day > last:
        raise HTTPException(
            status_code=422,
            detail=f"Reservations are accepted up to {config.reservation_limit_days} days ahead",
        )


def compute_windows(
    session: Session,
    salon_id: int,
    staff_id: int,
    day: Date,
    duration_min: int,
    config: ReservationConfig,
) -> List[TimeWindow]:
    """Load one consistent snapshot for (staff, day) and resolve it."""
    bounds = day_bounds(day, SALON_TIMEZONE)

    not_before: Optional[int] = None
    if day == today():
        not_before = earliest_start(
            now_ms(),
            config.today_first_later_minutes,
            config.interval_minutes,
            day,
            SALON_TIMEZONE,
        )

    return resolve(
        staff_id,
        day,
        duration_min,
        find_staff_week_schedule(session, staff_id),
        list_staff_exceptions(session, staff_id, day, day),
        list_salon_exceptions(session, salon_id, day, day),
        list_staff_reservations(session, staff_id, bounds.start, bounds.end),
        config.interval_minutes,
        salon_schedule=find_salon_week_schedule(session, salon_id),
        not_before=not_before,
        tz=SALON_TIMEZONE,
    )
