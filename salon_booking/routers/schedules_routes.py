# salon_booking/routers/schedules_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from salon_booking.config import SALON_TIMEZONE
from salon_booking.core import hour_to_minutes, hour_to_unix
from salon_booking.db import get_session
from salon_booking.models import ExceptionSchedule, SalonWeekSchedule, StaffWeekSchedule
from salon_booking.queries import find_salon_week_schedule, find_staff_week_schedule, get_staff
from salon_booking.schemas import (
    ExceptionCreate,
    ExceptionPublic,
    ExceptionScope,
    WeekScheduleUpdate,
    WeeklyScheduleEntry,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/salons/{salon_id}",
    tags=["schedules"],
)


def validate_week_entries(entries: List[WeeklyScheduleEntry]):
    days = [e.day_of_week for e in entries]
    if not days:
        raise HTTPException(status_code=422, detail="entries must contain at least one day")
    if len(days) != len(set(days)):
        raise HTTPException(status_code=422, detail="entries cannot contain duplicate days")
    for e in entries:
        if not e.is_open:
            continue
        try:
            start = hour_to_minutes(e.start_hour)
            end = hour_to_minutes(e.end_hour)
        except ValueError:
            raise HTTPException(status_code=422, detail=f"{e.day_of_week.value}: hours must be HH:MM")
        if start >= end:
            raise HTTPException(status_code=422, detail=f"{e.day_of_week.value}: start_hour must be before end_hour")


def _entry(row) -> dict:
    return {
        "day_of_week": row.day_of_week,
        "is_open": row.is_open,
        "start_hour": row.start_hour,
        "end_hour": row.end_hour,
    }


@router.put("/staff/{staff_id}/week-schedule", response_model=List[WeeklyScheduleEntry])
def update_staff_week_schedule(
    salon_id: int,
    staff_id: int,
    schedule: WeekScheduleUpdate,
    session: Session = Depends(get_session),
):
    if get_staff(session, salon_id, staff_id) is None:
        raise HTTPException(status_code=404, detail="Staff Not Found")
    validate_week_entries(schedule.entries)

    # DB upsert: one row per staff and weekday
    existing = {row.day_of_week: row for row in find_staff_week_schedule(session, staff_id)}
    for e in schedule.entries:
        row = existing.get(e.day_of_week.value)
        if row is None:
            row = StaffWeekSchedule(salon_id=salon_id, staff_id=staff_id, day_of_week=e.day_of_week.value)
            existing[row.day_of_week] = row
        row.is_open = e.is_open
        row.start_hour = e.start_hour
        row.end_hour = e.end_hour
        session.add(row)

    session.commit()
    logger.info(f"Week schedule updated for staff {staff_id}")
    return [_entry(row) for row in find_staff_week_schedule(session, staff_id)]


@router.get("/staff/{staff_id}/week-schedule", response_model=List[WeeklyScheduleEntry])
def get_staff_week_schedule(
    salon_id: int,
    staff_id: int,
    session: Session = Depends(get_session),
):
    if get_staff(session, salon_id, staff_id) is None:
        raise HTTPException(status_code=404, detail="Staff Not Found")
    return [_entry(row) for row in find_staff_week_schedule(session, staff_id)]


@router.put("/week-schedule", response_model=List[WeeklyScheduleEntry])
def update_salon_week_schedule(
    salon_id: int,
    schedule: WeekScheduleUpdate,
    session: Session = Depends(get_session),
):
    validate_week_entries(schedule.entries)

    existing = {row.day_of_week: row for row in find_salon_week_schedule(session, salon_id) or []}
    for e in schedule.entries:
        row = existing.get(e.day_of_week.value)
        if row is None:
            row = SalonWeekSchedule(salon_id=salon_id, day_of_week=e.day_of_week.value)
            existing[row.day_of_week] = row
        row.is_open = e.is_open
        row.start_hour = e.start_hour
        row.end_hour = e.end_hour
        session.add(row)

    session.commit()
    logger.info(f"Week schedule updated for salon {salon_id}")
    return [_entry(row) for row in find_salon_week_schedule(session, salon_id) or []]


def _create_exception(session: Session, salon_id: int, scope: ExceptionScope, owner_id: int, block: ExceptionCreate):
    if block.is_all_day:
        start_unix = end_unix = None
    else:
        if block.start_hour is None or block.end_hour is None:
            raise HTTPException(status_code=422, detail="start_hour and end_hour are required unless is_all_day")
        try:
            start_unix = hour_to_unix(block.date, block.start_hour, SALON_TIMEZONE)
            end_unix = hour_to_unix(block.date, block.end_hour, SALON_TIMEZONE)
        except ValueError:
            raise HTTPException(status_code=422, detail="hours must be HH:MM")
        if start_unix >= end_unix:
            raise HTTPException(status_code=422, detail="start_hour must be before end_hour")

    # Overlapping blocks are allowed; availability merges them
    db_block = ExceptionSchedule(
        salon_id=salon_id,
        scope=scope.value,
        owner_id=owner_id,
        date=block.date,
        start_time_unix=start_unix,
        end_time_unix=end_unix,
        is_all_day=block.is_all_day,
        kind=block.kind.value,
    )
    session.add(db_block)
    session.commit()
    session.refresh(db_block)
    logger.info(f"Exception {db_block.id} added for {scope.value} {owner_id} on {block.date}")
    return db_block


@router.post("/staff/{staff_id}/exceptions", response_model=ExceptionPublic, status_code=201)
def add_staff_exception(
    salon_id: int,
    staff_id: int,
    block: ExceptionCreate,
    session: Session = Depends(get_session),
):
    if get_staff(session, salon_id, staff_id) is None:
        raise HTTPException(status_code=404, detail="Staff Not Found")
    return _create_exception(session, salon_id, ExceptionScope.staff, staff_id, block)


@router.post("/exceptions", response_model=ExceptionPublic, status_code=201)
def add_salon_exception(
    salon_id: int,
    block: ExceptionCreate,
    session: Session = Depends(get_session),
):
    return _create_exception(session, salon_id, ExceptionScope.salon, salon_id, block)
