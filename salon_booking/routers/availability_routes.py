# salon_booking/routers/availability_routes.py

import logging
from datetime import date as Date

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from salon_booking import capacity, services
from salon_booking.db import get_session
from salon_booking.durations import aggregate, combine
from salon_booking.queries import (
    get_reservation_config,
    get_staff,
    list_active_staff_ids,
    list_menu_exclusions,
    list_salon_reservations,
    load_menu_catalog,
    load_option_catalog,
)
from salon_booking.schemas import (
    AvailabilityResponse,
    CapacityResult,
    DurationRequest,
    DurationTotals,
    EligibleStaffRequest,
    EligibleStaffResponse,
)
from salon_booking.selection import eligible_staff

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/salons/{salon_id}",
    tags=["availability"],
)


@router.post("/durations", response_model=DurationTotals)
def total_duration(
    salon_id: int,
    body: DurationRequest,
    session: Session = Depends(get_session),
):
    menu_totals = aggregate(body.menus, load_menu_catalog(session, salon_id))
    option_totals = aggregate(body.options, load_option_catalog(session, salon_id))
    return combine(menu_totals, option_totals)


@router.get("/staff/{staff_id}/availability", response_model=AvailabilityResponse)
def staff_availability(
    salon_id: int,
    staff_id: int,
    date: Date,
    duration_min: int,
    session: Session = Depends(get_session),
):
    # 1) Staff must belong to the salon
    if get_staff(session, salon_id, staff_id) is None:
        raise HTTPException(status_code=404, detail="Staff Not Found")

    # 2) Validate the request
    if duration_min <= 0:
        raise HTTPException(status_code=422, detail="duration_min must be positive")
    config = get_reservation_config(session, salon_id)
    services.check_bookable_date(date, config)

    # 3) Resolve against a fresh snapshot
    windows = services.compute_windows(session, salon_id, staff_id, date, duration_min, config)
    return {"staff_id": staff_id, "date": date, "duration_min": duration_min, "windows": windows}


@router.get("/capacity", response_model=CapacityResult)
def available_sheet_in_range(
    salon_id: int,
    start_time: int,
    end_time: int,
    session: Session = Depends(get_session),
):
    if end_time <= start_time:
        raise HTTPException(status_code=422, detail="end_time must be after start_time")

    config = get_reservation_config(session, salon_id)
    overlapping = list_salon_reservations(session, salon_id, start_time, end_time)
    result = capacity.validate(start_time, end_time, config.available_sheet, overlapping)
    logger.info(
        f"Capacity [{start_time}, {end_time}) salon {salon_id}: "
        f"{result.current_count}/{config.available_sheet}"
    )
    return result


@router.post("/eligible-staff", response_model=EligibleStaffResponse)
def staff_for_menus(
    salon_id: int,
    body: EligibleStaffRequest,
    session: Session = Depends(get_session),
):
    staff_ids = eligible_staff(
        body.menu_ids,
        list_active_staff_ids(session, salon_id),
        list_menu_exclusions(session, salon_id),
    )
    if not staff_ids:
        raise HTTPException(status_code=422, detail="No staff can perform every selected menu")
    return {"staff_ids": staff_ids}
