# salon_booking/routers/reservations_routes.py

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from salon_booking import capacity, services
from salon_booking.config import SALON_TIMEZONE
from salon_booking.core import day_bounds, hour_to_unix
from salon_booking.db import get_session
from salon_booking.draft import BookingDraft, DraftProblem, draft_durations, validate_draft
from salon_booking.models import Reservation
from salon_booking.queries import (
    get_reservation_config,
    get_staff,
    list_menu_exclusions,
    list_salon_reservations,
    load_menu_catalog,
    load_option_catalog,
)
from salon_booking.schemas import ReservationCreate, ReservationPublic, ReservationStatus
from salon_booking.selection import eligible_staff

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["reservations"],
)

DRAFT_MESSAGES = {
    DraftProblem.no_menu: "Select at least one menu",
    DraftProblem.too_many_menus: "Too many menus selected",
    DraftProblem.too_many_options: "Too many options selected",
    DraftProblem.unknown_item: "Selected menu or option is not available",
    DraftProblem.duplicate_item: "Each menu or option may appear only once",
    DraftProblem.over_order_limit: "Option ordered more times than allowed per reservation",
    DraftProblem.category_conflict: "Selected menus overlap in category",
}


@router.post("/salons/{salon_id}/reservations", response_model=ReservationPublic, status_code=201)
def create_reservation(
    salon_id: int,
    body: ReservationCreate,
    session: Session = Depends(get_session),
):
    # 1) Staff and date
    if get_staff(session, salon_id, body.staff_id) is None:
        raise HTTPException(status_code=404, detail="Staff Not Found")
    config = get_reservation_config(session, salon_id)
    services.check_bookable_date(body.date, config)

    # 2) Validate the selection
    menu_catalog = load_menu_catalog(session, salon_id)
    option_catalog = load_option_catalog(session, salon_id)
    draft = BookingDraft(
        menus=tuple(body.menus),
        options=tuple(body.options),
        staff_id=body.staff_id,
        date=body.date,
    )
    check = validate_draft(draft, menu_catalog, option_catalog, require_window=False)
    if not check.ok:
        raise HTTPException(status_code=422, detail=DRAFT_MESSAGES.get(check.reasons[0], "Invalid selection"))

    menu_ids = [line.item_id for line in draft.menus]
    if not eligible_staff(menu_ids, [body.staff_id], list_menu_exclusions(session, salon_id)):
        raise HTTPException(status_code=422, detail="Staff cannot perform the selected menus")

    totals = draft_durations(draft, menu_catalog, option_catalog)
    if totals.reserved_minutes <= 0:
        raise HTTPException(status_code=422, detail="Selected menus have no duration")

    # 3) The requested start must be one of the offered windows
    try:
        start_unix = hour_to_unix(body.date, body.start_hour, SALON_TIMEZONE)
    except ValueError:
        raise HTTPException(status_code=422, detail="start_hour must be HH:MM")

    windows = services.compute_windows(
        session, salon_id, body.staff_id, body.date, totals.reserved_minutes, config
    )
    window = next((w for w in windows if w.start_time_unix == start_unix), None)
    if window is None:
        logger.info(f"Slot {body.date} {body.start_hour} not available for staff {body.staff_id}")
        raise HTTPException(status_code=409, detail="Selected time is no longer available")

    # 4) Re-check capacity and staff overlap right before commit
    overlapping = list_salon_reservations(session, salon_id, window.start_time_unix, window.end_time_unix)
    seats = capacity.validate(
        window.start_time_unix, window.end_time_unix, config.available_sheet, overlapping
    )
    if not seats.is_available:
        logger.info(
            f"Capacity exceeded for salon {salon_id} at {body.date} {body.start_hour}: "
            f"{seats.current_count}/{config.available_sheet}"
        )
        raise HTTPException(status_code=409, detail="Booking capacity exceeded for this time, choose another time")
    if capacity.has_staff_conflict(body.staff_id, window.start_time_unix, window.end_time_unix, overlapping):
        raise HTTPException(status_code=409, detail="Staff already has a reservation at this time")

    # 5) Persist
    db_reservation = Reservation(
        salon_id=salon_id,
        staff_id=body.staff_id,
        customer_name=body.customer_name,
        date=body.date,
        start_time_unix=window.start_time_unix,
        end_time_unix=window.end_time_unix,
        status=ReservationStatus.confirmed.value,
        menus=[line.model_dump() for line in draft.menus],
        options=[line.model_dump() for line in draft.options],
        working_minutes=totals.working_minutes,
        reserved_minutes=totals.reserved_minutes,
    )
    session.add(db_reservation)
    session.commit()
    session.refresh(db_reservation)

    logger.info(
        f"Reservation {db_reservation.id} created: staff {body.staff_id} "
        f"{body.date} {window.start_hour}-{window.end_hour}"
    )
    return db_reservation


@router.patch("/reservations/{reservation_id}/cancel", response_model=ReservationPublic)
def cancel_reservation(
    reservation_id: int,
    session: Session = Depends(get_session),
):
    # 1) Find the reservation in DB
    target = session.get(Reservation, reservation_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Reservation not found")

    # 2) Already cancelled?
    if target.status == ReservationStatus.cancelled.value:
        raise HTTPException(status_code=409, detail="Reservation already cancelled")

    # 3) Cancel and persist
    target.status = ReservationStatus.cancelled.value
    session.add(target)
    session.commit()
    session.refresh(target)

    logger.info(f"Reservation {reservation_id} cancelled")
    return target


@router.get("/salons/{salon_id}/staff/{staff_id}/reservations", response_model=List[ReservationPublic])
def list_staff_reservations(
    salon_id: int,
    staff_id: int,
    status: Optional[str] = "confirmed",
    on_date: Optional[date] = None,
    session: Session = Depends(get_session),
):
    allowed = {s.value for s in ReservationStatus} | {"all"}
    if status not in allowed:
        raise HTTPException(status_code=422, detail=f"status must be one of {sorted(allowed)}")

    stmt = (
        select(Reservation)
        .where(Reservation.salon_id == salon_id)
        .where(Reservation.staff_id == staff_id)
    )

    if on_date is not None:
        bounds = day_bounds(on_date, SALON_TIMEZONE)
        stmt = stmt.where(Reservation.start_time_unix >= bounds.start).where(Reservation.start_time_unix < bounds.end)

    if status != "all":
        stmt = stmt.where(Reservation.status == status)

    stmt = stmt.order_by(Reservation.start_time_unix)

    return session.exec(stmt).all()
