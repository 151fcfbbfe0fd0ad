# salon_booking/queries.py

from datetime import date as Date
from typing import Dict, List, Optional

from sqlmodel import Session, select

from .config import (
    DEFAULT_AVAILABLE_SHEET,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_RESERVATION_LIMIT_DAYS,
    DEFAULT_TODAY_FIRST_LATER_MINUTES,
)
from .models import (
    ExceptionSchedule,
    Menu,
    MenuExclusionStaff,
    Option,
    Reservation,
    ReservationConfig,
    SalonWeekSchedule,
    Staff,
    StaffWeekSchedule,
)
from .schemas import ExceptionScope, ItemKind, ServiceItem


def get_reservation_config(session: Session, salon_id: int) -> ReservationConfig:
    """The salon's config row, or an unsaved one built from the env defaults."""
    config = session.get(ReservationConfig, salon_id)
    if config is None:
        config = ReservationConfig(
            salon_id=salon_id,
            interval_minutes=DEFAULT_INTERVAL_MINUTES,
            available_sheet=DEFAULT_AVAILABLE_SHEET,
            reservation_limit_days=DEFAULT_RESERVATION_LIMIT_DAYS,
            today_first_later_minutes=DEFAULT_TODAY_FIRST_LATER_MINUTES,
        )
    return config


def get_staff(session: Session, salon_id: int, staff_id: int) -> Optional[Staff]:
    staff = session.get(Staff, staff_id)
    if staff is None or staff.salon_id != salon_id:
        return None
    return staff


def list_active_staff_ids(session: Session, salon_id: int) -> List[int]:
    return list(session.exec(
        select(Staff.id)
        .where(Staff.salon_id == salon_id)
        .where(Staff.is_active == True)  # noqa: E712
        .order_by(Staff.id)
    ).all())


def find_staff_week_schedule(session: Session, staff_id: int) -> List[StaffWeekSchedule]:
    return list(session.exec(
        select(StaffWeekSchedule).where(StaffWeekSchedule.staff_id == staff_id)
    ).all())


def find_salon_week_schedule(session: Session, salon_id: int) -> Optional[List[SalonWeekSchedule]]:
    """None when the salon never set weekly hours, so only staff hours apply."""
    rows = list(session.exec(
        select(SalonWeekSchedule).where(SalonWeekSchedule.salon_id == salon_id)
    ).all())
    return rows or None


def list_staff_exceptions(session: Session, staff_id: int, start: Date, end: Date) -> List[ExceptionSchedule]:
    return list(session.exec(
        select(ExceptionSchedule)
        .where(ExceptionSchedule.scope == ExceptionScope.staff.value)
        .where(ExceptionSchedule.owner_id == staff_id)
        .where(ExceptionSchedule.date >= start)
        .where(ExceptionSchedule.date <= end)
    ).all())


def list_salon_exceptions(session: Session, salon_id: int, start: Date, end: Date) -> List[ExceptionSchedule]:
    return list(session.exec(
        select(ExceptionSchedule)
        .where(ExceptionSchedule.scope == ExceptionScope.salon.value)
        .where(ExceptionSchedule.owner_id == salon_id)
        .where(ExceptionSchedule.date >= start)
        .where(ExceptionSchedule.date <= end)
    ).all())


def list_staff_reservations(session: Session, staff_id: int, start_ms: int, end_ms: int) -> List[Reservation]:
    """Reservations of one staff member overlapping [start_ms, end_ms), any status."""
    return list(session.exec(
        select(Reservation)
        .where(Reservation.staff_id == staff_id)
        .where(Reservation.start_time_unix < end_ms)
        .where(Reservation.end_time_unix > start_ms)
        .order_by(Reservation.start_time_unix)
    ).all())


def list_salon_reservations(session: Session, salon_id: int, start_ms: int, end_ms: int) -> List[Reservation]:
    return list(session.exec(
        select(Reservation)
        .where(Reservation.salon_id == salon_id)
        .where(Reservation.start_time_unix < end_ms)
        .where(Reservation.end_time_unix > start_ms)
        .order_by(Reservation.start_time_unix)
    ).all())


def load_menu_catalog(session: Session, salon_id: int) -> Dict[int, ServiceItem]:
    menus = session.exec(
        select(Menu).where(Menu.salon_id == salon_id).where(Menu.is_active == True)  # noqa: E712
    ).all()
    return {
        m.id: ServiceItem(
            id=m.id,
            kind=ItemKind.menu,
            name=m.name,
            working_minutes=m.working_minutes,
            reserved_minutes=m.reserved_minutes,
            price=m.price,
            categories=m.categories or [],
        )
        for m in menus
    }


def load_option_catalog(session: Session, salon_id: int) -> Dict[int, ServiceItem]:
    options = session.exec(
        select(Option).where(Option.salon_id == salon_id).where(Option.is_active == True)  # noqa: E712
    ).all()
    return {
        o.id: ServiceItem(
            id=o.id,
            kind=ItemKind.option,
            name=o.name,
            working_minutes=o.working_minutes,
            reserved_minutes=o.reserved_minutes,
            price=o.price,
            order_limit=o.order_limit,
        )
        for o in options
    }


def list_menu_exclusions(session: Session, salon_id: int) -> List[MenuExclusionStaff]:
    return list(session.exec(
        select(MenuExclusionStaff).where(MenuExclusionStaff.salon_id == salon_id)
    ).all())
