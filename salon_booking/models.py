# salon_booking/models.py

from typing import Optional, List
from datetime import date as Date

from sqlalchemy import UniqueConstraint
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


class Staff(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(index=True)
    name: str
    is_active: bool = True


class StaffWeekSchedule(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("staff_id", "day_of_week", name="uq_staff_week_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(index=True)
    staff_id: int = Field(index=True)
    day_of_week: str  # "monday" ... "sunday"
    is_open: bool = False
    start_hour: Optional[str] = None  # "HH:MM"
    end_hour: Optional[str] = None


class SalonWeekSchedule(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("salon_id", "day_of_week", name="uq_salon_week_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(index=True)
    day_of_week: str
    is_open: bool = False
    start_hour: Optional[str] = None
    end_hour: Optional[str] = None


class ExceptionSchedule(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    salon_id: int = Field(index=True)
    scope: str  # "staff" or "salon"
    owner_id: int = Field(index=True)  # staff id, or salon id for salon scope
    date: Date = Field(index=True)
    start_time_unix: Optional[int] = None
    end_time_unix: Optional[int] = None
    is_all_day: bool = False
    kind: str = "other"


class Menu(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(index=True)
    name: str
    price: int = 0
    working_minutes: int
    reserved_minutes: Optional[int] = None
    categories: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_active: bool = True


class Option(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(index=True)
    name: str
    price: int = 0
    working_minutes: int = 0
    reserved_minutes: Optional[int] = None
    order_limit: Optional[int] = None
    is_active: bool = True


class MenuExclusionStaff(SQLModel, table=True):
    """Staff who cannot perform a menu."""

    __table_args__ = (
        UniqueConstraint("menu_id", "staff_id", name="uq_menu_exclusion_staff"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(index=True)
    menu_id: int = Field(index=True)
    staff_id: int


class ReservationConfig(SQLModel, table=True):
    salon_id: int = Field(primary_key=True)
    interval_minutes: int = 5
    available_sheet: int = 3
    reservation_limit_days: int = 60
    today_first_later_minutes: int = 30


class Reservation(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    salon_id: int = Field(index=True)
    staff_id: int = Field(index=True)
    customer_name: str
    date: Date = Field(index=True)
    start_time_unix: int = Field(index=True)
    end_time_unix: int
    status: str = "confirmed"
    menus: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    options: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    working_minutes: int = 0
    reserved_minutes: int = 0
