# salon_booking/schemas.py

from datetime import date as Date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DayOfWeek(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def from_date(cls, day: Date) -> "DayOfWeek":
        return list(cls)[day.weekday()]  # 0 = Monday


class ItemKind(str, Enum):
    menu = "menu"
    option = "option"


class ExceptionScope(str, Enum):
    staff = "staff"
    salon = "salon"


class ExceptionKind(str, Enum):
    holiday = "holiday"
    break_time = "break"
    other = "other"


class ReservationStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    refunded = "refunded"


BLOCKING_STATUSES = frozenset(
    {ReservationStatus.pending, ReservationStatus.confirmed, ReservationStatus.completed}
)


def is_blocking(status) -> bool:
    """Whether a reservation in this status occupies time and capacity.

    Unknown statuses count as blocking so bad data never opens a slot.
    """
    try:
        return ReservationStatus(status) in BLOCKING_STATUSES
    except ValueError:
        return True


# --- core inputs ---

class ServiceItem(BaseModel):
    id: int
    kind: ItemKind = ItemKind.menu
    name: str = ""
    working_minutes: int = Field(ge=0)
    reserved_minutes: Optional[int] = Field(default=None, ge=0)
    price: int = 0
    categories: List[str] = []
    order_limit: Optional[int] = None

    @model_validator(mode="after")
    def default_reserved_minutes(self):
        # occupancy never shorter than the hands-on time
        if self.reserved_minutes is None or self.reserved_minutes < self.working_minutes:
            self.reserved_minutes = self.working_minutes
        return self


class SelectionLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: int
    quantity: int = Field(default=1, ge=1)


class WeeklyScheduleEntry(BaseModel):
    day_of_week: DayOfWeek
    is_open: bool
    start_hour: Optional[str] = None  # "HH:MM"
    end_hour: Optional[str] = None


class ExceptionBlock(BaseModel):
    scope: ExceptionScope
    owner_id: int
    date: Date
    start_time_unix: Optional[int] = None
    end_time_unix: Optional[int] = None
    is_all_day: bool = False
    kind: ExceptionKind = ExceptionKind.other


class ReservationSnapshot(BaseModel):
    id: Optional[int] = None
    staff_id: int
    start_time_unix: int
    end_time_unix: int
    status: ReservationStatus = ReservationStatus.confirmed


# --- core outputs ---

class DurationTotals(BaseModel):
    working_minutes: int = 0
    reserved_minutes: int = 0
    diff_minutes: int = 0


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_hour: str
    end_hour: str
    start_time_unix: int
    end_time_unix: int


class CapacityResult(BaseModel):
    is_available: bool
    current_count: int


# --- HTTP request / response bodies ---

class DurationRequest(BaseModel):
    menus: List[SelectionLine] = []
    options: List[SelectionLine] = []


class AvailabilityResponse(BaseModel):
    staff_id: int
    date: Date
    duration_min: int
    windows: List[TimeWindow]


class WeekScheduleUpdate(BaseModel):
    entries: List[WeeklyScheduleEntry]


class ExceptionCreate(BaseModel):
    date: Date
    is_all_day: bool = False
    start_hour: Optional[str] = None
    end_hour: Optional[str] = None
    kind: ExceptionKind = ExceptionKind.other


class ExceptionPublic(BaseModel):
    id: int
    scope: ExceptionScope
    owner_id: int
    date: Date
    start_time_unix: Optional[int]
    end_time_unix: Optional[int]
    is_all_day: bool
    kind: ExceptionKind


class EligibleStaffRequest(BaseModel):
    menu_ids: List[int]


class EligibleStaffResponse(BaseModel):
    staff_ids: List[int]


class ReservationCreate(BaseModel):
    staff_id: int
    date: Date
    start_hour: str
    customer_name: str
    menus: List[SelectionLine] = Field(min_length=1)
    options: List[SelectionLine] = []


class ReservationPublic(BaseModel):
    id: int
    salon_id: int
    staff_id: int
    customer_name: str
    date: Date
    start_time_unix: int
    end_time_unix: int
    status: ReservationStatus
    working_minutes: int
    reserved_minutes: int
