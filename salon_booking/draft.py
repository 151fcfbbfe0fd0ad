# salon_booking/draft.py

from datetime import date as Date
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .config import MAX_MENU_LINES, MAX_OPTION_LINES
from .core import MINUTE_MS
from .durations import aggregate, combine
from .schemas import DurationTotals, SelectionLine, ServiceItem, TimeWindow
from .selection import find_conflicts, selection_for


class BookingDraft(BaseModel):
    """The customer's in-progress reservation. Never mutated; reducers return a new one."""

    model_config = ConfigDict(frozen=True)

    menus: Tuple[SelectionLine, ...] = ()
    options: Tuple[SelectionLine, ...] = ()
    staff_id: Optional[int] = None
    date: Optional[Date] = None
    window: Optional[TimeWindow] = None


def _add_line(lines, item_id: int, max_lines: int, order_limit: Optional[int] = None):
    for i, line in enumerate(lines):
        if line.item_id == item_id:
            if order_limit is not None and line.quantity >= order_limit:
                return None
            bumped = SelectionLine(item_id=item_id, quantity=line.quantity + 1)
            return lines[:i] + (bumped,) + lines[i + 1:]
    if len(lines) >= max_lines or order_limit == 0:
        return None
    return lines + (SelectionLine(item_id=item_id),)


def _remove_line(lines, item_id: int):
    result = []
    for line in lines:
        if line.item_id != item_id:
            result.append(line)
        elif line.quantity > 1:
            result.append(SelectionLine(item_id=item_id, quantity=line.quantity - 1))
    return tuple(result)


# Any change to what is booked, with whom or when, drops the chosen window.

def add_menu(draft: BookingDraft, menu_id: int) -> BookingDraft:
    menus = _add_line(draft.menus, menu_id, MAX_MENU_LINES)
    if menus is None:
        return draft
    return draft.model_copy(update={"menus": menus, "window": None})


def remove_menu(draft: BookingDraft, menu_id: int) -> BookingDraft:
    menus = _remove_line(draft.menus, menu_id)
    if menus == draft.menus:
        return draft
    return draft.model_copy(update={"menus": menus, "window": None})


def add_option(draft: BookingDraft, option_id: int, order_limit: Optional[int] = None) -> BookingDraft:
    options = _add_line(draft.options, option_id, MAX_OPTION_LINES, order_limit)
    if options is None:
        return draft
    return draft.model_copy(update={"options": options, "window": None})


def remove_option(draft: BookingDraft, option_id: int) -> BookingDraft:
    options = _remove_line(draft.options, option_id)
    if options == draft.options:
        return draft
    return draft.model_copy(update={"options": options, "window": None})


def select_staff(draft: BookingDraft, staff_id: Optional[int]) -> BookingDraft:
    if staff_id == draft.staff_id:
        return draft
    return draft.model_copy(update={"staff_id": staff_id, "window": None})


def select_date(draft: BookingDraft, day: Optional[Date]) -> BookingDraft:
    if day == draft.date:
        return draft
    return draft.model_copy(update={"date": day, "window": None})


def select_window(draft: BookingDraft, window: TimeWindow) -> BookingDraft:
    return draft.model_copy(update={"window": window})


def clear_window(draft: BookingDraft) -> BookingDraft:
    return draft.model_copy(update={"window": None})


def draft_durations(
    draft: BookingDraft,
    menu_catalog: Mapping[int, ServiceItem],
    option_catalog: Mapping[int, ServiceItem],
) -> DurationTotals:
    return combine(aggregate(draft.menus, menu_catalog), aggregate(draft.options, option_catalog))


# --- validation, kept apart from the draft itself ---

class DraftProblem(str, Enum):
    no_menu = "no_menu"
    no_staff = "no_staff"
    no_date = "no_date"
    no_window = "no_window"
    too_many_menus = "too_many_menus"
    too_many_options = "too_many_options"
    unknown_item = "unknown_item"
    duplicate_item = "duplicate_item"
    over_order_limit = "over_order_limit"
    category_conflict = "category_conflict"
    window_duration_mismatch = "window_duration_mismatch"


class DraftValidation(BaseModel):
    ok: bool
    reasons: List[DraftProblem] = []


def validate_draft(
    draft: BookingDraft,
    menu_catalog: Mapping[int, ServiceItem],
    option_catalog: Mapping[int, ServiceItem],
    require_window: bool = True,
) -> DraftValidation:
    reasons: List[DraftProblem] = []

    if not draft.menus:
        reasons.append(DraftProblem.no_menu)
    if len(draft.menus) > MAX_MENU_LINES:
        reasons.append(DraftProblem.too_many_menus)
    if len(draft.options) > MAX_OPTION_LINES:
        reasons.append(DraftProblem.too_many_options)
    if draft.staff_id is None:
        reasons.append(DraftProblem.no_staff)
    if draft.date is None:
        reasons.append(DraftProblem.no_date)

    unknown = [line for line in draft.menus if line.item_id not in menu_catalog]
    unknown += [line for line in draft.options if line.item_id not in option_catalog]
    if unknown:
        reasons.append(DraftProblem.unknown_item)

    menu_ids = [line.item_id for line in draft.menus]
    option_ids = [line.item_id for line in draft.options]
    if len(set(menu_ids)) != len(menu_ids) or len(set(option_ids)) != len(option_ids):
        reasons.append(DraftProblem.duplicate_item)

    # Quantities summed per item so split lines cannot exceed the limit
    ordered = {}
    for line in draft.options:
        ordered[line.item_id] = ordered.get(line.item_id, 0) + line.quantity
    for option_id, quantity in ordered.items():
        item = option_catalog.get(option_id)
        if item is not None and item.order_limit is not None and quantity > item.order_limit:
            reasons.append(DraftProblem.over_order_limit)
            break

    selections = [
        selection_for(menu_catalog[line.item_id]) for line in draft.menus if line.item_id in menu_catalog
    ]
    if find_conflicts(s for s in selections if s is not None):
        reasons.append(DraftProblem.category_conflict)

    if draft.window is None:
        if require_window:
            reasons.append(DraftProblem.no_window)
    else:
        totals = draft_durations(draft, menu_catalog, option_catalog)
        length = draft.window.end_time_unix - draft.window.start_time_unix
        if length != totals.reserved_minutes * MINUTE_MS:
            reasons.append(DraftProblem.window_duration_mismatch)

    return DraftValidation(ok=not reasons, reasons=reasons)
