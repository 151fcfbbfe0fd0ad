"""Availability resolution for one staff member and one day

Scenarios:
- open day without conflicts (one window per step)
- existing reservation and partial exceptions carve the day
- all-day exceptions and closed days give nothing
- salon hours and earliest-start narrowing
"""

from datetime import date, timedelta

import pytest

from conftest import at, week
from salon_booking.availability import earliest_start, resolve
from salon_booking.config import SALON_TIMEZONE
from salon_booking.core import overlaps
from salon_booking.schemas import (
    DayOfWeek,
    ExceptionBlock,
    ExceptionScope,
    ReservationSnapshot,
    ReservationStatus,
    WeeklyScheduleEntry,
)

DAY = date(2030, 6, 3)
STAFF = 7
OTHER_STAFF = 8
SALON = 1


def run(reserved=60, schedule=None, staff_ex=(), salon_ex=(), reservations=(), granularity=30, **kw):
    return resolve(
        STAFF,
        DAY,
        reserved,
        week() if schedule is None else schedule,
        list(staff_ex),
        list(salon_ex),
        list(reservations),
        granularity,
        tz=SALON_TIMEZONE,
        **kw,
    )


def booking(start, end, staff_id=STAFF, status=ReservationStatus.confirmed):
    return ReservationSnapshot(staff_id=staff_id, start_time_unix=at(DAY, start), end_time_unix=at(DAY, end), status=status)


def staff_block(start=None, end=None, all_day=False, owner=STAFF, day=DAY):
    return ExceptionBlock(
        scope=ExceptionScope.staff,
        owner_id=owner,
        date=day,
        start_time_unix=at(day, start) if start else None,
        end_time_unix=at(day, end) if end else None,
        is_all_day=all_day,
    )


def salon_block(start=None, end=None, all_day=False):
    return ExceptionBlock(
        scope=ExceptionScope.salon,
        owner_id=SALON,
        date=DAY,
        start_time_unix=at(DAY, start) if start else None,
        end_time_unix=at(DAY, end) if end else None,
        is_all_day=all_day,
    )


@pytest.mark.unit
class TestOpenDay:
    def test_scenario_open_day_hourly_service(self):
        """09:00-18:00, 60 minutes, 30 minute step: 17 windows ending at 18:00"""
        windows = run()
        assert len(windows) == 17
        assert windows[0].start_hour == "09:00"
        assert windows[1].start_hour == "09:30"
        assert windows[-1].start_hour == "17:00"
        assert windows[-1].end_hour == "18:00"

    def test_every_window_has_exact_length(self):
        for w in run(reserved=75, granularity=5):
            assert w.end_time_unix - w.start_time_unix == 75 * 60000

    def test_duration_equal_to_open_hours_gives_one_window(self):
        windows = run(reserved=540)
        assert [(w.start_hour, w.end_hour) for w in windows] == [("09:00", "18:00")]

    def test_duration_longer_than_day_gives_nothing(self):
        assert run(reserved=541) == []

    def test_window_count_follows_step(self):
        # floor((540 - 60) / 5) + 1
        assert len(run(granularity=5)) == 97

    def test_output_is_chronological_and_idempotent(self):
        reservations = [booking("12:00", "13:00"), booking("10:00", "10:30")]
        first = run(reservations=reservations)
        second = run(reservations=reservations)
        assert first == second
        starts = [w.start_time_unix for w in first]
        assert starts == sorted(starts)

    def test_non_positive_inputs_give_nothing(self):
        assert run(reserved=0) == []
        assert run(granularity=0) == []


@pytest.mark.unit
class TestClosedDays:
    def test_closed_weekday(self):
        assert run(schedule=week(closed=(DayOfWeek.from_date(DAY),))) == []

    def test_missing_row(self):
        schedule = [e for e in week() if e.day_of_week != DayOfWeek.from_date(DAY)]
        assert run(schedule=schedule) == []

    def test_start_not_before_end_fails_closed(self):
        assert run(schedule=week("18:00", "09:00")) == []
        assert run(schedule=week("10:00", "10:00")) == []

    def test_malformed_hours_fail_closed(self):
        entry = WeeklyScheduleEntry(day_of_week=DayOfWeek.from_date(DAY), is_open=True, start_hour="9am", end_hour="18:00")
        assert run(schedule=[entry]) == []

    def test_staff_all_day_exception(self):
        assert run(staff_ex=[staff_block(all_day=True)]) == []

    def test_salon_all_day_exception(self):
        assert run(salon_ex=[salon_block(all_day=True)]) == []

    def test_salon_exception_in_staff_list_still_applies(self):
        assert run(staff_ex=[salon_block(all_day=True)]) == []

    def test_other_staff_exception_in_salon_list_is_ignored(self):
        assert len(run(salon_ex=[staff_block(all_day=True, owner=OTHER_STAFF)])) == 17

    def test_unrecognised_scope_blocks(self):
        block = ExceptionBlock.model_construct(
            scope="region", owner_id=99, date=DAY, start_time_unix=None, end_time_unix=None, is_all_day=True
        )
        assert run(salon_ex=[block]) == []

    def test_other_staff_all_day_exception_is_ignored(self):
        assert len(run(staff_ex=[staff_block(all_day=True, owner=OTHER_STAFF)])) == 17

    def test_exception_on_another_date_is_ignored(self):
        other_day = DAY + timedelta(days=1)
        assert len(run(staff_ex=[staff_block(all_day=True, day=other_day)])) == 17


@pytest.mark.unit
class TestConflicts:
    def test_scenario_existing_reservation_at_noon(self):
        windows = run(reservations=[booking("12:00", "13:00")])
        lunch_start, lunch_end = at(DAY, "12:00"), at(DAY, "13:00")
        assert not any(overlaps(w.start_time_unix, w.end_time_unix, lunch_start, lunch_end) for w in windows)
        starts = [w.start_hour for w in windows]
        assert "11:00" in starts
        assert "13:00" in starts
        assert "11:30" not in starts
        assert "12:30" not in starts

    def test_windows_disjoint_from_blocks_and_reservations(self):
        reservations = [booking("10:15", "11:05"), booking("15:00", "16:00")]
        blocks = [staff_block("13:00", "13:45")]
        salon = [salon_block("17:00", "17:20")]
        windows = run(reservations=reservations, staff_ex=blocks, salon_ex=salon, granularity=5)
        busy = [(r.start_time_unix, r.end_time_unix) for r in reservations]
        busy += [(b.start_time_unix, b.end_time_unix) for b in blocks + salon]
        assert windows
        for w in windows:
            for start, end in busy:
                assert not overlaps(w.start_time_unix, w.end_time_unix, start, end)

    def test_windows_restart_at_end_of_reservation(self):
        """Stepping restarts from each free interval's own start"""
        windows = run(reservations=[booking("09:00", "10:10")])
        assert windows[0].start_hour == "10:10"
        assert windows[1].start_hour == "10:40"

    def test_overlapping_exceptions_are_merged(self):
        blocks = [staff_block("11:00", "13:00"), staff_block("12:00", "14:00")]
        windows = run(staff_ex=blocks)
        starts = [w.start_hour for w in windows]
        assert "10:00" in starts
        assert "14:00" in starts
        assert not any("10:30" <= s < "14:00" for s in starts)

    def test_cancelled_reservations_do_not_block(self):
        windows = run(reservations=[booking("12:00", "13:00", status=ReservationStatus.cancelled)])
        assert len(windows) == 17

    def test_other_staff_reservations_do_not_block(self):
        windows = run(reservations=[booking("12:00", "13:00", staff_id=OTHER_STAFF)])
        assert len(windows) == 17

    def test_reservation_crossing_midnight_is_clipped(self):
        prev_evening = at(DAY - timedelta(days=1), "22:00")
        windows = run(reservations=[ReservationSnapshot(staff_id=STAFF, start_time_unix=prev_evening, end_time_unix=at(DAY, "10:00"))])
        assert windows[0].start_hour == "10:00"

    def test_partial_exception_without_times_fails_closed(self):
        assert run(staff_ex=[staff_block()]) == []


@pytest.mark.unit
class TestNarrowing:
    def test_salon_hours_intersect_staff_hours(self):
        windows = run(schedule=week("08:00", "20:00"), salon_schedule=week("10:00", "17:00"))
        assert windows[0].start_hour == "10:00"
        assert windows[-1].end_hour == "17:00"

    def test_salon_closed_day(self):
        assert run(salon_schedule=week(closed=(DayOfWeek.from_date(DAY),))) == []

    def test_window_closing_at_midnight_ends_at_24_00(self):
        windows = run(schedule=week("22:00", "24:00"))
        assert windows[-1].end_hour == "24:00"
        assert windows[-1].start_hour == "23:00"
        assert windows[-1].end_time_unix == at(DAY + timedelta(days=1), "00:00")

    def test_not_before_trims_the_morning(self):
        windows = run(not_before=at(DAY, "13:00"))
        assert windows[0].start_hour == "13:00"
        assert len(windows) == 9

    def test_not_before_after_closing(self):
        assert run(not_before=at(DAY, "18:30")) == []

    def test_earliest_start_rounds_up_to_step(self):
        now = at(DAY, "10:07")
        assert earliest_start(now, 30, 30, DAY, SALON_TIMEZONE) == at(DAY, "11:00")
        assert earliest_start(at(DAY, "10:00"), 30, 30, DAY, SALON_TIMEZONE) == at(DAY, "10:30")
