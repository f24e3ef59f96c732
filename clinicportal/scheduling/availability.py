"""Bookable slot computation from a doctor's weekly schedule.

Days are offered strictly after ``today`` for a fixed window. Weekends and
leave days are never offered. Each weekly slot is cut into 30-minute
starting points; a point is only offered when a full 30 minutes fit before
the slot ends.
"""

import datetime as dt

from clinicportal.domain.models import CandidateSlot, Doctor, WeeklySlot
from clinicportal.scheduling.datetime_helpers import day_of_week, is_weekend

SLOT_MINUTES = 30
DEFAULT_WINDOW_DAYS = 14


def _minutes(time: dt.time) -> int:
    return time.hour * 60 + time.minute


def slot_start_times(slot: WeeklySlot) -> list[dt.time]:
    """Cut a weekly slot into 30-minute start times.

    Starts not on a half-hour boundary are rounded up to the next one.
    A slot with ``start_time >= end_time`` yields nothing.
    """
    start = _minutes(slot.start_time)
    end = _minutes(slot.end_time)
    current = -(-start // SLOT_MINUTES) * SLOT_MINUTES

    times: list[dt.time] = []
    while current + SLOT_MINUTES <= end:
        times.append(dt.time(current // 60, current % 60))
        current += SLOT_MINUTES
    return times


def compute_available_slots(
    doctor: Doctor,
    window_start_exclusive: dt.date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> list[CandidateSlot]:
    """Compute the bookable slots for ``doctor`` after ``window_start_exclusive``.

    Args:
        doctor: The doctor whose weekly slots and leave days apply.
        window_start_exclusive: Usually today; this day itself is never offered.
        window_length_days: Number of calendar days to scan after the start.

    Returns:
        Slots ascending by date then time, one per (date, time) even when
        weekly slots for the same day overlap. Empty for inactive doctors.
    """
    if not doctor.active or not doctor.weekly_slots:
        return []

    slots: list[CandidateSlot] = []
    for offset in range(1, window_length_days + 1):
        date = window_start_exclusive + dt.timedelta(days=offset)
        if is_weekend(date) or date in doctor.leave_days:
            continue

        weekday = day_of_week(date)
        times: set[dt.time] = set()
        for weekly in doctor.weekly_slots:
            if weekly.day == weekday:
                times.update(slot_start_times(weekly))

        slots.extend(CandidateSlot(date=date, time=time) for time in sorted(times))
    return slots


def available_dates(
    doctor: Doctor,
    today: dt.date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> list[dt.date]:
    """Dates with at least one bookable slot, ascending."""
    dates: list[dt.date] = []
    for slot in compute_available_slots(doctor, today, window_length_days):
        if not dates or dates[-1] != slot.date:
            dates.append(slot.date)
    return dates


def available_times(
    doctor: Doctor,
    date: dt.date,
    today: dt.date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> list[dt.time]:
    """Bookable times on one date. Empty when the date is outside the window."""
    return [
        slot.time
        for slot in compute_available_slots(doctor, today, window_length_days)
        if slot.date == date
    ]
