import datetime as dt
from collections.abc import Iterable, Mapping
from typing import Any

from clinicportal.domain.exceptions import InvalidScheduleError
from clinicportal.domain.models import DayOfWeek, Doctor, WeeklySlot
from clinicportal.scheduling.datetime_helpers import format_hhmm, parse_hhmm


def parse_weekly_slot(raw: Mapping[str, Any]) -> WeeklySlot:
    """Build a WeeklySlot from ``{"day": "Monday", "startTime": "09:00", "endTime": "17:00"}``."""
    try:
        day = DayOfWeek(raw["day"])
        start = parse_hhmm(str(raw["startTime"]))
        end = parse_hhmm(str(raw["endTime"]))
    except KeyError as exc:
        raise InvalidScheduleError(f"Weekly slot is missing {exc.args[0]!r}") from exc
    except ValueError as exc:
        raise InvalidScheduleError(f"Invalid weekly slot {dict(raw)!r}: {exc}") from exc

    if start >= end:
        raise InvalidScheduleError(
            f"Weekly slot on {day.value} must start before it ends "
            f"({format_hhmm(start)} >= {format_hhmm(end)})"
        )
    return WeeklySlot(day=day, start_time=start, end_time=end)


def parse_leave_days(raw: Iterable[str]) -> frozenset[dt.date]:
    """Parse ISO 8601 leave dates such as ``"2026-03-16"``."""
    days: set[dt.date] = set()
    for value in raw:
        try:
            days.add(dt.date.fromisoformat(value))
        except (TypeError, ValueError) as exc:
            raise InvalidScheduleError(
                f"Invalid leave day '{value}'. Expected YYYY-MM-DD."
            ) from exc
    return frozenset(days)


def parse_doctor_record(raw: Mapping[str, Any]) -> Doctor:
    """Build a Doctor from a stored record using the portal's camelCase keys."""
    if "id" not in raw:
        raise InvalidScheduleError("Doctor record is missing 'id'")

    active = raw.get("isActive", True)
    if not isinstance(active, bool):
        raise InvalidScheduleError(f"Doctor {raw['id']} has non-boolean isActive {active!r}")

    try:
        experience = int(raw.get("experience", 0))
    except (TypeError, ValueError) as exc:
        raise InvalidScheduleError(
            f"Doctor {raw['id']} has invalid experience {raw.get('experience')!r}"
        ) from exc

    return Doctor(
        doctor_id=str(raw["id"]),
        name=raw.get("name", ""),
        specialization=raw.get("specialization", ""),
        experience_years=experience,
        weekly_slots=tuple(parse_weekly_slot(item) for item in raw.get("availability", [])),
        leave_days=parse_leave_days(raw.get("leaveDays", [])),
        active=active,
    )
