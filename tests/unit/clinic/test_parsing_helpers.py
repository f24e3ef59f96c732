import datetime as dt

import pytest

from clinicportal.clinic.parsing_helpers import (
    parse_doctor_record,
    parse_leave_days,
    parse_weekly_slot,
)
from clinicportal.domain.exceptions import InvalidScheduleError
from clinicportal.domain.models import DayOfWeek, WeeklySlot


class TestParseWeeklySlot:
    def test_parses_stored_record(self) -> None:
        slot = parse_weekly_slot({"day": "Monday", "startTime": "09:00", "endTime": "17:00"})

        assert slot == WeeklySlot(
            day=DayOfWeek.MONDAY, start_time=dt.time(9, 0), end_time=dt.time(17, 0)
        )

    @pytest.mark.parametrize(
        "raw",
        [
            {"day": "Funday", "startTime": "09:00", "endTime": "17:00"},
            {"day": "Monday", "startTime": "9am", "endTime": "17:00"},
            {"day": "Monday", "startTime": "17:00", "endTime": "09:00"},
            {"day": "Monday", "startTime": "09:00", "endTime": "09:00"},
            {"day": "Monday", "startTime": "09:00"},
        ],
        ids=["unknown-day", "bad-time", "reversed", "empty", "missing-end"],
    )
    def test_rejects_invalid(self, raw: dict[str, str]) -> None:
        with pytest.raises(InvalidScheduleError):
            parse_weekly_slot(raw)


class TestParseLeaveDays:
    def test_parses_iso_dates(self) -> None:
        assert parse_leave_days(["2026-03-16", "2026-03-16", "2026-03-23"]) == {
            dt.date(2026, 3, 16),
            dt.date(2026, 3, 23),
        }

    def test_rejects_non_iso(self) -> None:
        with pytest.raises(InvalidScheduleError, match="Expected YYYY-MM-DD"):
            parse_leave_days(["16/03/2026"])


class TestParseDoctorRecord:
    def test_builds_doctor(self) -> None:
        doctor = parse_doctor_record(
            {
                "id": "doc2",
                "name": "Dr. Sarah Johnson",
                "specialization": "Dermatology",
                "experience": 8,
                "availability": [
                    {"day": "Monday", "startTime": "10:00", "endTime": "18:00"},
                    {"day": "Thursday", "startTime": "10:00", "endTime": "18:00"},
                ],
                "leaveDays": ["2026-03-16"],
                "isActive": False,
            }
        )

        assert doctor.doctor_id == "doc2"
        assert doctor.experience_years == 8
        assert [s.day for s in doctor.weekly_slots] == [DayOfWeek.MONDAY, DayOfWeek.THURSDAY]
        assert doctor.leave_days == {dt.date(2026, 3, 16)}
        assert doctor.active is False

    def test_defaults(self) -> None:
        doctor = parse_doctor_record({"id": 7})

        assert doctor.doctor_id == "7"
        assert doctor.weekly_slots == ()
        assert doctor.active is True

    @pytest.mark.parametrize(
        "raw",
        [
            {"name": "Dr. No Id"},
            {"id": "doc1", "experience": "ten"},
            {"id": "doc1", "isActive": "false"},
            {"id": "doc1", "isActive": 1},
        ],
        ids=["missing-id", "non-numeric-experience", "string-active", "int-active"],
    )
    def test_rejects_invalid(self, raw: dict[str, object]) -> None:
        with pytest.raises(InvalidScheduleError):
            parse_doctor_record(raw)
