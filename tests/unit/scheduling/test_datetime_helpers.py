import datetime as dt

import pytest

from clinicportal.domain.models import DayOfWeek
from clinicportal.scheduling.datetime_helpers import (
    clinic_today,
    day_of_week,
    format_hhmm,
    is_weekend,
    parse_hhmm,
    resolve_timezone,
)


class TestParseHhmm:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("09:00", dt.time(9, 0)),
            ("9:30", dt.time(9, 30)),
            ("17:00", dt.time(17, 0)),
            (" 08:15 ", dt.time(8, 15)),
        ],
        ids=["padded", "unpadded-hour", "afternoon", "whitespace"],
    )
    def test_parses(self, value: str, expected: dt.time) -> None:
        assert parse_hhmm(value) == expected

    @pytest.mark.parametrize("value", ["", "0900", "9:5", "25:00", "ab:cd", "09:60"])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_hhmm(value)


class TestFormatHhmm:
    def test_zero_pads(self) -> None:
        assert format_hhmm(dt.time(9, 0)) == "09:00"
        assert format_hhmm(dt.time(14, 30)) == "14:30"


class TestDayOfWeek:
    @pytest.mark.parametrize(
        ("date", "expected"),
        [
            (dt.date(2026, 3, 16), DayOfWeek.MONDAY),
            (dt.date(2026, 3, 20), DayOfWeek.FRIDAY),
            (dt.date(2026, 3, 14), DayOfWeek.SATURDAY),
            (dt.date(2026, 3, 15), DayOfWeek.SUNDAY),
        ],
        ids=["monday", "friday", "saturday", "sunday"],
    )
    def test_names_day(self, date: dt.date, expected: DayOfWeek) -> None:
        assert day_of_week(date) == expected

    def test_weekend(self) -> None:
        assert is_weekend(dt.date(2026, 3, 14))
        assert is_weekend(dt.date(2026, 3, 15))
        assert not is_weekend(dt.date(2026, 3, 16))


class TestTimezone:
    def test_invalid_falls_back_to_utc(self) -> None:
        assert resolve_timezone("Not/AZone") == dt.timezone.utc

    def test_clinic_today_uses_clinic_timezone(self) -> None:
        # 02:00 UTC on the 17th is still the 16th in New York.
        now = dt.datetime(2026, 3, 17, 2, 0, tzinfo=dt.timezone.utc)

        assert clinic_today("America/New_York", now=now) == dt.date(2026, 3, 16)
        assert clinic_today("UTC", now=now) == dt.date(2026, 3, 17)
