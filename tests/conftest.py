import datetime as dt

import pytest

from clinicportal.clinic.adapters.memory import InMemoryClinicStore
from clinicportal.clinic.service import ClinicService
from clinicportal.domain.models import DayOfWeek, Doctor, WeeklySlot

# Saturday; the next two Mondays are 2026-03-16 and 2026-03-23.
SATURDAY = dt.date(2026, 3, 14)


@pytest.fixture
def today() -> dt.date:
    return SATURDAY


@pytest.fixture
def monday_doctor() -> Doctor:
    return Doctor(
        doctor_id="doc1",
        name="Dr. John Smith",
        specialization="Cardiology",
        weekly_slots=(
            WeeklySlot(day=DayOfWeek.MONDAY, start_time=dt.time(9, 0), end_time=dt.time(11, 0)),
        ),
    )


@pytest.fixture
def store() -> InMemoryClinicStore:
    return InMemoryClinicStore()


@pytest.fixture
def service(store: InMemoryClinicStore) -> ClinicService:
    return ClinicService(store=store)
