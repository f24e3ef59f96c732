import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DayOfWeek(str, Enum):
    """Day names as stored on a doctor's weekly schedule."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class AppointmentStatus(str, Enum):
    """Possible states of an appointment."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


TERMINAL_STATUSES = frozenset(
    {AppointmentStatus.REJECTED, AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED}
)


class ActorRole(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class PrescriptionFileType(str, Enum):
    PDF = "pdf"
    IMAGE = "image"
    TEXT = "text"


class Actor(BaseModel):
    """The signed-in user performing an action."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: ActorRole


class WeeklySlot(BaseModel):
    """A recurring block of availability on one day of the week."""

    model_config = ConfigDict(frozen=True)

    day: DayOfWeek
    start_time: dt.time
    end_time: dt.time


class Doctor(BaseModel):
    """A doctor record with the schedule data needed for booking."""

    model_config = ConfigDict(frozen=True)

    doctor_id: str
    name: str = ""
    specialization: str = ""
    experience_years: int = 0
    weekly_slots: tuple[WeeklySlot, ...] = ()
    leave_days: frozenset[dt.date] = frozenset()
    active: bool = True


class CandidateSlot(BaseModel):
    """A bookable date/time pair. Computed on demand, never stored."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    time: dt.time

    @property
    def time_label(self) -> str:
        return self.time.strftime("%H:%M")


class AppointmentRequest(BaseModel):
    """A request to book an appointment."""

    model_config = ConfigDict(frozen=True)

    patient_id: str
    doctor_id: str
    date: dt.date
    time: dt.time
    reason: str


class Appointment(BaseModel):
    """An appointment between a patient and a doctor."""

    model_config = ConfigDict(frozen=True)

    appointment_id: str
    patient_id: str
    doctor_id: str
    date: dt.date
    time: dt.time
    status: AppointmentStatus = AppointmentStatus.PENDING
    reason: str = ""
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class PrescriptionRequest(BaseModel):
    """A request to issue a prescription for a completed appointment."""

    model_config = ConfigDict(frozen=True)

    appointment_id: str
    medications: str
    instructions: str
    file_url: str | None = None
    file_type: PrescriptionFileType | None = None


class Prescription(BaseModel):
    """A prescription issued after a completed appointment."""

    model_config = ConfigDict(frozen=True)

    prescription_id: str
    appointment_id: str
    patient_id: str
    doctor_id: str
    medications: str
    instructions: str
    file_url: str | None = None
    file_type: PrescriptionFileType | None = None
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
