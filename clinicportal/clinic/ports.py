import datetime as dt
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Protocol

from clinicportal.domain.models import (
    Actor,
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    CandidateSlot,
    Doctor,
    Prescription,
    PrescriptionRequest,
    WeeklySlot,
)


class AbstractClinicService(ABC):
    """Abstract base class for clinic scheduling operations."""

    @abstractmethod
    async def find_doctors(
        self, search: str = "", specialization: str | None = None
    ) -> list[Doctor]:
        """Search active doctors by name or specialization.

        Args:
            search: Case-insensitive text matched against name and specialization.
            specialization: Exact specialization to filter on, or None.

        Returns:
            Matching active doctors. Empty list if none found.

        Raises:
            StoreUnavailableError: If the store is unreachable.
        """

    @abstractmethod
    async def get_available_slots(self, doctor_id: str, today: dt.date) -> list[CandidateSlot]:
        """List the bookable slots for a doctor after ``today``.

        Raises:
            NotFoundError: If the doctor does not exist.
            StoreUnavailableError: If the store is unreachable.
        """

    @abstractmethod
    async def book_appointment(
        self, request: AppointmentRequest, actor: Actor, today: dt.date
    ) -> Appointment:
        """Book a pending appointment on one of the doctor's open slots.

        Raises:
            AppointmentBookingError: If the slot is not bookable or the request is incomplete.
            PermissionDeniedError: If the actor may not book for this patient.
            NotFoundError: If the doctor does not exist.
            StoreUnavailableError: If the store is unreachable.
        """

    @abstractmethod
    async def transition_appointment(
        self,
        appointment_id: str,
        target: AppointmentStatus,
        actor: Actor,
        today: dt.date,
    ) -> Appointment:
        """Move an appointment to ``target`` and persist it.

        Raises:
            InvalidTransitionError: If the move is not allowed.
            ConcurrentModificationError: If the stored status changed meanwhile.
            PermissionDeniedError: If the appointment is not the actor's.
            NotFoundError: If the appointment does not exist.
        """

    @abstractmethod
    async def list_appointments(
        self, actor: Actor, status: AppointmentStatus | None = None
    ) -> list[Appointment]:
        """List the appointments visible to ``actor``, optionally by status."""

    @abstractmethod
    async def issue_prescription(
        self, request: PrescriptionRequest, actor: Actor
    ) -> Prescription:
        """Issue a prescription for a completed appointment.

        Raises:
            PrescriptionError: If the appointment is not completed or the request is incomplete.
            PermissionDeniedError: If the actor is not the appointment's doctor.
            NotFoundError: If the appointment does not exist.
        """

    @abstractmethod
    async def list_prescriptions(self, actor: Actor) -> list[Prescription]:
        """List the prescriptions visible to ``actor``."""

    @abstractmethod
    async def update_doctor_availability(
        self,
        doctor_id: str,
        weekly_slots: Iterable[WeeklySlot],
        leave_days: Iterable[dt.date],
        actor: Actor,
    ) -> Doctor:
        """Replace a doctor's weekly slots and leave days.

        Raises:
            PermissionDeniedError: If the actor is neither the doctor nor an admin.
            NotFoundError: If the doctor does not exist.
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable and responding.

        Returns:
            True if the store is healthy, False otherwise.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by this service."""


class ClinicStoreProtocol(Protocol):
    """Low-level persistence interface for clinic records."""

    async def get_doctor(self, doctor_id: str) -> Doctor | None:
        """Fetch one doctor, or None."""
        ...

    async def list_doctors(self) -> list[Doctor]:
        """Fetch all doctors."""
        ...

    async def save_doctor(self, doctor: Doctor) -> Doctor:
        """Insert or replace a doctor."""
        ...

    async def get_appointment(self, appointment_id: str) -> Appointment | None:
        """Fetch one appointment, or None."""
        ...

    async def list_appointments(self) -> list[Appointment]:
        """Fetch all appointments."""
        ...

    async def add_appointment(self, request: AppointmentRequest) -> Appointment:
        """Store a new pending appointment and assign its ID."""
        ...

    async def update_appointment_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new: AppointmentStatus,
    ) -> Appointment:
        """Set the status only if it is still ``expected``.

        Raises ConcurrentModificationError otherwise.
        """
        ...

    async def add_prescription(
        self, request: PrescriptionRequest, appointment: Appointment
    ) -> Prescription:
        """Store a new prescription and assign its ID."""
        ...

    async def list_prescriptions(self) -> list[Prescription]:
        """Fetch all prescriptions."""
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...
