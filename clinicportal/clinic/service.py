import datetime as dt
from collections.abc import Awaitable, Iterable
from typing import TypeVar

from loguru import logger

from clinicportal.clinic.ports import AbstractClinicService, ClinicStoreProtocol
from clinicportal.domain.exceptions import (
    AppointmentBookingError,
    ClinicError,
    NotFoundError,
    PermissionDeniedError,
    PrescriptionError,
    StoreUnavailableError,
)
from clinicportal.domain.models import (
    Actor,
    ActorRole,
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    CandidateSlot,
    Doctor,
    Prescription,
    PrescriptionRequest,
    WeeklySlot,
)
from clinicportal.scheduling.availability import DEFAULT_WINDOW_DAYS, compute_available_slots
from clinicportal.scheduling.datetime_helpers import format_hhmm
from clinicportal.scheduling.transitions import (
    apply_transition,
    can_issue_prescription,
    count_by_status,
)

T = TypeVar("T")

# Statuses that keep a slot occupied.
_HOLDING_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


def _is_visible(actor: Actor, patient_id: str, doctor_id: str) -> bool:
    if actor.role == ActorRole.ADMIN:
        return True
    if actor.role == ActorRole.DOCTOR:
        return doctor_id == actor.user_id
    return patient_id == actor.user_id


class ClinicService(AbstractClinicService):
    """Clinic service that delegates storage to a ClinicStoreProtocol and adds business rules."""

    def __init__(
        self, store: ClinicStoreProtocol, window_days: int = DEFAULT_WINDOW_DAYS
    ) -> None:
        self._store = store
        self._window_days = window_days

    async def _call(self, operation: Awaitable[T], action: str) -> T:
        try:
            return await operation
        except ClinicError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"{action} failed: {exc}") from exc

    async def _require_doctor(self, doctor_id: str) -> Doctor:
        doctor = await self._call(self._store.get_doctor(doctor_id), "Doctor lookup")
        if doctor is None:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    async def _require_appointment(self, appointment_id: str) -> Appointment:
        appointment = await self._call(
            self._store.get_appointment(appointment_id), "Appointment lookup"
        )
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    async def find_doctors(
        self, search: str = "", specialization: str | None = None
    ) -> list[Doctor]:
        """Active doctors matching ``search`` on name or specialization."""
        doctors = await self._call(self._store.list_doctors(), "Doctor search")
        needle = search.strip().lower()

        matches = [
            d
            for d in doctors
            if d.active
            and (needle in d.name.lower() or needle in d.specialization.lower())
            and (not specialization or d.specialization == specialization)
        ]
        logger.info("Found {} doctor(s) matching criteria", len(matches))
        return matches

    async def list_specializations(self) -> list[str]:
        doctors = await self._call(self._store.list_doctors(), "Doctor search")
        return sorted({d.specialization for d in doctors if d.specialization})

    async def get_available_slots(self, doctor_id: str, today: dt.date) -> list[CandidateSlot]:
        """Calculator output minus slots already held by a pending or confirmed booking."""
        doctor = await self._require_doctor(doctor_id)
        appointments = await self._call(self._store.list_appointments(), "Appointment listing")

        taken = {
            (a.date, a.time)
            for a in appointments
            if a.doctor_id == doctor_id and a.status in _HOLDING_STATUSES
        }
        slots = [
            slot
            for slot in compute_available_slots(doctor, today, self._window_days)
            if (slot.date, slot.time) not in taken
        ]
        logger.info("Doctor {} has {} open slot(s)", doctor_id, len(slots))
        return slots

    async def book_appointment(
        self, request: AppointmentRequest, actor: Actor, today: dt.date
    ) -> Appointment:
        if actor.role == ActorRole.DOCTOR:
            raise PermissionDeniedError("Doctors cannot book appointments")
        if actor.role == ActorRole.PATIENT and actor.user_id != request.patient_id:
            raise PermissionDeniedError("Patients can only book for themselves")
        if not request.reason.strip():
            raise AppointmentBookingError("a reason is required", patient_id=request.patient_id)

        logger.info(
            "Booking appointment request: doctor={}, date={}, time={}",
            request.doctor_id,
            request.date,
            request.time,
        )

        doctor = await self._require_doctor(request.doctor_id)
        if not doctor.active:
            raise AppointmentBookingError("doctor is not accepting bookings", request.patient_id)

        open_slots = await self.get_available_slots(request.doctor_id, today)
        if CandidateSlot(date=request.date, time=request.time) not in open_slots:
            raise AppointmentBookingError(
                f"{request.date} {format_hhmm(request.time)} is not available", request.patient_id
            )

        try:
            appointment = await self._store.add_appointment(request)
        except ClinicError:
            raise
        except Exception as exc:
            raise AppointmentBookingError(reason=str(exc), patient_id=request.patient_id) from exc

        logger.info("Appointment booked: id={}", appointment.appointment_id)
        return appointment

    async def transition_appointment(
        self,
        appointment_id: str,
        target: AppointmentStatus,
        actor: Actor,
        today: dt.date,
    ) -> Appointment:
        """Apply a status change and persist it with a compare-and-set on the old status."""
        appointment = await self._require_appointment(appointment_id)
        if not _is_visible(actor, appointment.patient_id, appointment.doctor_id):
            raise PermissionDeniedError(f"Appointment {appointment_id} does not belong to actor")

        updated = apply_transition(appointment, target, actor.role, today)
        stored = await self._call(
            self._store.update_appointment_status(
                appointment_id, appointment.status, updated.status
            ),
            "Appointment update",
        )

        logger.info(
            "Appointment {} moved {} -> {} by {}",
            appointment_id,
            appointment.status.value,
            stored.status.value,
            actor.role.value,
        )
        return stored

    async def list_appointments(
        self, actor: Actor, status: AppointmentStatus | None = None
    ) -> list[Appointment]:
        appointments = await self._call(self._store.list_appointments(), "Appointment listing")
        visible = [
            a
            for a in appointments
            if _is_visible(actor, a.patient_id, a.doctor_id)
            and (status is None or a.status == status)
        ]
        return sorted(visible, key=lambda a: (a.date, a.time))

    async def summarize_appointments(self, actor: Actor) -> dict[AppointmentStatus, int]:
        """Per-status counts for the actor's appointment list filters."""
        return count_by_status(await self.list_appointments(actor))

    async def issue_prescription(
        self, request: PrescriptionRequest, actor: Actor
    ) -> Prescription:
        appointment = await self._require_appointment(request.appointment_id)
        if actor.role != ActorRole.DOCTOR or actor.user_id != appointment.doctor_id:
            raise PermissionDeniedError("Only the appointment's doctor can issue a prescription")
        if not can_issue_prescription(appointment):
            raise PrescriptionError(
                f"appointment is {appointment.status.value}, not completed",
                appointment_id=request.appointment_id,
            )
        if not request.medications.strip() or not request.instructions.strip():
            raise PrescriptionError(
                "medications and instructions are required", appointment_id=request.appointment_id
            )

        logger.info("Issuing prescription for appointment {}", request.appointment_id)
        try:
            prescription = await self._store.add_prescription(request, appointment)
        except ClinicError:
            raise
        except Exception as exc:
            raise PrescriptionError(reason=str(exc), appointment_id=request.appointment_id) from exc

        logger.info("Prescription issued: id={}", prescription.prescription_id)
        return prescription

    async def list_prescriptions(self, actor: Actor) -> list[Prescription]:
        prescriptions = await self._call(self._store.list_prescriptions(), "Prescription listing")
        visible = [p for p in prescriptions if _is_visible(actor, p.patient_id, p.doctor_id)]
        return sorted(visible, key=lambda p: p.created_at, reverse=True)

    async def update_doctor_availability(
        self,
        doctor_id: str,
        weekly_slots: Iterable[WeeklySlot],
        leave_days: Iterable[dt.date],
        actor: Actor,
    ) -> Doctor:
        if actor.role != ActorRole.ADMIN and not (
            actor.role == ActorRole.DOCTOR and actor.user_id == doctor_id
        ):
            raise PermissionDeniedError("Only the doctor or an admin can change availability")

        doctor = await self._require_doctor(doctor_id)
        updated = doctor.model_copy(
            update={"weekly_slots": tuple(weekly_slots), "leave_days": frozenset(leave_days)}
        )
        saved = await self._call(self._store.save_doctor(updated), "Doctor update")
        logger.info(
            "Doctor {} availability updated: {} weekly slot(s), {} leave day(s)",
            doctor_id,
            len(saved.weekly_slots),
            len(saved.leave_days),
        )
        return saved

    async def health_check(self) -> bool:
        return await self._store.health_check()

    async def close(self) -> None:
        await self._store.close()
