import itertools

from clinicportal.domain.exceptions import ConcurrentModificationError, NotFoundError
from clinicportal.domain.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    Doctor,
    Prescription,
    PrescriptionRequest,
)


class InMemoryClinicStore:
    """Dict-backed implementation of the ClinicStoreProtocol protocol.

    Used as the default store and as the test double. Pre-load records with
    ``save_doctor`` or by assigning to ``doctors``/``appointments``.  Set
    ``read_error``, ``write_error`` or ``update_error`` to make the
    corresponding methods raise.
    """

    def __init__(self) -> None:
        self.doctors: dict[str, Doctor] = {}
        self.appointments: dict[str, Appointment] = {}
        self.prescriptions: dict[str, Prescription] = {}
        self.closed: bool = False

        self.read_error: Exception | None = None
        self.write_error: Exception | None = None
        self.update_error: Exception | None = None

        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        candidate = f"{prefix}_{next(self._ids)}"
        while candidate in self.appointments or candidate in self.prescriptions:
            candidate = f"{prefix}_{next(self._ids)}"
        return candidate

    def _check_read(self) -> None:
        if self.read_error:
            raise self.read_error

    def _check_write(self) -> None:
        if self.write_error:
            raise self.write_error

    async def get_doctor(self, doctor_id: str) -> Doctor | None:
        self._check_read()
        return self.doctors.get(doctor_id)

    async def list_doctors(self) -> list[Doctor]:
        self._check_read()
        return list(self.doctors.values())

    async def save_doctor(self, doctor: Doctor) -> Doctor:
        self._check_write()
        self.doctors[doctor.doctor_id] = doctor
        return doctor

    async def get_appointment(self, appointment_id: str) -> Appointment | None:
        self._check_read()
        return self.appointments.get(appointment_id)

    async def list_appointments(self) -> list[Appointment]:
        self._check_read()
        return list(self.appointments.values())

    async def add_appointment(self, request: AppointmentRequest) -> Appointment:
        self._check_write()
        appointment = Appointment(
            appointment_id=self._next_id("app"),
            patient_id=request.patient_id,
            doctor_id=request.doctor_id,
            date=request.date,
            time=request.time,
            status=AppointmentStatus.PENDING,
            reason=request.reason,
        )
        self.appointments[appointment.appointment_id] = appointment
        return appointment

    async def update_appointment_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new: AppointmentStatus,
    ) -> Appointment:
        if self.update_error:
            raise self.update_error
        stored = self.appointments.get(appointment_id)
        if stored is None:
            raise NotFoundError("Appointment", appointment_id)
        if stored.status != expected:
            raise ConcurrentModificationError(appointment_id, expected, stored.status)

        updated = stored.model_copy(update={"status": new})
        self.appointments[appointment_id] = updated
        return updated

    async def add_prescription(
        self, request: PrescriptionRequest, appointment: Appointment
    ) -> Prescription:
        self._check_write()
        prescription = Prescription(
            prescription_id=self._next_id("presc"),
            appointment_id=appointment.appointment_id,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            medications=request.medications,
            instructions=request.instructions,
            file_url=request.file_url,
            file_type=request.file_type,
        )
        self.prescriptions[prescription.prescription_id] = prescription
        return prescription

    async def list_prescriptions(self) -> list[Prescription]:
        self._check_read()
        return list(self.prescriptions.values())

    async def health_check(self) -> bool:
        return not self.closed

    async def close(self) -> None:
        self.closed = True
