import json
import os
import tempfile
from typing import Any

from loguru import logger

from clinicportal.clinic.adapters.memory import InMemoryClinicStore
from clinicportal.domain.models import (
    Appointment,
    AppointmentRequest,
    AppointmentStatus,
    Doctor,
    Prescription,
    PrescriptionRequest,
)

_Snapshot = tuple[dict[str, Doctor], dict[str, Appointment], dict[str, Prescription]]


class JsonFileClinicStore(InMemoryClinicStore):
    """In-memory store that is loaded from and saved to a JSON file.

    Every successful write rewrites the whole file atomically.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            doctors = [Doctor.model_validate(item) for item in raw.get("doctors", [])]
            appointments = [
                Appointment.model_validate(item) for item in raw.get("appointments", [])
            ]
            prescriptions = [
                Prescription.model_validate(item) for item in raw.get("prescriptions", [])
            ]
        except (ValueError, TypeError, AttributeError) as exc:
            # ValueError covers JSONDecodeError, UnicodeDecodeError and ValidationError.
            logger.warning("Clinic data file {} is unreadable; starting empty: {}", self.path, exc)
            return

        self.doctors = {d.doctor_id: d for d in doctors}
        self.appointments = {a.appointment_id: a for a in appointments}
        self.prescriptions = {p.prescription_id: p for p in prescriptions}
        logger.info(
            "Loaded {} doctor(s), {} appointment(s), {} prescription(s) from {}",
            len(doctors),
            len(appointments),
            len(prescriptions),
            self.path,
        )

    def _save(self) -> None:
        data: dict[str, Any] = {
            "doctors": [d.model_dump(mode="json") for d in self.doctors.values()],
            "appointments": [a.model_dump(mode="json") for a in self.appointments.values()],
            "prescriptions": [p.model_dump(mode="json") for p in self.prescriptions.values()],
        }

        folder = os.path.dirname(os.path.abspath(self.path))
        if folder and not os.path.exists(folder):
            os.makedirs(folder, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp"
        ) as tf:
            tmp_name = tf.name

        try:
            with open(tmp_name, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _snapshot(self) -> _Snapshot:
        return dict(self.doctors), dict(self.appointments), dict(self.prescriptions)

    def _commit(self, snapshot: _Snapshot) -> None:
        """Write the file, restoring the in-memory records if the write fails."""
        try:
            self._save()
        except Exception:
            self.doctors, self.appointments, self.prescriptions = snapshot
            logger.warning("Failed to write clinic data file {}; changes rolled back", self.path)
            raise

    async def save_doctor(self, doctor: Doctor) -> Doctor:
        snapshot = self._snapshot()
        saved = await super().save_doctor(doctor)
        self._commit(snapshot)
        return saved

    async def add_appointment(self, request: AppointmentRequest) -> Appointment:
        snapshot = self._snapshot()
        appointment = await super().add_appointment(request)
        self._commit(snapshot)
        return appointment

    async def update_appointment_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new: AppointmentStatus,
    ) -> Appointment:
        snapshot = self._snapshot()
        appointment = await super().update_appointment_status(appointment_id, expected, new)
        self._commit(snapshot)
        return appointment

    async def add_prescription(
        self, request: PrescriptionRequest, appointment: Appointment
    ) -> Prescription:
        snapshot = self._snapshot()
        prescription = await super().add_prescription(request, appointment)
        self._commit(snapshot)
        return prescription
