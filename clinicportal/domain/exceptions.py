from clinicportal.domain.models import ActorRole, AppointmentStatus


class ClinicError(Exception):
    """Base exception for all clinic portal errors."""


class StoreUnavailableError(ClinicError):
    """Raised when the backing store is unreachable or not responding."""


class NotFoundError(ClinicError):
    """Raised when a doctor, appointment or prescription does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class PermissionDeniedError(ClinicError):
    """Raised when an actor acts on a record that is not theirs."""


class InvalidScheduleError(ClinicError, ValueError):
    """Raised when a stored weekly schedule or leave day is malformed."""


class InvalidTransitionError(ClinicError):
    """Raised when a status change is not allowed for the actor's role."""

    def __init__(
        self,
        current: AppointmentStatus,
        target: AppointmentStatus,
        role: ActorRole,
        reason: str | None = None,
    ) -> None:
        self.current = current
        self.target = target
        self.role = role
        self.reason = reason
        message = f"{role.value} cannot move appointment from {current.value} to {target.value}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ConcurrentModificationError(ClinicError):
    """Raised when the stored status changed between read and write."""

    def __init__(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        actual: AppointmentStatus,
    ) -> None:
        self.appointment_id = appointment_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Appointment {appointment_id} is {actual.value}, expected {expected.value}"
        )


class AppointmentBookingError(ClinicError):
    """Raised when an appointment cannot be booked."""

    def __init__(self, reason: str, patient_id: str | None = None) -> None:
        self.reason = reason
        self.patient_id = patient_id
        super().__init__(f"Failed to book appointment: {reason}")


class PrescriptionError(ClinicError):
    """Raised when a prescription cannot be issued."""

    def __init__(self, reason: str, appointment_id: str | None = None) -> None:
        self.reason = reason
        self.appointment_id = appointment_id
        super().__init__(f"Failed to issue prescription: {reason}")
