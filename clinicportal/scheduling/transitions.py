"""Appointment status transitions by actor role.

``pending`` is the initial status. ``rejected``, ``cancelled`` and
``completed`` are terminal. An appointment can only be completed once its
date has arrived.
"""

import datetime as dt
from collections.abc import Iterable

from clinicportal.domain.exceptions import InvalidTransitionError
from clinicportal.domain.models import ActorRole, Appointment, AppointmentStatus

TRANSITIONS: dict[AppointmentStatus, dict[ActorRole, frozenset[AppointmentStatus]]] = {
    AppointmentStatus.PENDING: {
        ActorRole.DOCTOR: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.REJECTED}),
        ActorRole.PATIENT: frozenset({AppointmentStatus.CANCELLED}),
        ActorRole.ADMIN: frozenset(
            {
                AppointmentStatus.CONFIRMED,
                AppointmentStatus.REJECTED,
                AppointmentStatus.CANCELLED,
            }
        ),
    },
    AppointmentStatus.CONFIRMED: {
        ActorRole.DOCTOR: frozenset({AppointmentStatus.COMPLETED}),
        ActorRole.PATIENT: frozenset({AppointmentStatus.CANCELLED}),
        ActorRole.ADMIN: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    },
}


def _is_date_gated(appointment: Appointment, target: AppointmentStatus, today: dt.date) -> bool:
    return target == AppointmentStatus.COMPLETED and appointment.date > today


def allowed_transitions(
    appointment: Appointment, role: ActorRole, today: dt.date
) -> frozenset[AppointmentStatus]:
    """Statuses ``role`` may move ``appointment`` to as of ``today``."""
    targets = TRANSITIONS.get(appointment.status, {}).get(role, frozenset())
    return frozenset(t for t in targets if not _is_date_gated(appointment, t, today))


def can_transition(
    appointment: Appointment,
    target: AppointmentStatus,
    role: ActorRole,
    today: dt.date,
) -> bool:
    return target in allowed_transitions(appointment, role, today)


def apply_transition(
    appointment: Appointment,
    target: AppointmentStatus,
    role: ActorRole,
    today: dt.date,
) -> Appointment:
    """Return a copy of ``appointment`` with its status set to ``target``.

    Nothing is persisted here; the caller stores the result.

    Raises:
        InvalidTransitionError: If the current status is terminal, the role
            may not move to ``target`` from the current status, or
            ``target`` is completed while the appointment date is after
            ``today``.
    """
    current = appointment.status
    if appointment.is_terminal:
        raise InvalidTransitionError(current, target, role, reason="appointment is closed")

    if target not in TRANSITIONS.get(current, {}).get(role, frozenset()):
        raise InvalidTransitionError(current, target, role)

    if _is_date_gated(appointment, target, today):
        raise InvalidTransitionError(
            current, target, role, reason=f"appointment date {appointment.date} is in the future"
        )

    return appointment.model_copy(update={"status": target})


def can_issue_prescription(appointment: Appointment) -> bool:
    """Prescriptions may only be written for completed appointments."""
    return appointment.status == AppointmentStatus.COMPLETED


def count_by_status(appointments: Iterable[Appointment]) -> dict[AppointmentStatus, int]:
    counts = {status: 0 for status in AppointmentStatus}
    for appointment in appointments:
        counts[appointment.status] += 1
    return counts
