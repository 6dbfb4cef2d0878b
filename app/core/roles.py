# app/core/roles.py
"""
Closed role type and every piece of logic that differs by role.

Nothing outside this module compares role strings; callers match on
``Role`` and the fallback arm is ``assert_never`` so adding a role fails
type checking wherever a branch is missing.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, assert_never

if TYPE_CHECKING:
    from .appointment_filters import Schedulable


class Role(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Account type as shown to users."""
        match self:
            case Role.DOCTOR:
                return "Healthcare Provider"
            case Role.PATIENT:
                return "Patient"
            case _:
                assert_never(self)


class MissingPartyError(ValueError):
    """The counterpart of a new appointment was not chosen."""


def scope_column(role: Role) -> str:
    """Appointment column that ties a row to a user of this role."""
    match role:
        case Role.DOCTOR:
            return "doctor_id"
        case Role.PATIENT:
            return "patient_id"
        case _:
            assert_never(role)


def scheduling_parties(
    role: Role,
    user_id: str,
    doctor_id: Optional[str] = None,
    patient_id: Optional[str] = None,
) -> tuple[str, str]:
    """
    Resolve ``(doctor_id, patient_id)`` for an appointment the user books.

    The caller always occupies their own side; only the counterpart comes
    from the form.

    Raises:
        MissingPartyError: counterpart id is empty
    """
    match role:
        case Role.DOCTOR:
            if not patient_id:
                raise MissingPartyError("Patient is required")
            return user_id, patient_id
        case Role.PATIENT:
            if not doctor_id:
                raise MissingPartyError("Doctor is required")
            return doctor_id, user_id
        case _:
            assert_never(role)


def describe_appointment(role: Role, appointment: "Schedulable") -> str:
    """Headline for summary cards, naming the other party."""
    match role:
        case Role.DOCTOR:
            patient = getattr(appointment, "patient", None)
            return f"Appointment with {patient.name if patient else 'unknown patient'}"
        case Role.PATIENT:
            doctor = getattr(appointment, "doctor", None)
            return f"Appointment with Dr. {doctor.name if doctor else 'unknown'}"
        case _:
            assert_never(role)


__all__ = [
    "Role",
    "MissingPartyError",
    "scope_column",
    "scheduling_parties",
    "describe_appointment",
]
