# tests/test_roles.py
from dataclasses import dataclass
from typing import Optional

import pytest

from app.core import (
    APPOINTMENT_VIEWS,
    ErrorKind,
    MissingPartyError,
    Role,
    ServiceResult,
    View,
    describe_appointment,
    scheduling_parties,
    scope_column,
)
from common.api_error import DataAccessError


@dataclass
class Party:
    name: str


@dataclass
class Appt:
    doctor_id: str = "d1"
    patient_id: str = "p1"
    doctor: Optional[Party] = None
    patient: Optional[Party] = None


def test_scope_column():
    assert scope_column(Role.DOCTOR) == "doctor_id"
    assert scope_column(Role.PATIENT) == "patient_id"


def test_doctor_books_for_themselves():
    assert scheduling_parties(Role.DOCTOR, "d1", doctor_id="other", patient_id="p1") == ("d1", "p1")


def test_patient_books_for_themselves():
    assert scheduling_parties(Role.PATIENT, "p1", doctor_id="d1", patient_id="other") == ("d1", "p1")


@pytest.mark.parametrize(
    "role, message",
    [(Role.DOCTOR, "Patient is required"), (Role.PATIENT, "Doctor is required")],
)
def test_missing_counterpart(role, message):
    with pytest.raises(MissingPartyError, match=message):
        scheduling_parties(role, "me")


def test_describe_appointment_names_the_counterpart():
    appt = Appt(doctor=Party("Grey"), patient=Party("Sam"))
    assert describe_appointment(Role.PATIENT, appt) == "Appointment with Dr. Grey"
    assert describe_appointment(Role.DOCTOR, appt) == "Appointment with Sam"


def test_role_labels():
    assert Role.DOCTOR.label == "Healthcare Provider"
    assert Role.PATIENT.label == "Patient"


def test_service_result_success_lists_views():
    result = ServiceResult.success("x", invalidates=APPOINTMENT_VIEWS)
    assert result.ok
    assert result.unwrap() == "x"
    assert result.invalidation_header() == "appointments,upcoming"


def test_service_result_failure_unwraps_to_error():
    result = ServiceResult.failure("Appointment not found", ErrorKind.NOT_FOUND)
    assert not result.ok
    assert result.invalidates == frozenset()
    with pytest.raises(DataAccessError) as excinfo:
        result.unwrap()
    assert excinfo.value.status_code == 404
    assert excinfo.value.code == "NOT_FOUND"


def test_view_values():
    assert {v.value for v in View} == {"appointments", "upcoming", "reminders"}
