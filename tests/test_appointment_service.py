# tests/test_appointment_service.py
from datetime import date

import pytest

from app.core import AppointmentStatus, ErrorKind, Role, View
from app.db.schemas import AppointmentCreate, AppointmentUpdate
from app.services.v1 import AppointmentService, DirectoryService


@pytest.fixture
async def parties(make_user):
    doctor = await make_user("grey@example.com", Role.DOCTOR, "Grey")
    patient = await make_user("sam@example.com", Role.PATIENT, "Sam")
    other = await make_user("kim@example.com", Role.PATIENT, "Kim")
    return doctor, patient, other


@pytest.fixture
def appointments(session):
    return AppointmentService(session)


def booking(doctor_id, patient_id, **overrides):
    data = {
        "doctor_id": doctor_id,
        "patient_id": patient_id,
        "date": date(2024, 6, 1),
        "time": "09:30",
    }
    data.update(overrides)
    return AppointmentCreate(**data)


async def test_create_defaults_and_snapshots(appointments, parties):
    doctor, patient, _ = parties

    result = await appointments.create_appointment(booking(doctor.id, patient.id))

    assert result.ok
    created = result.data
    assert created.status is AppointmentStatus.SCHEDULED
    assert created.duration == 30
    assert created.doctor.name == "Grey"
    assert created.patient.name == "Sam"
    assert result.invalidates == {View.APPOINTMENTS, View.UPCOMING}


async def test_create_with_unknown_doctor(appointments, parties):
    _, patient, _ = parties
    result = await appointments.create_appointment(booking("missing", patient.id))
    assert result.error == "Doctor not found"
    assert result.error_kind is ErrorKind.VALIDATION_ERROR


async def test_created_row_appears_for_both_parties(appointments, parties):
    doctor, patient, other = parties
    created = (await appointments.create_appointment(booking(doctor.id, patient.id))).data

    for user_id, role in ((doctor.id, Role.DOCTOR), (patient.id, Role.PATIENT)):
        listed = (await appointments.list_appointments(user_id, role)).data
        assert [a.id for a in listed] == [created.id]

    assert (await appointments.list_appointments(other.id, Role.PATIENT)).data == []


async def test_get_appointment_is_scoped(appointments, parties):
    doctor, patient, other = parties
    created = (await appointments.create_appointment(booking(doctor.id, patient.id))).data

    assert (await appointments.get_appointment(created.id, patient)).data.id == created.id

    hidden = await appointments.get_appointment(created.id, other)
    assert hidden.error_kind is ErrorKind.NOT_FOUND


async def test_update_changes_only_given_fields(appointments, parties):
    doctor, patient, _ = parties
    created = (
        await appointments.create_appointment(booking(doctor.id, patient.id, notes="Fasting"))
    ).data

    result = await appointments.update_appointment(
        created.id, AppointmentUpdate(status=AppointmentStatus.COMPLETED, time="10:00")
    )

    updated = result.data
    assert updated.status is AppointmentStatus.COMPLETED
    assert updated.time == "10:00"
    assert updated.notes == "Fasting"
    assert updated.date == date(2024, 6, 1)
    assert updated.doctor.name == "Grey"
    assert View.UPCOMING in result.invalidates


async def test_update_can_clear_notes(appointments, parties):
    doctor, patient, _ = parties
    created = (
        await appointments.create_appointment(booking(doctor.id, patient.id, notes="Fasting"))
    ).data

    updated = (await appointments.update_appointment(created.id, AppointmentUpdate(notes=None))).data

    assert updated.notes is None


async def test_update_missing(appointments):
    result = await appointments.update_appointment("missing", AppointmentUpdate(notes="x"))
    assert result.error_kind is ErrorKind.NOT_FOUND


async def test_delete_then_missing(appointments, parties):
    doctor, patient, _ = parties
    created = (await appointments.create_appointment(booking(doctor.id, patient.id))).data

    deleted = await appointments.delete_appointment(created.id)
    assert deleted.ok
    assert deleted.invalidates == {View.APPOINTMENTS, View.UPCOMING}

    assert (await appointments.list_appointments(doctor.id, Role.DOCTOR)).data == []
    again = await appointments.delete_appointment(created.id)
    assert again.error_kind is ErrorKind.NOT_FOUND


async def test_directory_lists_profiles(session, parties):
    directory = DirectoryService(session)

    doctors = (await directory.list_doctors()).data
    patients = (await directory.list_patients()).data

    assert [d.name for d in doctors] == ["Grey"]
    assert [p.name for p in patients] == ["Kim", "Sam"]
