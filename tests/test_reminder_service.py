# tests/test_reminder_service.py
from datetime import date

import pytest
from sqlalchemy import func, select

from app.core import (
    DEFAULT_REMINDER_MESSAGE,
    AppointmentStatus,
    ErrorKind,
    RecipientType,
    ReminderChannel,
    ReminderStatus,
    Role,
    View,
)
from app.db.models import Appointment, Reminder
from app.db.schemas import AppointmentCreate, AppointmentUpdate, ReminderCreate, ReminderUpdate
from app.services.v1 import REMINDER_NEEDS_SCHEDULED, AppointmentService, ReminderService


@pytest.fixture
def reminders(session):
    return ReminderService(session)


@pytest.fixture
async def two_appointments(session, make_user):
    doctor = await make_user("grey@example.com", Role.DOCTOR, "Grey")
    patient = await make_user("sam@example.com", Role.PATIENT, "Sam")
    service = AppointmentService(session)
    booked = []
    for day in (1, 2):
        result = await service.create_appointment(
            AppointmentCreate(
                doctor_id=doctor.id,
                patient_id=patient.id,
                date=date(2024, 6, day),
                time="09:00",
            )
        )
        booked.append(result.data)
    return booked


async def test_create_uses_defaults_and_starts_pending(reminders, two_appointments):
    first, _ = two_appointments

    result = await reminders.create_reminder(ReminderCreate(appointment_id=first.id))

    reminder = result.data
    assert reminder.status is ReminderStatus.PENDING
    assert reminder.type is ReminderChannel.SMS
    assert reminder.time_before == 60
    assert reminder.message == DEFAULT_REMINDER_MESSAGE
    assert reminder.recipient_type is RecipientType.PATIENT
    assert result.invalidates == {View.REMINDERS}


async def test_create_for_missing_appointment(reminders):
    result = await reminders.create_reminder(ReminderCreate(appointment_id="missing"))
    assert result.error_kind is ErrorKind.NOT_FOUND


async def test_list_reminders_of_one_appointment(reminders, two_appointments):
    first, second = two_appointments
    a = (await reminders.create_reminder(ReminderCreate(appointment_id=first.id))).data
    await reminders.create_reminder(ReminderCreate(appointment_id=second.id))
    b = (
        await reminders.create_reminder(ReminderCreate(appointment_id=first.id, time_before=15))
    ).data

    listed = (await reminders.list_reminders(first.id)).data

    assert [r.id for r in listed] == [a.id, b.id]


async def test_list_reminders_for_groups_by_given_order(reminders, two_appointments):
    first, second = two_appointments
    r1 = (await reminders.create_reminder(ReminderCreate(appointment_id=first.id))).data
    r2 = (await reminders.create_reminder(ReminderCreate(appointment_id=second.id))).data
    r3 = (await reminders.create_reminder(ReminderCreate(appointment_id=first.id))).data

    listed = (await reminders.list_reminders_for([second.id, first.id])).data

    assert [r.id for r in listed] == [r2.id, r1.id, r3.id]
    assert (await reminders.list_reminders_for([])).data == []


async def test_update_reminder(reminders, two_appointments):
    first, _ = two_appointments
    created = (await reminders.create_reminder(ReminderCreate(appointment_id=first.id))).data

    result = await reminders.update_reminder(
        created.id,
        ReminderUpdate(type=ReminderChannel.WHATSAPP, status=ReminderStatus.SENT),
    )

    assert result.data.type is ReminderChannel.WHATSAPP
    assert result.data.status is ReminderStatus.SENT
    assert result.data.time_before == 60
    assert result.invalidates == {View.REMINDERS}


async def test_delete_reminder(reminders, two_appointments):
    first, _ = two_appointments
    created = (await reminders.create_reminder(ReminderCreate(appointment_id=first.id))).data

    assert (await reminders.delete_reminder(created.id)).ok
    assert (await reminders.get_reminder(created.id)).error_kind is ErrorKind.NOT_FOUND
    assert (await reminders.delete_reminder(created.id)).error_kind is ErrorKind.NOT_FOUND


async def test_deleting_appointment_removes_its_reminders(session, reminders, two_appointments):
    first, second = two_appointments
    await reminders.create_reminder(ReminderCreate(appointment_id=first.id))
    await reminders.create_reminder(ReminderCreate(appointment_id=first.id))
    kept = (await reminders.create_reminder(ReminderCreate(appointment_id=second.id))).data

    await AppointmentService(session).delete_appointment(first.id)

    remaining = (await session.execute(select(func.count()).select_from(Reminder))).scalar_one()
    assert remaining == 1
    assert (await reminders.list_reminders(second.id)).data[0].id == kept.id


@pytest.mark.parametrize("status", [AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED])
async def test_create_rejects_unscheduled_appointment(session, reminders, two_appointments, status):
    first, _ = two_appointments
    await AppointmentService(session).update_appointment(first.id, AppointmentUpdate(status=status))

    result = await reminders.create_reminder(ReminderCreate(appointment_id=first.id))

    assert result.error == REMINDER_NEEDS_SCHEDULED
    assert result.error_kind is ErrorKind.VALIDATION_ERROR
    assert (await reminders.list_reminders(first.id)).data == []


APPOINTMENT_FIELDS = ("doctor_id", "patient_id", "date", "time", "duration", "status", "notes")


async def _appointment_fields(session, appointment_id):
    query = (
        select(Appointment)
        .where(Appointment.id == appointment_id)
        .execution_options(populate_existing=True)
    )
    row = (await session.execute(query)).scalar_one()
    return {field: getattr(row, field) for field in APPOINTMENT_FIELDS}


async def test_deleting_reminder_leaves_appointment_untouched(session, reminders, two_appointments):
    first, _ = two_appointments
    created = (await reminders.create_reminder(ReminderCreate(appointment_id=first.id))).data
    before = await _appointment_fields(session, first.id)

    await reminders.delete_reminder(created.id)

    assert await _appointment_fields(session, first.id) == before
