# tests/test_reminder_aggregation.py
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pytest

from app.core import (
    AppointmentStatus,
    ReminderStatus,
    aggregate_reminders,
    attach_appointment,
    filter_reminders,
    format_offset,
    render_message,
)


@dataclass
class Party:
    name: str


@dataclass
class Appt:
    id: str
    date: date = date(2024, 5, 2)
    time: str = "14:30"
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    doctor_id: str = "d1"
    patient_id: str = "p1"
    doctor: Optional[Party] = None
    patient: Optional[Party] = None


@dataclass
class Rem:
    id: str
    appointment_id: str
    time_before: int = 60
    message: str = "Reminder"
    status: ReminderStatus = ReminderStatus.PENDING


@pytest.mark.parametrize(
    "minutes, label",
    [
        (15, "15 minutes before"),
        (59, "59 minutes before"),
        (60, "1 hour before"),
        (90, "1 hours before"),
        (120, "2 hours before"),
        (1439, "23 hours before"),
        (1440, "1 day before"),
        (2880, "2 days before"),
        (3000, "2 days before"),
    ],
)
def test_format_offset(minutes, label):
    assert format_offset(minutes) == label


def test_attach_missing_parent_is_none():
    item = attach_appointment(Rem("r1", "gone"), {"a1": Appt("a1")})
    assert item.appointment is None
    assert item.reminder.id == "r1"


def test_attach_accepts_plain_iterable():
    parent = Appt("a1")
    item = attach_appointment(Rem("r1", "a1"), [Appt("a0"), parent])
    assert item.appointment is parent


def test_aggregate_keeps_reminder_order():
    appts = [Appt("a1"), Appt("a2")]
    reminders = [Rem("r3", "a2"), Rem("r1", "a1"), Rem("r2", "a2")]
    items = aggregate_reminders(reminders, appts)
    assert [i.reminder.id for i in items] == ["r3", "r1", "r2"]
    assert [i.appointment.id for i in items] == ["a2", "a1", "a2"]


def test_filter_reminders_by_status():
    items = aggregate_reminders(
        [Rem("r1", "a1"), Rem("r2", "a1", status=ReminderStatus.SENT)], [Appt("a1")]
    )
    assert [i.reminder.id for i in filter_reminders(items, "sent")] == ["r2"]
    assert len(filter_reminders(items)) == 2


def test_filter_reminders_rejects_unknown_status():
    with pytest.raises(ValueError):
        filter_reminders([], "queued")


def test_render_message_fills_known_placeholders():
    appt = Appt("a1", doctor=Party("Grey"), patient=Party("Sam"))
    text = render_message("Hi {patient_name}, Dr. {doctor_name} on {date} at {time} {other}", appt)
    assert text == "Hi Sam, Dr. Grey on 2024-05-02 at 14:30 {other}"


def test_render_message_without_appointment_is_untouched():
    assert render_message("See {doctor_name}", None) == "See {doctor_name}"


def test_render_message_keeps_placeholder_of_unloaded_party():
    assert render_message("{doctor_name} at {time}", Appt("a1")) == "{doctor_name} at 14:30"


def test_item_labels():
    item = attach_appointment(Rem("r1", "a1", time_before=1440, message="On {date}"), [Appt("a1")])
    assert item.offset_label == "1 day before"
    assert item.rendered_message == "On 2024-05-02"
