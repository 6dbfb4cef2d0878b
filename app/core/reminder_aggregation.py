# app/core/reminder_aggregation.py
"""
Joins reminders to their appointments and formats them for display.
"""

from dataclasses import dataclass
from typing import Generic, Iterable, Mapping, Optional, Protocol, TypeVar, Union

from .appointment_filters import Schedulable, calendar_day
from .enums import ALL, RecipientType, ReminderChannel, ReminderStatus

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440

DEFAULT_REMINDER_CHANNEL = ReminderChannel.SMS
DEFAULT_REMINDER_TIME_BEFORE = 60
DEFAULT_REMINDER_MESSAGE = "Reminder: You have an appointment coming up."
DEFAULT_REMINDER_RECIPIENT = RecipientType.PATIENT

# Offsets offered by the reminder form, in minutes
TIME_BEFORE_OPTIONS: tuple[int, ...] = (15, 30, 60, 120, 1440, 2880)

MESSAGE_PLACEHOLDERS: tuple[str, ...] = ("doctor_name", "patient_name", "date", "time")


class ReminderLike(Protocol):
    appointment_id: str
    time_before: int
    message: str
    status: ReminderStatus


R = TypeVar("R", bound=ReminderLike)
P = TypeVar("P", bound=Schedulable)


@dataclass(frozen=True)
class ReminderWithAppointment(Generic[R, P]):
    reminder: R
    appointment: Optional[P] = None

    @property
    def offset_label(self) -> str:
        return format_offset(self.reminder.time_before)

    @property
    def rendered_message(self) -> str:
        return render_message(self.reminder.message, self.appointment)


def format_offset(minutes: int) -> str:
    """
    Human-readable lead time.

    Hours and days use floor division and plural wording, so 90 minutes
    reads "1 hours before". Only exactly 60 and 1440 get the singular form.
    """
    if minutes < MINUTES_PER_HOUR:
        return f"{minutes} minutes before"
    if minutes == MINUTES_PER_HOUR:
        return "1 hour before"
    if minutes < MINUTES_PER_DAY:
        return f"{minutes // MINUTES_PER_HOUR} hours before"
    if minutes == MINUTES_PER_DAY:
        return "1 day before"
    return f"{minutes // MINUTES_PER_DAY} days before"


def render_message(template: str, appointment: Optional[Schedulable]) -> str:
    """
    Fill ``{doctor_name}``, ``{patient_name}``, ``{date}`` and ``{time}``.

    Other braces are left alone. Without an appointment the template is
    returned untouched, and a placeholder whose party is not loaded stays
    as written.
    """
    if appointment is None:
        return template

    doctor = getattr(appointment, "doctor", None)
    patient = getattr(appointment, "patient", None)
    values: dict[str, Optional[str]] = {
        "doctor_name": doctor.name if doctor is not None else None,
        "patient_name": patient.name if patient is not None else None,
        "date": calendar_day(appointment.date).isoformat(),
        "time": appointment.time,
    }

    rendered = template
    for key, value in values.items():
        if value is not None:
            rendered = rendered.replace("{" + key + "}", value)
    return rendered


def attach_appointment(
    reminder: R,
    appointments: Union[Mapping[str, P], Iterable[P]],
) -> ReminderWithAppointment[R, P]:
    """Left join by ``appointment_id``; a missing parent is not an error."""
    if isinstance(appointments, Mapping):
        parent = appointments.get(reminder.appointment_id)
    else:
        parent = next(
            (a for a in appointments if getattr(a, "id", None) == reminder.appointment_id),
            None,
        )
    return ReminderWithAppointment(reminder=reminder, appointment=parent)


def aggregate_reminders(
    reminders: Iterable[R],
    appointments: Iterable[P],
) -> list[ReminderWithAppointment[R, P]]:
    """Join every reminder to its appointment, keeping reminder order."""
    by_id: dict[str, P] = {getattr(a, "id"): a for a in appointments}
    return [attach_appointment(reminder, by_id) for reminder in reminders]


def filter_reminders(
    items: Iterable[ReminderWithAppointment[R, P]],
    status: Union[ReminderStatus, str] = ALL,
) -> list[ReminderWithAppointment[R, P]]:
    """
    Raises:
        ValueError: unknown status value
    """
    if status == ALL:
        return list(items)
    wanted = ReminderStatus(status)
    return [item for item in items if item.reminder.status == wanted]


__all__ = [
    "DEFAULT_REMINDER_CHANNEL",
    "DEFAULT_REMINDER_TIME_BEFORE",
    "DEFAULT_REMINDER_MESSAGE",
    "DEFAULT_REMINDER_RECIPIENT",
    "TIME_BEFORE_OPTIONS",
    "MESSAGE_PLACEHOLDERS",
    "ReminderWithAppointment",
    "format_offset",
    "render_message",
    "attach_appointment",
    "aggregate_reminders",
    "filter_reminders",
]
