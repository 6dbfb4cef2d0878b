# app/core/appointment_filters.py
"""
Filtering and ordering of appointment lists.

Both views are pure functions of their arguments: the input sequence is
never reordered or mutated and the same arguments give the same list.

- ``filter_appointments`` feeds the appointments listing (day + status tab)
- ``upcoming_appointments`` feeds the dashboard summary (next 5 scheduled)
"""

from datetime import date, datetime, time
from typing import Iterable, Optional, Protocol, TypeVar, Union

from .enums import ALL, AppointmentStatus

UPCOMING_LIMIT = 5


class Schedulable(Protocol):
    """Anything shaped like an appointment row: ORM object or response model."""

    doctor_id: str
    patient_id: str
    date: date
    time: str  # zero-padded "HH:MM"
    status: AppointmentStatus


A = TypeVar("A", bound=Schedulable)

StatusTab = Union[AppointmentStatus, str]


def calendar_day(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def sort_key(appointment: Schedulable) -> tuple[date, str]:
    # "HH:MM" is zero padded, so string order is clock order
    return calendar_day(appointment.date), appointment.time


def starts_at(appointment: Schedulable) -> datetime:
    """Local wall-clock instant the appointment begins."""
    return datetime.combine(
        calendar_day(appointment.date), time.fromisoformat(appointment.time)
    )


def normalize_status_tab(status_tab: Optional[StatusTab]) -> Optional[AppointmentStatus]:
    """
    ``None`` means no status filter ("all").

    Raises:
        ValueError: unknown tab value
    """
    if status_tab is None or status_tab == ALL:
        return None
    return AppointmentStatus(status_tab)


def filter_appointments(
    appointments: Iterable[A],
    selected_date: Optional[date] = None,
    status_tab: Optional[StatusTab] = ALL,
) -> list[A]:
    """
    Listing view: exact-day filter, then status tab, then (date, time) order.

    Args:
        appointments: rows visible to the user
        selected_date: calendar day to keep; ``None`` keeps every day
        status_tab: "all" or an appointment status
    """
    status = normalize_status_tab(status_tab)
    day = calendar_day(selected_date) if selected_date is not None else None

    filtered = [
        appointment
        for appointment in appointments
        if (day is None or calendar_day(appointment.date) == day)
        and (status is None or appointment.status == status)
    ]
    return sorted(filtered, key=sort_key)


def upcoming_appointments(
    appointments: Iterable[A],
    now: datetime,
    limit: int = UPCOMING_LIMIT,
) -> list[A]:
    """
    Dashboard view: scheduled appointments starting strictly after ``now``,
    soonest first, at most ``limit`` of them.

    ``now`` is naive local time, the same clock the ``date``/``time``
    columns are written in.
    """
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)

    upcoming = [
        appointment
        for appointment in appointments
        if appointment.status == AppointmentStatus.SCHEDULED
        and starts_at(appointment) > now
    ]
    return sorted(upcoming, key=starts_at)[:limit]


__all__ = [
    "UPCOMING_LIMIT",
    "Schedulable",
    "StatusTab",
    "calendar_day",
    "sort_key",
    "starts_at",
    "normalize_status_tab",
    "filter_appointments",
    "upcoming_appointments",
]
