# app/api/v1/reminder_router.py
from fastapi import APIRouter, Depends, Query, Response, status

from common.api_error import DataAccessError
from app.core import (
    ALL,
    MESSAGE_PLACEHOLDERS,
    TIME_BEFORE_OPTIONS,
    ErrorKind,
    ReminderChannel,
    aggregate_reminders,
    filter_reminders,
    format_offset,
)
from app.db.models import Reminder
from app.db.schemas import (
    ChannelOption,
    OffsetOption,
    ReminderBase,
    ReminderOptionsResponse,
    ReminderResponse,
    ReminderUpdate,
    ReminderWithAppointmentResponse,
    UserIdentity,
)
from app.services.v1 import AppointmentService, ReminderService
from .deps import (
    get_appointment_service,
    get_current_user,
    get_reminder_service,
    mark_invalidated,
)

reminder_router = APIRouter(
    prefix="/reminders",
    tags=["Reminders"],
)


async def _owned_reminder(
    reminder_id: str,
    user: UserIdentity,
    appointments: AppointmentService,
    reminders: ReminderService,
) -> Reminder:
    """A reminder is visible only through an appointment the user is party to."""
    reminder = (await reminders.get_reminder(reminder_id)).unwrap()
    parent = await appointments.get_appointment(reminder.appointment_id, user)
    if parent.error_kind is ErrorKind.NOT_FOUND:
        kind = ErrorKind.NOT_FOUND
        raise DataAccessError("Reminder not found", status_code=kind.status_code, code=kind.value)
    parent.unwrap()
    return reminder


@reminder_router.get(
    "",
    response_model=list[ReminderWithAppointmentResponse],
    summary="All my reminders",
    description="""
    Reminders across every appointment the caller is party to, each joined to
    its appointment, with a human-readable offset and the message rendered
    for that appointment.

    **Database Impact:** one SELECT for appointments, one for all reminders.
    """,
)
async def list_reminders(
    status_filter: str = Query(ALL, alias="status"),
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
    reminders: ReminderService = Depends(get_reminder_service),
):
    parents = (await appointments.list_appointments(user.id, user.role)).unwrap() or []
    rows = (
        await reminders.list_reminders_for([appointment.id for appointment in parents])
    ).unwrap() or []

    try:
        items = filter_reminders(aggregate_reminders(rows, parents), status=status_filter)
    except ValueError:
        kind = ErrorKind.VALIDATION_ERROR
        raise DataAccessError(
            f"Unknown status filter: {status_filter}",
            status_code=kind.status_code,
            code=kind.value,
        )
    return [ReminderWithAppointmentResponse.from_aggregate(item) for item in items]


@reminder_router.get(
    "/options",
    response_model=ReminderOptionsResponse,
    summary="Reminder form choices",
    description="Channels, lead times, message placeholders and defaults for a new reminder.",
)
async def reminder_options(_: UserIdentity = Depends(get_current_user)):
    return ReminderOptionsResponse(
        channels=[ChannelOption(value=channel, label=channel.label) for channel in ReminderChannel],
        time_before=[
            OffsetOption(value=minutes, label=format_offset(minutes))
            for minutes in TIME_BEFORE_OPTIONS
        ],
        placeholders=list(MESSAGE_PLACEHOLDERS),
        defaults=ReminderBase(),
    )


@reminder_router.patch(
    "/{reminder_id}",
    response_model=ReminderResponse,
    summary="Edit a reminder",
    responses={404: {"description": "Reminder not found"}},
)
async def update_reminder(
    reminder_id: str,
    payload: ReminderUpdate,
    response: Response,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
    reminders: ReminderService = Depends(get_reminder_service),
):
    await _owned_reminder(reminder_id, user, appointments, reminders)

    result = await reminders.update_reminder(reminder_id, payload)
    updated = result.unwrap()
    mark_invalidated(response, result)
    return updated


@reminder_router.delete(
    "/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a reminder",
    responses={404: {"description": "Reminder not found"}},
)
async def delete_reminder(
    reminder_id: str,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
    reminders: ReminderService = Depends(get_reminder_service),
) -> Response:
    await _owned_reminder(reminder_id, user, appointments, reminders)

    result = await reminders.delete_reminder(reminder_id)
    result.unwrap()
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    mark_invalidated(response, result)
    return response


__all__ = ["reminder_router"]
