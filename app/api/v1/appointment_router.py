# app/api/v1/appointment_router.py
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from common.api_error import DataAccessError
from app.core import (
    ALL,
    ErrorKind,
    MissingPartyError,
    describe_appointment,
    filter_appointments,
    scheduling_parties,
    upcoming_appointments,
)
from app.db.schemas import (
    AppointmentCreate,
    AppointmentRequest,
    AppointmentResponse,
    AppointmentUpdate,
    ReminderCreate,
    ReminderRequest,
    ReminderResponse,
    UpcomingAppointmentResponse,
    UserIdentity,
)
from app.services.v1 import AppointmentService, ReminderService
from .deps import (
    get_appointment_service,
    get_current_user,
    get_reminder_service,
    mark_invalidated,
)

appointment_router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
)


def _validation_error(message: str) -> DataAccessError:
    kind = ErrorKind.VALIDATION_ERROR
    return DataAccessError(message, status_code=kind.status_code, code=kind.value)


@appointment_router.get(
    "",
    response_model=list[AppointmentResponse],
    summary="List my appointments",
    description="""
    Appointments the caller is party to, optionally narrowed to one calendar
    day and one status tab, ordered by date then time.

    **Database Impact:** one SELECT plus one per eager-loaded party.
    """,
)
async def list_appointments(
    selected_date: Optional[date] = Query(None, alias="date"),
    status_tab: str = Query(ALL, alias="status"),
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    rows = (await appointments.list_appointments(user.id, user.role)).unwrap() or []
    try:
        return filter_appointments(rows, selected_date=selected_date, status_tab=status_tab)
    except ValueError:
        raise _validation_error(f"Unknown status filter: {status_tab}")


@appointment_router.get(
    "/upcoming",
    response_model=list[UpcomingAppointmentResponse],
    summary="Next scheduled appointments",
    description="At most five scheduled appointments that start after now, soonest first.",
)
async def list_upcoming(
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    rows = (await appointments.list_appointments(user.id, user.role)).unwrap() or []
    return [
        UpcomingAppointmentResponse(
            **AppointmentResponse.model_validate(row).model_dump(),
            headline=describe_appointment(user.role, row),
        )
        for row in upcoming_appointments(rows, now=datetime.now())
    ]


@appointment_router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
    description="""
    The caller fills their own side of the appointment; only the counterpart
    (`patient_id` for doctors, `doctor_id` for patients) is read from the body.
    """,
    responses={422: {"description": "Counterpart missing or unknown"}},
)
async def create_appointment(
    payload: AppointmentRequest,
    response: Response,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    try:
        doctor_id, patient_id = scheduling_parties(
            user.role, user.id, doctor_id=payload.doctor_id, patient_id=payload.patient_id
        )
    except MissingPartyError as e:
        raise _validation_error(str(e))

    data = AppointmentCreate(
        **payload.model_dump(exclude={"doctor_id", "patient_id"}),
        doctor_id=doctor_id,
        patient_id=patient_id,
    )
    result = await appointments.create_appointment(data)
    created = result.unwrap()
    mark_invalidated(response, result)
    return created


@appointment_router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Get one appointment",
    responses={404: {"description": "Appointment not found"}},
)
async def get_appointment(
    appointment_id: str,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return (await appointments.get_appointment(appointment_id, user)).unwrap()


@appointment_router.patch(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Reschedule, change status or edit notes",
    responses={404: {"description": "Appointment not found"}},
)
async def update_appointment(
    appointment_id: str,
    payload: AppointmentUpdate,
    response: Response,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    (await appointments.get_appointment(appointment_id, user)).unwrap()

    result = await appointments.update_appointment(appointment_id, payload)
    updated = result.unwrap()
    mark_invalidated(response, result)
    return updated


@appointment_router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an appointment and its reminders",
    responses={404: {"description": "Appointment not found"}},
)
async def delete_appointment(
    appointment_id: str,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
) -> Response:
    (await appointments.get_appointment(appointment_id, user)).unwrap()

    result = await appointments.delete_appointment(appointment_id)
    result.unwrap()
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    mark_invalidated(response, result)
    return response


@appointment_router.get(
    "/{appointment_id}/reminders",
    response_model=list[ReminderResponse],
    summary="Reminders of one appointment",
    responses={404: {"description": "Appointment not found"}},
)
async def list_appointment_reminders(
    appointment_id: str,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
    reminders: ReminderService = Depends(get_reminder_service),
):
    (await appointments.get_appointment(appointment_id, user)).unwrap()
    return (await reminders.list_reminders(appointment_id)).unwrap()


@appointment_router.post(
    "/{appointment_id}/reminders",
    response_model=ReminderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a reminder",
    description=(
        "Fields left out take the reminder form defaults; new reminders start pending. "
        "Only scheduled appointments take reminders."
    ),
    responses={
        404: {"description": "Appointment not found"},
        422: {"description": "Appointment is not scheduled"},
    },
)
async def create_appointment_reminder(
    appointment_id: str,
    payload: ReminderRequest,
    response: Response,
    user: UserIdentity = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
    reminders: ReminderService = Depends(get_reminder_service),
):
    (await appointments.get_appointment(appointment_id, user)).unwrap()

    result = await reminders.create_reminder(
        ReminderCreate(**payload.model_dump(), appointment_id=appointment_id)
    )
    created = result.unwrap()
    mark_invalidated(response, result)
    return created


__all__ = ["appointment_router"]
