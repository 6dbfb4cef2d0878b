# app/db/schemas/reminder_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional
from app.core.enums import RecipientType, ReminderChannel, ReminderStatus
from app.core.reminder_aggregation import (
    DEFAULT_REMINDER_CHANNEL,
    DEFAULT_REMINDER_MESSAGE,
    DEFAULT_REMINDER_RECIPIENT,
    DEFAULT_REMINDER_TIME_BEFORE,
    ReminderWithAppointment,
)
from .appointment_schemas import AppointmentResponse


class ReminderBase(BaseModel):
    type: ReminderChannel = DEFAULT_REMINDER_CHANNEL
    time_before: int = Field(DEFAULT_REMINDER_TIME_BEFORE, ge=5, description="Minutes before start")
    message: str = Field(DEFAULT_REMINDER_MESSAGE, min_length=1, max_length=1000)
    recipient_type: RecipientType = DEFAULT_REMINDER_RECIPIENT


class ReminderCreate(ReminderBase):
    appointment_id: str = Field(..., min_length=1)


class ReminderRequest(ReminderBase):
    """Body of POST /appointments/{id}/reminders; the parent comes from the path."""


class ReminderUpdate(BaseModel):
    type: Optional[ReminderChannel] = None
    time_before: Optional[int] = Field(None, ge=5)
    message: Optional[str] = Field(None, min_length=1, max_length=1000)
    recipient_type: Optional[RecipientType] = None
    status: Optional[ReminderStatus] = None


class ReminderResponse(ReminderBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    appointment_id: str
    status: ReminderStatus
    created_at: datetime


class ReminderWithAppointmentResponse(ReminderResponse):
    appointment: Optional[AppointmentResponse] = None
    offset_label: str
    rendered_message: str

    @classmethod
    def from_aggregate(cls, item: ReminderWithAppointment) -> "ReminderWithAppointmentResponse":
        base = ReminderResponse.model_validate(item.reminder)
        return cls(
            **base.model_dump(),
            appointment=(
                AppointmentResponse.model_validate(item.appointment)
                if item.appointment is not None
                else None
            ),
            offset_label=item.offset_label,
            rendered_message=item.rendered_message,
        )


class OffsetOption(BaseModel):
    value: int
    label: str


class ChannelOption(BaseModel):
    value: ReminderChannel
    label: str


class ReminderOptionsResponse(BaseModel):
    channels: list[ChannelOption]
    time_before: list[OffsetOption]
    placeholders: list[str]
    defaults: ReminderBase


__all__ = [
    "ReminderBase",
    "ReminderCreate",
    "ReminderRequest",
    "ReminderUpdate",
    "ReminderResponse",
    "ReminderWithAppointmentResponse",
    "OffsetOption",
    "ChannelOption",
    "ReminderOptionsResponse",
]
