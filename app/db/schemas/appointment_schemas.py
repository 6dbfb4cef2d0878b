# app/db/schemas/appointment_schemas.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date as date_type, datetime
from typing import Optional
from app.core.enums import AppointmentStatus
from .patient_schema import PatientResponse
from .doctor_schema import DoctorResponse

# Zero-padded 24h clock; ordering relies on it
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentBase(BaseModel):
    date: date_type = Field(..., description="Calendar day, YYYY-MM-DD")
    time: str = Field(..., pattern=TIME_PATTERN, description="Local time, HH:MM")
    duration: int = Field(30, ge=5, description="Length in minutes")
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentRequest(AppointmentBase):
    # The caller's own side is filled from the session; only the counterpart is read
    doctor_id: Optional[str] = Field(None, description="Required when a patient books")
    patient_id: Optional[str] = Field(None, description="Required when a doctor books")


class AppointmentCreate(AppointmentBase):
    doctor_id: str = Field(..., min_length=1)
    patient_id: str = Field(..., min_length=1)


class AppointmentUpdate(BaseModel):
    # Used for rescheduling, status changes or notes
    date: Optional[date_type] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    duration: Optional[int] = Field(None, ge=5)
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentResponse(AppointmentBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    doctor_id: str
    patient_id: str
    status: AppointmentStatus
    created_at: datetime

    doctor: Optional[DoctorResponse] = None
    patient: Optional[PatientResponse] = None


class UpcomingAppointmentResponse(AppointmentResponse):
    headline: str = Field(..., description="e.g. 'Appointment with Dr. Grey'")


__all__ = [
    "TIME_PATTERN",
    "AppointmentRequest",
    "AppointmentCreate",
    "AppointmentUpdate",
    "AppointmentResponse",
    "UpcomingAppointmentResponse",
]
