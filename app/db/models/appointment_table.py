# app/db/models/appointment_table.py
from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from datetime import date as date_type
from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    Enum as sqlalchemy_Enum,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from app.core.enums import AppointmentStatus
from .db_base_model import DbBaseModel, enum_values

if TYPE_CHECKING:
    from .patient_table import Patient
    from .doctor_table import Doctor


class Appointment(DbBaseModel):
    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint("duration >= 5", name="ck_appointments_duration_min"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    doctor_id: Mapped[str] = mapped_column(
        ForeignKey("doctors.id"),
        nullable=False,
        index=True,
    )

    patient_id: Mapped[str] = mapped_column(
        ForeignKey("patients.id"),
        nullable=False,
        index=True,
    )

    # Calendar day + local "HH:MM" as entered; together they name one instant
    date: Mapped[date_type] = mapped_column(Date, nullable=False)

    time: Mapped[str] = mapped_column(String(5), nullable=False)

    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)

    status: Mapped[AppointmentStatus] = mapped_column(
        sqlalchemy_Enum(
            AppointmentStatus, name="appointment_status", values_callable=enum_values
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Display snapshots; always eager-loaded by the services
    doctor: Mapped["Doctor"] = relationship("Doctor", lazy="raise")
    patient: Mapped["Patient"] = relationship("Patient", lazy="raise")


__all__ = ["Appointment"]
