# app/db/models/patient_table.py
from __future__ import annotations
from datetime import date
from typing import Optional
from sqlalchemy import String, Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class Patient(DbBaseModel):
    __tablename__ = "patients"

    # Same id as the owning users row
    id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)


__all__ = ["Patient"]
