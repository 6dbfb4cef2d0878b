# app/db/models/doctor_table.py
from __future__ import annotations
from typing import Optional
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class Doctor(DbBaseModel):
    __tablename__ = "doctors"

    # Same id as the owning users row
    id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    specialty: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)


__all__ = ["Doctor"]
