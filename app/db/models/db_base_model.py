# app/db/models/db_base_model.py
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import DateTime
from datetime import datetime, timezone
from enum import Enum
from typing import Type
from uuid import uuid4


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def enum_values(enum_cls: Type[Enum]) -> list[str]:
    """Persist enum values ("scheduled"), not member names ("SCHEDULED")."""
    return [member.value for member in enum_cls]


class DbBaseModel(DeclarativeBase):
    __abstract__ = True  # prevents SQLAlchemy from creating a table for this base

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    @staticmethod
    def generate_uuid() -> str:
        return str(uuid4())


__all__ = ["DbBaseModel", "utcnow", "enum_values"]
