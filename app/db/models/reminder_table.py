# app/db/models/reminder_table.py
from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    Enum as sqlalchemy_Enum,
)
from sqlalchemy.orm import Mapped, mapped_column
from app.core.enums import RecipientType, ReminderChannel, ReminderStatus
from .db_base_model import DbBaseModel, enum_values


class Reminder(DbBaseModel):
    __tablename__ = "reminders"
    __table_args__ = (
        CheckConstraint("time_before >= 5", name="ck_reminders_time_before_min"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    # Rows go away with their appointment (database-level cascade)
    appointment_id: Mapped[str] = mapped_column(
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[ReminderChannel] = mapped_column(
        sqlalchemy_Enum(ReminderChannel, name="reminder_type", values_callable=enum_values),
        nullable=False,
    )

    time_before: Mapped[int] = mapped_column(Integer, nullable=False)

    message: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[ReminderStatus] = mapped_column(
        sqlalchemy_Enum(ReminderStatus, name="reminder_status", values_callable=enum_values),
        nullable=False,
        default=ReminderStatus.PENDING,
    )

    recipient_type: Mapped[RecipientType] = mapped_column(
        sqlalchemy_Enum(RecipientType, name="recipient_type", values_callable=enum_values),
        nullable=False,
    )


__all__ = ["Reminder"]
