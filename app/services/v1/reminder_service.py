# app/services/v1/reminder_service.py
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.logger import get_app_logger
from app.core.enums import AppointmentStatus, ReminderStatus
from app.core.results import REMINDER_VIEWS, ErrorKind, ServiceResult
from app.db.models import Appointment, Reminder
from app.db.schemas import ReminderCreate, ReminderUpdate

logger = get_app_logger(__name__)

REMINDER_NOT_FOUND = "Reminder not found"
REMINDER_NEEDS_SCHEDULED = "Reminders can only be set for scheduled appointments"


class ReminderService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_reminders(self, appointment_id: str) -> ServiceResult[list[Reminder]]:
        query = (
            select(Reminder)
            .where(Reminder.appointment_id == appointment_id)
            .order_by(Reminder.created_at)
            .execution_options(logging_token="ReminderService.list_reminders")
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Listing reminders failed", appointment_id=appointment_id, error=str(e))
            return ServiceResult.failure("Could not load reminders")

        return ServiceResult.success(list(result.scalars().all()))

    async def list_reminders_for(
        self, appointment_ids: Sequence[str]
    ) -> ServiceResult[list[Reminder]]:
        """
        Reminders of several appointments in one round trip.

        Grouped by appointment in the order the ids were given, each group in
        creation order: the same sequence as calling ``list_reminders`` once
        per id and concatenating.
        """
        if not appointment_ids:
            return ServiceResult.success([])

        query = (
            select(Reminder)
            .where(Reminder.appointment_id.in_(appointment_ids))
            .order_by(Reminder.created_at)
            .execution_options(logging_token="ReminderService.list_reminders_for")
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(
                "Listing reminders failed",
                appointment_count=len(appointment_ids),
                error=str(e),
            )
            return ServiceResult.failure("Could not load reminders")

        position = {appointment_id: i for i, appointment_id in enumerate(appointment_ids)}
        # sorted() is stable, so creation order survives inside each group
        reminders = sorted(result.scalars().all(), key=lambda r: position[r.appointment_id])
        return ServiceResult.success(reminders)

    async def get_reminder(self, reminder_id: str) -> ServiceResult[Reminder]:
        try:
            reminder = await self.db.get(Reminder, reminder_id)
        except SQLAlchemyError as e:
            logger.error("Loading reminder failed", reminder_id=reminder_id, error=str(e))
            return ServiceResult.failure("Could not load reminder")

        if reminder is None:
            return ServiceResult.failure(REMINDER_NOT_FOUND, ErrorKind.NOT_FOUND)
        return ServiceResult.success(reminder)

    async def create_reminder(self, data: ReminderCreate) -> ServiceResult[Reminder]:
        """
        New reminders always start out pending.

        Only scheduled appointments take reminders; cancelled or completed
        ones are rejected as a validation error.
        """
        try:
            appointment = await self.db.get(Appointment, data.appointment_id)
            if appointment is None:
                return ServiceResult.failure("Appointment not found", ErrorKind.NOT_FOUND)
            if appointment.status is not AppointmentStatus.SCHEDULED:
                return ServiceResult.failure(
                    REMINDER_NEEDS_SCHEDULED, ErrorKind.VALIDATION_ERROR
                )

            reminder = Reminder(
                appointment_id=data.appointment_id,
                type=data.type,
                time_before=data.time_before,
                message=data.message,
                recipient_type=data.recipient_type,
                status=ReminderStatus.PENDING,
            )
            self.db.add(reminder)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Creating reminder failed", appointment_id=data.appointment_id, error=str(e)
            )
            return ServiceResult.failure("Could not create reminder")

        logger.info(
            "Reminder created",
            reminder_id=reminder.id,
            appointment_id=reminder.appointment_id,
            channel=reminder.type.value,
        )
        return ServiceResult.success(reminder, invalidates=REMINDER_VIEWS)

    async def update_reminder(
        self, reminder_id: str, patch: ReminderUpdate
    ) -> ServiceResult[Reminder]:
        changes = {
            key: value
            for key, value in patch.model_dump(exclude_unset=True).items()
            if value is not None
        }
        try:
            reminder = await self.db.get(Reminder, reminder_id)
            if reminder is None:
                return ServiceResult.failure(REMINDER_NOT_FOUND, ErrorKind.NOT_FOUND)

            for field_name, value in changes.items():
                setattr(reminder, field_name, value)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Updating reminder failed", reminder_id=reminder_id, error=str(e))
            return ServiceResult.failure("Could not update reminder")

        logger.info("Reminder updated", reminder_id=reminder_id, fields=sorted(changes))
        return ServiceResult.success(reminder, invalidates=REMINDER_VIEWS)

    async def delete_reminder(self, reminder_id: str) -> ServiceResult[None]:
        try:
            result = await self.db.execute(delete(Reminder).where(Reminder.id == reminder_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Deleting reminder failed", reminder_id=reminder_id, error=str(e))
            return ServiceResult.failure("Could not delete reminder")

        if result.rowcount == 0:
            return ServiceResult.failure(REMINDER_NOT_FOUND, ErrorKind.NOT_FOUND)

        logger.info("Reminder deleted", reminder_id=reminder_id)
        return ServiceResult.success(invalidates=REMINDER_VIEWS)


__all__ = ["ReminderService", "REMINDER_NOT_FOUND", "REMINDER_NEEDS_SCHEDULED"]
