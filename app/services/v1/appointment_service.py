# app/services/v1/appointment_service.py

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from common.logger import get_app_logger
from app.core.enums import AppointmentStatus
from app.core.results import APPOINTMENT_VIEWS, ErrorKind, ServiceResult
from app.core.roles import Role, scope_column
from app.db.models import Appointment, Doctor, Patient
from app.db.schemas import AppointmentCreate, AppointmentUpdate, UserIdentity

logger = get_app_logger(__name__)

APPOINTMENT_NOT_FOUND = "Appointment not found"


def _with_parties():
    # doctor/patient relationships are lazy="raise"; every read loads both
    return select(Appointment).options(
        selectinload(Appointment.doctor),
        selectinload(Appointment.patient),
    )


class AppointmentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_appointments(
        self, user_id: str, role: Role
    ) -> ServiceResult[list[Appointment]]:
        """
        Every appointment the user is party to, with doctor and patient
        snapshots. Order is unspecified; the filter engine sorts.
        """
        column = getattr(Appointment, scope_column(role))
        query = (
            _with_parties()
            .where(column == user_id)
            .execution_options(logging_token="AppointmentService.list_appointments")
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Listing appointments failed", user_id=user_id, error=str(e))
            return ServiceResult.failure("Could not load appointments")

        return ServiceResult.success(list(result.scalars().all()))

    async def get_appointment(
        self, appointment_id: str, user: UserIdentity
    ) -> ServiceResult[Appointment]:
        """Scoped fetch: a row the user is not party to reads as not found."""
        column = getattr(Appointment, scope_column(user.role))
        query = _with_parties().where(
            Appointment.id == appointment_id,
            column == user.id,
        )
        try:
            appointment = (await self.db.execute(query)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Loading appointment failed", appointment_id=appointment_id, error=str(e))
            return ServiceResult.failure("Could not load appointment")

        if appointment is None:
            return ServiceResult.failure(APPOINTMENT_NOT_FOUND, ErrorKind.NOT_FOUND)
        return ServiceResult.success(appointment)

    async def create_appointment(self, data: AppointmentCreate) -> ServiceResult[Appointment]:
        try:
            doctor = await self.db.get(Doctor, data.doctor_id)
            patient = await self.db.get(Patient, data.patient_id)
            if doctor is None:
                return ServiceResult.failure("Doctor not found", ErrorKind.VALIDATION_ERROR)
            if patient is None:
                return ServiceResult.failure("Patient not found", ErrorKind.VALIDATION_ERROR)

            appointment = Appointment(
                doctor_id=data.doctor_id,
                patient_id=data.patient_id,
                date=data.date,
                time=data.time,
                duration=data.duration,
                notes=data.notes,
                status=AppointmentStatus.SCHEDULED,
            )
            self.db.add(appointment)
            await self.db.commit()

            created = await self._reload(appointment.id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Creating appointment failed", error=str(e))
            return ServiceResult.failure("Could not create appointment")

        logger.info(
            "Appointment created",
            appointment_id=created.id,
            doctor_id=created.doctor_id,
            patient_id=created.patient_id,
        )
        return ServiceResult.success(created, invalidates=APPOINTMENT_VIEWS)

    async def update_appointment(
        self, appointment_id: str, patch: AppointmentUpdate
    ) -> ServiceResult[Appointment]:
        """Partial update; the last write wins."""
        changes = patch.model_dump(exclude_unset=True)
        try:
            appointment = await self.db.get(Appointment, appointment_id)
            if appointment is None:
                return ServiceResult.failure(APPOINTMENT_NOT_FOUND, ErrorKind.NOT_FOUND)

            for field_name, value in changes.items():
                if value is None and field_name != "notes":
                    continue
                setattr(appointment, field_name, value)
            await self.db.commit()

            updated = await self._reload(appointment_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Updating appointment failed", appointment_id=appointment_id, error=str(e))
            return ServiceResult.failure("Could not update appointment")

        logger.info("Appointment updated", appointment_id=appointment_id, fields=sorted(changes))
        return ServiceResult.success(updated, invalidates=APPOINTMENT_VIEWS)

    async def delete_appointment(self, appointment_id: str) -> ServiceResult[None]:
        """Hard delete. Reminders go with it through the foreign key cascade."""
        try:
            result = await self.db.execute(
                delete(Appointment).where(Appointment.id == appointment_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Deleting appointment failed", appointment_id=appointment_id, error=str(e))
            return ServiceResult.failure("Could not delete appointment")

        if result.rowcount == 0:
            return ServiceResult.failure(APPOINTMENT_NOT_FOUND, ErrorKind.NOT_FOUND)

        logger.info("Appointment deleted", appointment_id=appointment_id)
        return ServiceResult.success(invalidates=APPOINTMENT_VIEWS)

    async def _reload(self, appointment_id: str) -> Appointment:
        query = (
            _with_parties()
            .where(Appointment.id == appointment_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(query)).scalar_one()


__all__ = ["AppointmentService", "APPOINTMENT_NOT_FOUND"]
