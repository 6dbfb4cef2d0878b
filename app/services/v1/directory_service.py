# app/services/v1/directory_service.py
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.logger import get_app_logger
from app.core.results import ServiceResult
from app.db.models import Doctor, Patient

logger = get_app_logger(__name__)


class DirectoryService:
    """
    Reference lookups for the appointment form's pickers.

    Any signed-in user may list every doctor and every patient.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_doctors(self) -> ServiceResult[list[Doctor]]:
        query = (
            select(Doctor)
            .order_by(Doctor.name)
            .execution_options(logging_token="DirectoryService.list_doctors")
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Listing doctors failed", error=str(e))
            return ServiceResult.failure("Could not load doctors")
        return ServiceResult.success(list(result.scalars().all()))

    async def list_patients(self) -> ServiceResult[list[Patient]]:
        query = (
            select(Patient)
            .order_by(Patient.name)
            .execution_options(logging_token="DirectoryService.list_patients")
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Listing patients failed", error=str(e))
            return ServiceResult.failure("Could not load patients")
        return ServiceResult.success(list(result.scalars().all()))


__all__ = ["DirectoryService"]
