# app/api/v1/deps.py
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from common.api_error import AuthError
from common.config import get_config
from common.logger.logger_middleware import INVALIDATE_VIEWS_HEADER
from app.core.results import ServiceResult
from app.db import get_db
from app.db.schemas import UserIdentity
from app.services.v1 import (
    AppointmentService,
    DirectoryService,
    IdentityService,
    ReminderService,
    SessionContext,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_context(request: Request) -> SessionContext:
    context = getattr(request.app.state, "session_context", None)
    if context is None:
        raise RuntimeError(
            "SessionContext not found in app.state. Ensure lifespan is configured."
        )
    return context


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_identity_service(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
) -> IdentityService:
    return IdentityService(db, context, get_config().auth)


def get_appointment_service(db: AsyncSession = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


def get_reminder_service(db: AsyncSession = Depends(get_db)) -> ReminderService:
    return ReminderService(db)


def get_directory_service(db: AsyncSession = Depends(get_db)) -> DirectoryService:
    return DirectoryService(db)


async def get_optional_user(
    token: Optional[str] = Depends(get_bearer_token),
    identity: IdentityService = Depends(get_identity_service),
) -> Optional[UserIdentity]:
    return await identity.current_user(token)


async def get_current_user(
    user: Optional[UserIdentity] = Depends(get_optional_user),
) -> UserIdentity:
    if user is None:
        raise AuthError("Not authenticated")
    return user


def mark_invalidated(response: Response, result: ServiceResult) -> None:
    """Tell the client which views to refetch after a mutation."""
    if result.invalidates:
        response.headers[INVALIDATE_VIEWS_HEADER] = result.invalidation_header()


__all__ = [
    "get_session_context",
    "get_bearer_token",
    "get_identity_service",
    "get_appointment_service",
    "get_reminder_service",
    "get_directory_service",
    "get_optional_user",
    "get_current_user",
    "mark_invalidated",
]
