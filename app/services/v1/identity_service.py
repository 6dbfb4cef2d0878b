# app/services/v1/identity_service.py
"""
Sign-in, registration and session resolution.

Every public method reports its outcome as a value. Rejected credentials,
duplicate emails and backend failures come back as ``AuthResult`` with
``success=False``; ``current_user`` returns ``None`` for any token it cannot
vouch for.
"""

from dataclasses import dataclass
from typing import Optional, assert_never

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.config import AuthConfig
from common.logger import get_app_logger
from app.core.roles import Role
from app.db.models import AuthSession, Doctor, Patient, User
from app.db.schemas import UserIdentity
from .security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from .session_context import SessionChange, SessionContext, SessionEvent

logger = get_app_logger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"
ALREADY_REGISTERED = "User already registered"


@dataclass(frozen=True)
class AuthResult:
    success: bool
    error: Optional[str] = None
    user: Optional[UserIdentity] = None
    access_token: Optional[str] = None

    @classmethod
    def accepted(
        cls, user: UserIdentity, access_token: Optional[str] = None
    ) -> "AuthResult":
        return cls(success=True, user=user, access_token=access_token)

    @classmethod
    def rejected(cls, error: str) -> "AuthResult":
        return cls(success=False, error=error)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityService:
    def __init__(self, db: AsyncSession, context: SessionContext, auth: AuthConfig):
        self.db = db
        self.context = context
        self.auth = auth

    async def current_user(self, token: Optional[str]) -> Optional[UserIdentity]:
        """
        Resolve a bearer token to the signed-in user.

        ``None`` when the token is missing, forged, expired or revoked, when
        the user is gone, when the store fails, or when this token's session
        was signed out while the lookup was in flight.
        """
        if not token:
            return None

        claims = decode_access_token(token, self.auth)
        if claims is None:
            return None

        user_id: str = claims["sub"]
        session_id: str = claims["sid"]

        query = (
            select(User)
            .join(AuthSession, AuthSession.user_id == User.id)
            .where(AuthSession.id == session_id, User.id == user_id)
            .execution_options(logging_token="IdentityService.current_user")
        )
        with self.context.track(session_id) as lookup:
            try:
                user = (await self.db.execute(query)).scalar_one_or_none()
            except SQLAlchemyError as e:
                logger.error("Session lookup failed", user_id=user_id, error=str(e))
                return None

        if user is None:
            return None

        if lookup.stale:
            logger.debug("Discarding stale session lookup", user_id=user_id)
            return None

        return UserIdentity.model_validate(user)

    async def login(self, email: str, password: str) -> AuthResult:
        email = _normalize_email(email)
        try:
            user = (
                await self.db.execute(select(User).where(User.email == email))
            ).scalar_one_or_none()

            if user is None or not verify_password(password, user.password_hash):
                logger.warning("Login rejected", email=email)
                return AuthResult.rejected(INVALID_CREDENTIALS)

            auth_session = AuthSession(user_id=user.id)
            self.db.add(auth_session)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Login failed", email=email, error=str(e))
            return AuthResult.rejected("Login failed, please try again")

        identity = UserIdentity.model_validate(user)
        token = create_access_token(identity.id, auth_session.id, self.auth)

        self.context.publish(
            SessionChange(
                SessionEvent.SIGNED_IN,
                user_id=identity.id,
                user=identity,
                session_id=auth_session.id,
            )
        )
        logger.info("User signed in", user_id=identity.id, role=identity.role.value)
        return AuthResult.accepted(identity, access_token=token)

    async def register(
        self,
        email: str,
        password: str,
        *,
        role: Role,
        name: str,
    ) -> AuthResult:
        """
        Create the identity, then the role-specific profile.

        The two steps commit separately. A failed profile insert leaves the
        identity in place and registration still succeeds; the gap is logged.
        """
        email = _normalize_email(email)
        user = User(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Registration rejected, email taken", email=email)
            return AuthResult.rejected(ALREADY_REGISTERED)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Registration failed", email=email, error=str(e))
            return AuthResult.rejected("Registration failed, please try again")

        identity = UserIdentity.model_validate(user)
        await self._create_profile(identity)

        self.context.publish(
            SessionChange(SessionEvent.USER_REGISTERED, user_id=identity.id, user=identity)
        )
        logger.info("User registered", user_id=identity.id, role=identity.role.value)
        return AuthResult.accepted(identity)

    async def _create_profile(self, identity: UserIdentity) -> None:
        match identity.role:
            case Role.DOCTOR:
                profile: Doctor | Patient = Doctor(
                    id=identity.id, name=identity.name, email=identity.email
                )
            case Role.PATIENT:
                profile = Patient(id=identity.id, name=identity.name, email=identity.email)
            case _:
                assert_never(identity.role)

        self.db.add(profile)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Profile creation failed, identity kept without profile",
                user_id=identity.id,
                role=identity.role.value,
                error=str(e),
            )

    async def logout(self, token: Optional[str]) -> None:
        """Revoke the token's session if there is one. Never fails."""
        claims = decode_access_token(token, self.auth) if token else None
        if claims is None:
            return

        try:
            await self.db.execute(delete(AuthSession).where(AuthSession.id == claims["sid"]))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Session revocation failed", user_id=claims["sub"], error=str(e))

        self.context.publish(
            SessionChange(SessionEvent.SIGNED_OUT, user_id=claims["sub"], session_id=claims["sid"])
        )
        logger.info("User signed out", user_id=claims["sub"])


__all__ = ["AuthResult", "IdentityService", "INVALID_CREDENTIALS", "ALREADY_REGISTERED"]
