# app/services/v1/security.py
from datetime import timedelta
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from common.config import AuthConfig
from app.db.models import utcnow

# Password hashing context
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user_id: str, session_id: str, auth: AuthConfig) -> str:
    """
    Sign a token naming the user (``sub``) and the session row (``sid``)
    that keeps it alive.
    """
    expire = utcnow() + timedelta(minutes=auth.access_token_expiry_minutes)
    claims: dict[str, Any] = {
        "sub": user_id,
        "sid": session_id,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(claims, auth.secret_key.get_secret_value(), algorithm=auth.algorithm)


def decode_access_token(token: str, auth: AuthConfig) -> Optional[dict[str, Any]]:
    """Verified claims, or ``None`` for a bad signature, expiry or shape."""
    try:
        payload = jwt.decode(
            token, auth.secret_key.get_secret_value(), algorithms=[auth.algorithm]
        )
    except JWTError:
        return None

    if payload.get("type") != "access" or not payload.get("sub") or not payload.get("sid"):
        return None
    return payload


__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "decode_access_token",
]
