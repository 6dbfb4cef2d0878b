# app/api/v1/auth_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from common.api_error import AuthError
from app.db.schemas import (
    CurrentUserResponse,
    TokenResponse,
    UserIdentity,
    UserLogin,
    UserRegister,
)
from app.services.v1 import IdentityService
from .deps import get_bearer_token, get_identity_service, get_optional_user

auth_router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


@auth_router.post(
    "/register",
    response_model=UserIdentity,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    description="""
    Creates the sign-in identity and then the doctor or patient profile.
    Does not sign the user in.
    """,
    responses={401: {"description": "Email already registered"}},
)
async def register(
    payload: UserRegister,
    identity: IdentityService = Depends(get_identity_service),
):
    result = await identity.register(
        payload.email, payload.password, role=payload.role, name=payload.name
    )
    if not result.success:
        raise AuthError(result.error or "Registration failed")
    return result.user


@auth_router.post(
    "/login",
    response_model=TokenResponse,
    summary="Sign in",
    responses={401: {"description": "Invalid login credentials"}},
)
async def login(
    payload: UserLogin,
    identity: IdentityService = Depends(get_identity_service),
):
    result = await identity.login(payload.email, payload.password)
    if not result.success or result.user is None or result.access_token is None:
        raise AuthError(result.error or "Login failed")
    return TokenResponse(access_token=result.access_token, user=result.user)


@auth_router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
    description="Revokes the presented token. Always succeeds.",
)
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    identity: IdentityService = Depends(get_identity_service),
) -> Response:
    await identity.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@auth_router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Current session",
)
async def me(user: Optional[UserIdentity] = Depends(get_optional_user)):
    return CurrentUserResponse(user=user)


__all__ = ["auth_router"]
