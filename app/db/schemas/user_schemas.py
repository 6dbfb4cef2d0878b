# app/db/schemas/user_schemas.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field
from typing import Optional
from app.core.roles import Role


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)
    role: Role


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserIdentity(BaseModel):
    """The signed-in user as every other component sees it."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    email: str
    name: str
    role: Role

    @computed_field
    @property
    def role_label(self) -> str:
        return self.role.label


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserIdentity


class CurrentUserResponse(BaseModel):
    user: Optional[UserIdentity] = None


__all__ = [
    "UserRegister",
    "UserLogin",
    "UserIdentity",
    "TokenResponse",
    "CurrentUserResponse",
]
