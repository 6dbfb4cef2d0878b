# app/db/models/user_table.py
from sqlalchemy import String, Enum as sqlalchemy_Enum
from sqlalchemy.orm import Mapped, mapped_column
from app.core.roles import Role
from .db_base_model import DbBaseModel, enum_values


class User(DbBaseModel):
    """Sign-in identity. The role never changes after registration."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[Role] = mapped_column(
        sqlalchemy_Enum(Role, name="user_role", values_callable=enum_values),
        nullable=False,
    )


__all__ = ["User"]
