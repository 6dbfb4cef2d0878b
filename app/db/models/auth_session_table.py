# app/db/models/auth_session_table.py
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class AuthSession(DbBaseModel):
    """
    One row per issued access token. Logging out deletes the row, which
    revokes the token even though its signature is still valid.
    """

    __tablename__ = "auth_sessions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


__all__ = ["AuthSession"]
