# app/db/deps.py
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from .db_manager import DbManager


def get_db_manager(request: Request) -> DbManager:
    """
    Pull the manager created during lifespan from app.state, so several app
    instances (tests) never share one engine.
    """
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise RuntimeError(
            "DbManager not found in app.state. Ensure lifespan is configured."
        )
    return manager


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with get_db_manager(request).session() as session:
        yield session


get_session = get_db

__all__ = ["get_session", "get_db", "get_db_manager"]
