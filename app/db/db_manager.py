# app/db/db_manager.py
"""
Database manager focused on connection management and session handling.
Schema migrations are handled separately via Alembic CLI.

Design principles:
- Single responsibility: Connection/session management only
- Fail fast: Invalid configuration crashes on startup
- Explicit over implicit: No magic auto-migrations
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Any, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine,
)
from common import AppError, DatabaseConfig, get_app_logger

logger = get_app_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DbManager:
    """
    Database connection and session manager.

    Responsibilities:
    - Async engine/connection pool management
    - Session lifecycle management
    - Health checks

    NOT responsible for:
    - Schema creation/migration (use Alembic CLI)

    Usage:
        # Startup
        db_manager = DbManager.from_config(config.database)
        await db_manager.verify_connection()

        # Runtime
        async with db_manager.session() as session:
            result = await session.execute(...)

        # Shutdown
        await db_manager.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo: bool = False,
        connect_args: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize database manager.

        Args:
            url: Database URL (postgresql+asyncpg:// or sqlite+aiosqlite://)
            pool_size: Number of persistent connections (server databases only)
            max_overflow: Additional connections beyond pool_size
            pool_timeout: Seconds to wait for connection from pool
            pool_recycle: Recycle connections after N seconds
            pool_pre_ping: Test connections before using
            echo: Log all SQL statements (use for debugging)
            connect_args: Driver-specific connection arguments (SSL, etc.)
        """
        self._validate_url(url)
        self._is_sqlite = url.startswith("sqlite+aiosqlite://")

        engine_kwargs: dict[str, Any] = {
            "echo": echo,
            "pool_pre_ping": pool_pre_ping,
            "connect_args": connect_args or {},
        }
        if not self._is_sqlite:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self._config: dict[str, Any] = {
            "dialect": "sqlite" if self._is_sqlite else "postgresql",
            "pool_size": pool_size if not self._is_sqlite else None,
            "max_overflow": max_overflow if not self._is_sqlite else None,
        }

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self._is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        self._verified = False

        logger.info("DbManager initialized", **self._config)

    @classmethod
    def from_config(
        cls,
        config: DatabaseConfig,
        *,
        ssl_cert_path: Optional[Path] = None,
        ssl_key_path: Optional[Path] = None,
        ssl_ca_path: Optional[Path] = None,
        **kwargs: Any,
    ) -> "DbManager":
        """
        Create DbManager from DatabaseConfig with SSL support.

        Example:
            db_manager = DbManager.from_config(config.database)
        """
        url = config.get_connection_url(include_password=True)
        connect_args = kwargs.pop("connect_args", {})

        final_ssl_mode = config.ssl_mode.value if config.ssl_mode else None
        final_ssl_cert = ssl_cert_path or config.ssl_cert_path
        final_ssl_key = ssl_key_path or config.ssl_key_path
        final_ssl_ca = ssl_ca_path or config.ssl_ca_path

        if final_ssl_mode and config.driver.value == "asyncpg":
            import ssl as ssl_module

            if final_ssl_mode == "disable":
                connect_args["ssl"] = False
            elif final_ssl_mode in ["require", "verify-ca", "verify-full"]:
                ssl_context = ssl_module.create_default_context()
                if final_ssl_ca:
                    ssl_context.load_verify_locations(cafile=str(final_ssl_ca))
                if final_ssl_cert and final_ssl_key:
                    ssl_context.load_cert_chain(
                        certfile=str(final_ssl_cert),
                        keyfile=str(final_ssl_key),
                    )
                if final_ssl_mode == "require":
                    # encrypted, but no certificate verification
                    ssl_context.check_hostname = False
                    ssl_context.verify_mode = ssl_module.CERT_NONE
                elif final_ssl_mode == "verify-ca":
                    ssl_context.check_hostname = False
                connect_args["ssl"] = ssl_context

        if config.driver.is_sqlite:
            return cls(url=url, connect_args=connect_args, **kwargs)

        return cls(
            url=url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            connect_args=connect_args,
            **kwargs,
        )

    @staticmethod
    def _validate_url(url: str) -> None:
        if not url or not url.startswith(
            ("postgresql+asyncpg://", "postgresql+psycopg://", "sqlite+aiosqlite://")
        ):
            raise ValueError(
                "Invalid database URL. Expected postgresql+asyncpg://, "
                f"postgresql+psycopg:// or sqlite+aiosqlite://, got: {url[:20]}..."
            )

    @property
    def is_sqlite(self) -> bool:
        return self._is_sqlite

    async def verify_connection(self) -> None:
        """
        Verify database connection on startup.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            self._verified = True
            logger.info("✓ Database connection verified")
        except Exception as e:
            logger.error("❌ Database connection failed", error=str(e))
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    async def verify_migrations_current(self) -> str:
        """
        Check that Alembic has stamped the database.

        Returns:
            The current revision id

        Raises:
            RuntimeError: If alembic_version is missing or empty
        """
        if self._is_sqlite:
            exists_query = (
                "SELECT COUNT(*) FROM sqlite_master "
                "WHERE type = 'table' AND name = 'alembic_version'"
            )
        else:
            exists_query = (
                "SELECT COUNT(*) FROM information_schema.tables "
                "WHERE table_name = 'alembic_version'"
            )

        async with self.engine.connect() as conn:
            table_exists = (await conn.execute(text(exists_query))).scalar()
            if not table_exists:
                raise RuntimeError(
                    "alembic_version table not found. "
                    "Have you run 'alembic upgrade head'?"
                )

            current_version = (
                await conn.execute(text("SELECT version_num FROM alembic_version"))
            ).scalar()

        if not current_version:
            raise RuntimeError("alembic_version is empty. Run 'alembic upgrade head'.")

        logger.info("Current migration version", revision=current_version)
        return str(current_version)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional database session.

        Automatically commits on success, rolls back on exception.

        Usage:
            async with db_manager.session() as session:
                appointment = await session.get(Appointment, appointment_id)
                appointment.notes = "Bring lab results"
                # Commits automatically on exit
        """
        session = self.session_maker()
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            # domain errors are reported by the app error handler
            if not isinstance(e, AppError):
                logger.error("Session error, rolled back", error=str(e))
            raise
        finally:
            await session.close()

    async def health_check(self) -> dict[str, Any]:
        """
        Round-trip a trivial query.

        Example:
            {"healthy": True, "response_time_ms": 1.8, "dialect": "postgresql"}
        """
        start = time.perf_counter()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            return {"healthy": False, "error": str(e)}

        result: dict[str, Any] = {
            "healthy": True,
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
            "dialect": self._config["dialect"],
        }
        if not self._is_sqlite:
            result["pool_status"] = self.engine.pool.status()
        return result

    async def dispose(self) -> None:
        """
        Dispose of all connections and cleanup resources.
        Call this on application shutdown.
        """
        await self.engine.dispose()
        logger.info("✓ Database connections disposed")

    def get_config_snapshot(self) -> dict[str, Any]:
        return self._config.copy()


__all__ = ["DbManager"]
