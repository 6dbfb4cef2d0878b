# common/config/app_config.py
"""
Complete application configuration with validation.
Database configuration (PostgreSQL with SSL, or a SQLite file) and token
signing settings for the identity service.
"""

from typing import Optional, Any
from pathlib import Path
from pydantic import BaseModel, Field, field_validator, model_validator, SecretStr
from common.api_error import ConfigurationError
from .config_types import EnvLogLevel, DbDriver, SslMode, Environment
from .env_config import require_env, get_env, get_int_env
from .logging_config import LoggingConfig


class DatabaseConfig(BaseModel):
    """
    Database configuration.

    PostgreSQL drivers need host/port and pool settings; the SQLite driver
    only needs ``name``, which is the database file path.
    """

    driver: DbDriver = Field(...)
    name: str = Field(..., min_length=1, description="Database name or SQLite file path")

    # Basic connection
    host: Optional[str] = Field(default=None, min_length=1)
    port: Optional[int] = Field(default=None, gt=0, le=65535)

    # Authentication (keep separate from URL for security)
    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[SecretStr] = Field(default=None)

    # Connection pooling
    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=20, ge=0, le=100)
    pool_timeout: int = Field(default=30, ge=1, le=300)
    pool_recycle: int = Field(default=3600, ge=300)  # Min 5 minutes

    # SSL/TLS Configuration
    ssl_mode: Optional[SslMode] = Field(default=None)
    ssl_cert_path: Optional[Path] = Field(default=None)
    ssl_key_path: Optional[Path] = Field(default=None)
    ssl_ca_path: Optional[Path] = Field(default=None)

    model_config = {"frozen": True}

    @field_validator("ssl_cert_path", "ssl_key_path", "ssl_ca_path")
    @classmethod
    def validate_ssl_paths(cls, v: Optional[Path]) -> Optional[Path]:
        """Validate SSL certificate paths exist."""
        if v is not None and not v.exists():
            raise ValueError(f"SSL file not found: {v}")
        return v

    @model_validator(mode="after")
    def validate_server_fields(self) -> "DatabaseConfig":
        if not self.driver.is_sqlite and (self.host is None or self.port is None):
            raise ValueError(f"host and port are required for driver {self.driver.value}")
        return self

    def get_connection_url(self, include_password: bool = False) -> str:
        """
        Build SQLAlchemy connection URL.

        Args:
            include_password: If True, include password in URL (use for actual connections)
                            If False, mask it (use for logging)
        """
        if self.driver.is_sqlite:
            return f"sqlite+aiosqlite:///{self.name}"

        if self.username:
            if include_password and self.password:
                auth = f"{self.username}:{self.password.get_secret_value()}"
            else:
                auth = f"{self.username}:****"
            return f"postgresql+{self.driver.value}://{auth}@{self.host}:{self.port}/{self.name}"

        return f"postgresql+{self.driver.value}://{self.host}:{self.port}/{self.name}"

    def requires_ssl(self) -> bool:
        """Check if SSL is required based on configuration."""
        return self.ssl_mode in [
            SslMode.REQUIRE,
            SslMode.VERIFY_CA,
            SslMode.VERIFY_FULL,
        ]

    def to_dict_safe(self) -> dict[str, Any]:
        """Convert to dict with sensitive data masked (safe for logging)."""
        data = self.model_dump(mode="json")
        if data.get("password"):
            data["password"] = "****"
        return data


class AuthConfig(BaseModel):
    """Access token signing settings."""

    secret_key: SecretStr
    algorithm: str = Field(default="HS256", pattern=r"^(HS256|HS384|HS512)$")
    access_token_expiry_minutes: int = Field(default=60 * 24, ge=5)

    model_config = {"frozen": True}


class AppConfig(BaseModel):
    """
    Complete application configuration.

    All configuration is loaded from environment variables and validated
    at startup. Invalid configuration will fail fast with clear error messages.
    """

    app_title: str = Field(..., min_length=1)
    app_version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")  # Semantic versioning
    environment: Environment

    logging: LoggingConfig
    auth: AuthConfig
    database: Optional[DatabaseConfig] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_production_settings(self) -> "AppConfig":
        """
        Validate production-specific requirements.
        """
        if self.environment.is_production:
            if self.database is None:
                raise ValueError("Database config required in production")
            if self.database.driver.is_sqlite:
                raise ValueError("SQLite is not allowed in production")
            if self.logging.log_level == EnvLogLevel.DEBUG:
                raise ValueError("DEBUG log level not allowed in production")
            if len(self.auth.secret_key.get_secret_value()) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production")
        return self


def load_database_config(environment: Environment) -> Optional[DatabaseConfig]:
    """
    Load database configuration from environment.

    Environment variables:
    - DB_DRIVER: asyncpg, psycopg or aiosqlite. Unset means no database.
    - DB_NAME: database name (PostgreSQL) or file path (SQLite)

    PostgreSQL only:
    - DB_HOST, DB_PORT
    - DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE (optional)
    - DB_USER, DB_PASSWORD, DB_SSL_MODE: optional in dev, required in prod
    - DB_SSL_CERT, DB_SSL_KEY, DB_SSL_CA: optional certificate paths
    """
    driver_str = get_env("DB_DRIVER")
    if not driver_str:
        return None

    try:
        driver = DbDriver(driver_str)
    except ValueError:
        valid_drivers = [d.value for d in DbDriver]
        raise ConfigurationError(
            f"Invalid DB_DRIVER: {driver_str}. Must be one of: {valid_drivers}"
        )

    name = require_env("DB_NAME")
    if driver.is_sqlite:
        return DatabaseConfig(driver=driver, name=name)

    if environment.is_production:
        username = require_env("DB_USER")
        password_str = require_env("DB_PASSWORD")
        ssl_mode_str = require_env("DB_SSL_MODE")
    else:
        username = get_env("DB_USER")
        password_str = get_env("DB_PASSWORD")
        ssl_mode_str = get_env("DB_SSL_MODE")

    ssl_mode: Optional[SslMode] = None
    if ssl_mode_str:
        try:
            ssl_mode = SslMode(ssl_mode_str)
        except ValueError:
            valid_modes = [m.value for m in SslMode]
            raise ConfigurationError(
                f"Invalid DB_SSL_MODE: {ssl_mode_str}. Must be one of: {valid_modes}"
            )

    ssl_paths: dict[str, Path] = {}
    for field_name, env_key in (
        ("ssl_cert_path", "DB_SSL_CERT"),
        ("ssl_key_path", "DB_SSL_KEY"),
        ("ssl_ca_path", "DB_SSL_CA"),
    ):
        value = get_env(env_key)
        if value:
            ssl_paths[field_name] = Path(value)

    return DatabaseConfig(
        driver=driver,
        name=name,
        host=require_env("DB_HOST"),
        port=get_int_env("DB_PORT"),
        username=username,
        password=SecretStr(password_str) if password_str else None,
        pool_size=get_int_env("DB_POOL_SIZE", 10),
        max_overflow=get_int_env("DB_MAX_OVERFLOW", 20),
        pool_timeout=get_int_env("DB_POOL_TIMEOUT", 30),
        pool_recycle=get_int_env("DB_POOL_RECYCLE", 3600),
        ssl_mode=ssl_mode,
        **ssl_paths,
    )


def load_auth_config() -> AuthConfig:
    """
    Environment variables:
    - SECRET_KEY (required)
    - JWT_ALGORITHM (default HS256)
    - ACCESS_TOKEN_EXPIRY_MINUTES (default 1440)
    """
    return AuthConfig(
        secret_key=SecretStr(require_env("SECRET_KEY")),
        algorithm=get_env("JWT_ALGORITHM", "HS256"),
        access_token_expiry_minutes=get_int_env("ACCESS_TOKEN_EXPIRY_MINUTES", 60 * 24),
    )


def load_app_config() -> AppConfig:
    """
    Load complete application configuration.

    Raises:
        ValidationError: If configuration is invalid
        ConfigurationError: If required env vars are missing
    """
    from .logging_config import load_logging_config

    env_str = require_env("ENVIRONMENT")
    try:
        environment = Environment(env_str)
    except ValueError:
        valid_envs = [e.value for e in Environment]
        raise ConfigurationError(
            f"Invalid ENVIRONMENT: {env_str}. Must be one of: {valid_envs}"
        )

    return AppConfig(
        app_title=require_env("APP_TITLE"),
        app_version=require_env("APP_VERSION"),
        environment=environment,
        logging=load_logging_config(),
        auth=load_auth_config(),
        database=load_database_config(environment),
    )


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "load_app_config",
]
