"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "mysql://",
    "mysql+pymysql://",
    "sqlite://",
    "sqlite+pysqlite://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    HOST: str = "0.0.0.0"
    PORT: int = 4000

    # MySQL: host, user and database are checked when the gateway connects, not at import
    MYSQL_HOST: str | None = None
    MYSQL_PORT: int = 3306
    MYSQL_USER: str | None = None
    MYSQL_PASSWORD: SecretStr = SecretStr("")
    MYSQL_DB: str | None = None
    # Full SQLAlchemy URL; when set it wins over the MYSQL_* parts
    DATABASE_URL: str | None = None

    DB_POOL_SIZE: int = 10
    # Pool waits are expected under load; the timeout only catches a wedged pool.
    DB_POOL_TIMEOUT_SEC: float = 600.0

    MAX_BODY_BYTES: int = 1024 * 1024
    CORS_ORIGINS: list[str] = ["*"]

    # Bootstrap admin account
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: SecretStr = SecretStr("admin123")
    SEED_DEFAULT_ADMIN: bool = True
    # When False, an Admin login for an unknown username fails instead of checking the bootstrap pair.
    DEFAULT_ADMIN_FALLBACK: bool = True

    # Record logins rejected by the injection heuristic as blocked attempts
    AUDIT_BLOCKED_LOGINS: bool = False

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if not any(v.strip().startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a MySQL or SQLite URL (e.g. mysql+pymysql:// or sqlite://)"
            )
        return v.strip()

    @field_validator("PORT", "MYSQL_PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("DB_POOL_SIZE must be between 1 and 100")
        return v

    @field_validator("DB_POOL_TIMEOUT_SEC")
    @classmethod
    def validate_pool_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DB_POOL_TIMEOUT_SEC must be greater than 0")
        return v

    @field_validator("MAX_BODY_BYTES")
    @classmethod
    def validate_max_body_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_BODY_BYTES must be greater than 0")
        return v

    @field_validator("DEFAULT_ADMIN_USERNAME")
    @classmethod
    def validate_default_admin_username(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DEFAULT_ADMIN_USERNAME must be set and non-empty")
        return v.strip()

    @field_validator("DEFAULT_ADMIN_PASSWORD")
    @classmethod
    def validate_default_admin_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("DEFAULT_ADMIN_PASSWORD must be set and non-empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()

