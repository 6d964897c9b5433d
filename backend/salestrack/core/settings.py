from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when the process cannot start because configuration is missing or invalid."""


class Settings(BaseSettings):
    PROJECT_NAME: str = "SalesTrack"
    DATABASE_URL: str = "sqlite:///./data/salestrack.db"
    LOG_LEVEL: str = "INFO"

    # Token signing
    JWT_SECRET: str = Field(min_length=1)
    ADMIN_TOKEN_EXPIRES_HOURS: int = Field(default=24, gt=0)
    # No default: an unset lifetime must stop the process, not mint tokens with a bogus exp
    CLIENT_TOKEN_EXPIRES_HOURS: int = Field(gt=0)

    # Security
    ADMIN_SALT: str = Field(min_length=1)

    # Optional seed account created on startup
    ADMIN_USERNAME: str | None = None
    ADMIN_PASSWORD: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigurationError(f"Invalid or missing configuration: {', '.join(missing)}") from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
