from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Field Service Time Logs API"
    PROJECT_VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Database; DATABASE_URL wins over the POSTGRES_* parts
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "timelogs"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)
    MIGRATE_ON_START: bool = False

    # Tokens
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Hourly rate given to users created without one
    DEFAULT_HOURLY_RATE: Decimal = Field(default=Decimal("650.00"), ge=0, max_digits=10, decimal_places=2)

    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info) -> str:
        if isinstance(v, str) and v:
            return v
        parts = info.data
        return "postgresql://{user}:{password}@{server}:{port}/{db}".format(
            user=parts.get("POSTGRES_USER"),
            password=parts.get("POSTGRES_PASSWORD"),
            server=parts.get("POSTGRES_SERVER"),
            port=parts.get("POSTGRES_PORT"),
            db=parts.get("POSTGRES_DB"),
        )

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        return v.upper()


settings = Settings()
