from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Inventory defaults for rows created by the first stock entry
    DEFAULT_MIN_STOCK_LEVEL: int = 10
    DEFAULT_MAX_STOCK_LEVEL: int = 1000

    # Loyalty: LOYALTY_POINTS_PER_CURRENCY_UNIT points per LOYALTY_POINTS_THRESHOLD rupees
    LOYALTY_POINTS_PER_CURRENCY_UNIT: int = 1
    LOYALTY_POINTS_THRESHOLD: int = 100

    ORDER_NUMBER_PREFIX: str = "ORD"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v

    @field_validator("LOYALTY_POINTS_THRESHOLD")
    @classmethod
    def threshold_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("LOYALTY_POINTS_THRESHOLD must be greater than 0")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
