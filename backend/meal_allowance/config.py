from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Meal Allowance"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://meal_allowance:meal_allowance@db:5432/meal_allowance"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    db_pool_size: int = 5
    db_command_timeout_seconds: float = 10.0

    # Allowance paid per workday-equivalent, in whole currency units.
    daily_allowance: int = 8000
    employee_cache_ttl_seconds: float = 600.0
    leave_cache_ttl_seconds: float = 300.0
    import_batch_size: int = 100


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
