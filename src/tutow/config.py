"""Application settings via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables with TUTOW_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="TUTOW_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///./tutow.db"
    redis_url: str = ""
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60
    rate_limit_auth: int = 10
    log_level: str = "INFO"
    log_format: str = "json"
    seed_on_startup: bool = True

    # --- JWT ---
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24
    jwt_issuer: str = "tutow"

    # --- Password ---
    password_min_length: int = 6
    password_max_length: int = 128
    password_hash_time_cost: int = 2
    password_hash_memory_kib: int = 65536

    # --- Economy ---
    starting_gold: int = 100
    garden_pot_count: int = 3

    # --- Exercises ---
    exercise_batch_size: int = 10
    recent_sessions_limit: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
