"""Process configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    Variables are prefixed with ``CYCLESENSE_`` (e.g. ``CYCLESENSE_LOG_LEVEL``).
    """

    # --- App ---
    app_name: str = "CycleSense"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Database ---
    database_url: str | None = None  # postgres DSN for asyncpg; None = no DB
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_command_timeout: float = 30.0

    # --- Engine ---
    engine_config_path: Path | None = None  # override bundled engine_config.yaml

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "CYCLESENSE_",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
