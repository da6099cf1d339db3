"""Process Settings - environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - These settings cover the process itself (logging, pid file, fallbacks); the
      validator's own configuration document is ValidatorConfig, loaded per command

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - VALIDATOR_ prefix keeps the namespace apart from wallet/chain tooling variables
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VALIDATOR_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database used by `database` commands (which take no config file)
    database_url: str = "sqlite+aiosqlite:///./validator.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Service lifecycle
    pid_file: Path = Path("./validator.pid")

    # Chain client
    chain_probe_timeout_seconds: float = 10.0

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()
