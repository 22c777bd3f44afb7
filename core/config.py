"""
Application configuration management.

Uses pydantic-settings for type-safe environment variable parsing.
All configuration is centralized here to support dependency injection
and avoid scattering os.getenv() calls throughout the codebase.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "change_me"


class Settings(BaseSettings):
    """
    Application settings with validation and type coercion.

    Values are loaded from environment variables or .env file.
    All fields have sensible defaults for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Session tokens
    # The secret must stay stable across restarts, otherwise every
    # previously issued token becomes unverifiable.
    jwt_secret: str = DEFAULT_JWT_SECRET
    token_expire_minutes: Optional[int] = None
    password_hash_iterations: int = 100_000

    # Storage Backend Selection
    # Options: "file", "memory"
    storage_backend: Literal["file", "memory"] = "file"
    data_dir: Path = Path("data")
    users_file: str = "users.json"
    memos_file: str = "memos.json"

    # Server
    server_host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_file

    @property
    def memos_path(self) -> Path:
        return self.data_dir / self.memos_file

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings singleton.

    Use this function to get settings instance throughout the application.
    The @lru_cache ensures we only parse environment once.
    """
    return Settings()


# Convenience export for direct import
settings = get_settings()
