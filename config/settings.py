"""
config/settings.py
──────────────────
Centralised settings loaded from .env via pydantic-settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"

    # Profile store
    data_dir: Path = Path("./data")
    profiles_file: str = "profiles.json"
    settings_file: str = "user_settings.json"
    likes_file: str = "likes.json"

    # Algorithm
    default_max_distance_km: float = 100.0
    default_limit: int = 10
    max_limit: int = 50
    candidate_pool_size: int = 100
    scoring_workers: int = 1

    # Logging
    log_level: str = "INFO"
    log_file: Path = Path("./logs/app.log")

    @property
    def profiles_path(self) -> Path:
        return self.data_dir / self.profiles_file

    @property
    def settings_path(self) -> Path:
        return self.data_dir / self.settings_file

    @property
    def likes_path(self) -> Path:
        return self.data_dir / self.likes_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
