from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./ats.db"

    # Domain events
    events_mode: str = "log"  # log | http
    events_url: Optional[str] = None
    events_timeout_seconds: int = 5

    # Pagination
    default_page_size: int = 25
    max_page_size: int = 100

    # App
    debug: bool = False
    allowed_origins: str = ""


settings = Settings()
