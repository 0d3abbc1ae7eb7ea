# Pydantic settings

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, Literal
import os


class Settings(BaseSettings):
    """Application settings"""

    # App
    app_name: str = "Pageview Telemetry"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Database
    database_url: str = "sqlite+aiosqlite:///./events.db"
    sqlite_busy_timeout_ms: int = Field(default=5000, ge=0)
    sqlite_synchronous: Literal["OFF", "NORMAL", "FULL", "EXTRA"] = "NORMAL"

    # Live stream
    live_interval_seconds: float = Field(default=2.0, gt=0)

    model_config = SettingsConfigDict(
        # Use .env.local if it exists (for local dev), otherwise .env
        env_file=".env.local" if os.path.exists(".env.local") else ".env",
        case_sensitive=False
    )

    @field_validator("sqlite_synchronous", mode="before")
    @classmethod
    def normalize_synchronous(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


settings = Settings()
