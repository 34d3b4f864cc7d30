"""Application settings.

Pydantic Settings reads everything from ``RPS_*`` environment variables (or a
local ``.env``) so the same build runs against a local API and production.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Core settings.

    - ``database_url``: store for transient editing sessions, SQLite by default.
    - ``api_base_url``: root of the external curriculum REST API.
    - ``api_token``: bearer token forwarded to the external API, if any.
    """

    database_url: str = Field(
        default="sqlite:///./storage/rps_editor.db", description="SQLAlchemy URL for editor sessions"
    )
    api_base_url: str = Field(
        default="http://localhost:8080/api/v1", description="External curriculum API root"
    )
    api_token: Optional[str] = Field(default=None, description="Bearer token for the external API")
    api_timeout_seconds: float = Field(default=15.0, description="External API timeout")
    log_level: str = Field(default="INFO", description="Root log level")
    default_tahun_ajaran: str = Field(
        default="2024/2025", description="Academic year preset for a new RPS"
    )
    session_ttl_hours: int = Field(
        default=24, description="Editing sessions idle longer than this are purged on startup"
    )
    perguruan_tinggi: str = Field(
        default="Universitas XYZ", description="Institution name printed on the RPS document"
    )

    model_config = {
        "env_prefix": "RPS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached global settings instance."""

    return Settings()
