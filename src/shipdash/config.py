"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SHIPDASH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Shipment Dashboard API"
    api_prefix: str = "/api"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase anon key; the session signs in anonymously with it.",
    )
    shipments_table: str = Field(default="shipments", description="Table holding one row per shipment.")

    # Geocoding
    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of a Nominatim-compatible geocoding service.",
    )
    geocoder_user_agent: str = Field(
        default="shipment-dashboard/0.1",
        description="User-Agent header sent to the geocoder (required by Nominatim usage policy).",
    )
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)

    curve_factor: float = Field(default=0.2, description="Bow of the connector drawn between two markers.")
    sync_interval_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Interval for polling the remote store for foreign changes; 0 disables polling.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
