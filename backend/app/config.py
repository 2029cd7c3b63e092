"""Application configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables
    2. .env file (for local development)
    3. Default values

    Complex values (e.g. AUTHOR_COLORS) are given as JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "Authorship Overlay API"
    debug: bool = False

    # =========================================================================
    # CORS
    # =========================================================================
    # Editor plugins call the API from their own origin.
    cors_origins: list[str] = ["app://obsidian.md", "http://localhost:3000"]

    # =========================================================================
    # API Settings
    # =========================================================================
    api_v1_prefix: str = "/api/v1"

    # =========================================================================
    # Sync Backend
    # =========================================================================
    # When unset, no history is available and nothing is highlighted.
    sync_base_url: str | None = Field(
        default=None,
        description="Root URL of the synchronization backend's history API",
    )
    sync_timeout_seconds: float = Field(
        default=10.0,
        description="HTTP timeout for history and content requests",
    )

    # =========================================================================
    # Highlighting
    # =========================================================================
    # Fixed at startup. Labels not listed here get a hash-derived color.
    author_colors: dict[str, str] = Field(
        default={"bean_machine": "red", "Bident-of-Thassa.local": "blue"},
        description="Author label -> CSS color overrides",
    )
    highlight_opacity: float = Field(default=0.5, ge=0.0, le=1.0)
    offset_units: Literal["codepoint", "utf16"] = Field(
        default="codepoint",
        description="Indexing model for emitted span offsets",
    )


settings = Settings()
