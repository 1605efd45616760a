"""Application configuration loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Auto-ticket application settings."""

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    log_format: str = "text"  # "text" or "json"

    # Remote ticket store (unset → in-memory stub store)
    ticket_store_url: str | None = None
    ticket_store_timeout: float | None = None  # seconds; None waits forever

    # Presentation
    currency_symbol: str = "R"

    # Query behavior
    unknown_mode_policy: Literal["fallback", "error"] = "fallback"
    retry_policy: Literal["all", "last"] = "all"

    # CORS
    cors_origins: str = "*"  # Comma-separated origins; "*" for dev only

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_ignore_empty": True,
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"

    @property
    def uses_stub_store(self) -> bool:
        return not self.ticket_store_url

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def get_settings() -> Settings:
    """Return a fresh settings instance."""
    return Settings()
