"""
Centralized configuration for the Varnaya backend.

All settings are loaded from environment variables with sensible defaults.
Every variable is prefixed with VARNAYA_ (e.g., VARNAYA_SUPABASE_URL).
"""

import logging
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VARNAYA_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Varnaya API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000", "https://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""

    # Sessions
    session_cookie_name: str = "session_token"

    # Route protection
    login_path: str = "/login"
    admin_prefix: str = "/admin"
    authenticated_paths: list[str] = ["/checkout", "/orders", "/wishlist"]
    admin_roles: list[str] = ["admin", "editor"]
    auth_redirect_includes_return_path: bool = False

    # Blog
    atomic_view_increment: bool = False
    related_posts_limit: int = Field(default=4, ge=0, le=4)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
