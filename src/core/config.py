"""Application configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="user-sync-backend", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    # Supabase
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")

    # User tables
    private_users_table: str = Field(default="users_private", description="Authoritative private user table")
    public_users_table: str = Field(default="users", description="Public projection of the private user table")
    user_key_column: str = Field(default="id", description="Column holding the user identifier in both tables")
    private_users_schema: str = Field(default="public", description="Database schema of the private user table")

    # Database webhook
    webhook_secret: str = Field(..., description="Shared secret sent by the database webhook")
    webhook_secret_header: str = Field(
        default="X-Webhook-Secret",
        description="Header carrying the database webhook shared secret",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Call get_settings.cache_clear() to reload settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
