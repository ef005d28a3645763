"""Application configuration from environment."""
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Standup Tracker"
    debug: bool = False
    log_level: str = "INFO"

    # Database (async driver; Alembic converts to a sync URL)
    database_url: str = "sqlite+aiosqlite:///./standups.db"

    # Signing key for the auth cookie
    secret_key: str = "change-me-in-production-use-env"

    # Auth cookie (session-based for logged-in users)
    auth_cookie_name: str = "standup_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # AI provider used for analysis and prompt suggestions
    ai_provider: Literal["anthropic", "openai", "bedrock"] = "anthropic"
    ai_max_tokens: int = 1024
    ai_temperature: float = 0.7

    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-5-haiku-20241022"

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"

    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    bedrock_model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()

