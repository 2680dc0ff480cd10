"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Gleam Growth Ledger"
    APP_VERSION: str = "0.1.0"
    SERVICE_NAME: str = "gleam-webhook-server"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./data.sqlite")

    # Webhook
    # An empty token rejects every webhook call.
    GLEAM_WEBHOOK_TOKEN: str = os.getenv("GLEAM_WEBHOOK_TOKEN", "")
    LEDGER_SOURCE: str = os.getenv("LEDGER_SOURCE", "gleam")
    STRICT_USER_MATCH: bool = (
        os.getenv("STRICT_USER_MATCH", "false").lower() == "true"
    )

    # JSON object of action key -> points. Empty means the built-in catalog.
    ACTION_POINTS: str = os.getenv("ACTION_POINTS", "")

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls.
    """
    return Settings()
