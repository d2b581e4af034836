"""
Application configuration.

All configuration is loaded from environment variables.
The auth backend endpoint and its public key are required:
without them no route can be served, so a missing value is
a startup error rather than something to recover from.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing at startup."""


class Settings:
    """Application settings loaded from environment variables."""

    APP_NAME: str = "Driving School CRM"
    APP_VERSION: str = "0.1.0"

    def __init__(self):
        self.DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Server
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8000"))

        # Database
        self.DATABASE_URL: str = os.getenv(
            "DATABASE_URL",
            "sqlite:///./drive_crm.db"
        )

        # Hosted auth backend
        self.SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
        self.SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
        self.AUTH_TIMEOUT_SECONDS: float = float(
            os.getenv("AUTH_TIMEOUT_SECONDS", "5")
        )

        # Session cookies
        self.COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "0") == "1"

    def validate(self) -> "Settings":
        """Fail fast when the auth backend is not configured."""
        missing = [
            name for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached, validated settings.

    The Settings object is created once and reused for all
    subsequent calls. Raises ConfigurationError if the auth
    backend is not configured.
    """
    return Settings().validate()
