"""
WHOOP Client Configuration
==========================
Environment-driven settings for the WHOOP client. Pydantic Settings
validates types on first access so a bad timeout or URL fails at
construction time rather than mid-request.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- WHOOP API ---
    whoop_api_base_url: str = "https://api.prod.whoop.com"
    # Applied to transports the client creates itself; injected clients keep their own
    whoop_timeout_seconds: float = 30.0

    # --- WHOOP OAuth app ---
    whoop_client_id: str = ""
    whoop_client_secret: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
