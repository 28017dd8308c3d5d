"""Application settings.

Values are read from the environment and from a local ``.env`` file. Both the
proxy and the terminal client read their settings through ``get_settings()``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATE_PATH = Path.home() / ".shopassist" / "client_state.json"


class Settings(BaseSettings):
    """Runtime configuration for the proxy and the client."""

    # Proxy -> remote assistant API
    REMOTE_API_BASE: str = "http://localhost:9000"
    REMOTE_TIMEOUT_S: Optional[float] = None  # None waits indefinitely

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Client -> proxy
    PROXY_BASE_URL: str = "http://localhost:8000/api/shop"
    CLIENT_STATE_PATH: str = str(DEFAULT_STATE_PATH)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance.

    Cached so it can be injected as a FastAPI dependency on every request.
    """
    return Settings()
