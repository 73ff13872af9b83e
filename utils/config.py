"""Configuration management utilities for the climate actions tools.

Provides:
- ``AppConfig``: API server and data source settings from the environment
- ``ClientConfig``: settings for the loader that reads the API
"""

import os as _os
from pathlib import Path


class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have defaults so the API starts without any configuration;
    with no spreadsheet credentials it serves the static snapshot.

    Environment variables:
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_PORT: API server port (default: 8000)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        GOOGLE_SHEETS_API_KEY: API key for the Sheets values endpoint
        GOOGLE_SHEETS_ID: Spreadsheet ID holding the Actions tab
        GOOGLE_SHEETS_RANGE: Cell range to read (default: Actions!A:O)
        ACTIONS_STATIC_PATH: Fallback JSON snapshot (default: public/actions.json)
        STATUS_LOG_PATH: Status update log file (default: status_updates.json)
        SOURCE_CACHE_TTL: Seconds a source read is reused (default: 60)
        HTTP_TIMEOUT: Seconds per outbound request (default: 15)
    """

    def __init__(self) -> None:
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.sheets_api_key: str | None = _os.getenv("GOOGLE_SHEETS_API_KEY") or None
        self.sheets_id: str | None = _os.getenv("GOOGLE_SHEETS_ID") or None
        self.sheets_range = _os.getenv("GOOGLE_SHEETS_RANGE", "Actions!A:O")
        self.static_path = Path(_os.getenv("ACTIONS_STATIC_PATH", "public/actions.json"))
        self.status_log_path = Path(_os.getenv("STATUS_LOG_PATH", "status_updates.json"))
        self.source_cache_ttl = float(_os.getenv("SOURCE_CACHE_TTL", "60"))
        self.http_timeout = float(_os.getenv("HTTP_TIMEOUT", "15"))

    @property
    def sheets_configured(self) -> bool:
        """True when both spreadsheet credentials are present."""
        return bool(self.sheets_api_key and self.sheets_id)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()


class ClientConfig:
    """Settings for ``actions.loader.ActionLoader``.

    Environment variables:
        ACTIONS_API_URL: Base URL of the API (default: http://127.0.0.1:8000)
        HTTP_TIMEOUT: Seconds per request (default: 15)
    """

    def __init__(self) -> None:
        self.base_url = _os.getenv("ACTIONS_API_URL", "http://127.0.0.1:8000").rstrip("/")
        self.timeout = float(_os.getenv("HTTP_TIMEOUT", "15"))

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create a ClientConfig instance populated from environment variables."""
        return cls()
