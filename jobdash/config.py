"""
JobDash - Client configuration.

Centralized configuration using Pydantic Settings for environment variable management.

Environment Variables:
    All settings can be overridden via environment variables with JOBDASH_ prefix.

    API Settings:
        JOBDASH_API_ORIGIN=https://...   - HTTP origin of the tracker API (the only source of truth)
        JOBDASH_API_PREFIX=/api          - Path prefix appended to the origin
        JOBDASH_REQUEST_TIMEOUT=5.0      - Per-request timeout in seconds

    Storage Settings:
        JOBDASH_SESSION_FILE=...         - Where the auth token is persisted
        JOBDASH_DOWNLOAD_DIR=...         - Where downloaded resumes are saved
"""
from pathlib import Path

from pydantic_settings import BaseSettings


class ApiSettings(BaseSettings):
    """
    Remote tracker API connection settings.

    The base URL is always `api_origin + api_prefix`; nothing else in the
    client hardcodes an endpoint.
    """
    api_origin: str = "http://localhost:5000"
    api_prefix: str = "/api"
    request_timeout: float = 5.0

    class Config:
        env_prefix = "JOBDASH_"
        env_file = ".env"
        extra = "ignore"

    @property
    def base_url(self) -> str:
        return self.api_origin.rstrip("/") + "/" + self.api_prefix.strip("/")


class StorageSettings(BaseSettings):
    """Local persistence: the session token file and the download folder."""
    session_file: Path = Path("data/session.json")
    download_dir: Path = Path("downloads")

    class Config:
        env_prefix = "JOBDASH_"
        env_file = ".env"
        extra = "ignore"


class UISettings(BaseSettings):
    """Notification behaviour."""
    notification_history: int = 50
    log_level: str = "INFO"

    class Config:
        env_prefix = "JOBDASH_"
        env_file = ".env"
        extra = "ignore"


class Settings(BaseSettings):
    """Combined client settings."""
    api: ApiSettings = ApiSettings()
    storage: StorageSettings = StorageSettings()
    ui: UISettings = UISettings()

    class Config:
        env_prefix = "JOBDASH_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
