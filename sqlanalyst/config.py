"""Application configuration using pydantic settings management.

Values are loaded from environment variables (or an .env file). The Firebase
values mirror the web SDK config object; none has a default, so
any missing value fails at startup with a ``pydantic.ValidationError``.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class FirebaseConfig(BaseSettings):
    api_key: str
    auth_domain: str
    project_id: str
    app_id: str
    storage_bucket: str
    messaging_sender_id: str
    measurement_id: str

    class Config:
        env_prefix = "FIREBASE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


class Settings(BaseSettings):
    # --- Remote text-to-SQL service ---
    text_to_sql_url: str = "https://api.text2sql.ai/api/external/generate-sql"
    text_to_sql_token: str = ""  # server-side only, never returned to clients
    text_to_sql_connection_id: str = ""
    text_to_sql_dialect: str = "postgres"
    text_to_sql_timeout: float = 60.0
    cors_relay_url: Optional[str] = None  # e.g. "https://cors-anywhere.example.com/"

    # --- Identity Toolkit REST endpoint ---
    identity_toolkit_url: str = "https://identitytoolkit.googleapis.com/v1"
    identity_timeout: float = 30.0

    # --- Mock (upload-centric) mode ---
    mock_mode: bool = False
    mock_upload_delay: float = 1.5
    mock_response_delay: float = 2.0

    # --- Web ---
    cors_origins: str = "http://localhost:3000"
    session_cookie_name: str = "sqlanalyst_sid"
    session_cookie_secure: bool = False  # enable behind HTTPS
    workspace_idle_ttl: float = 3600.0
    workspace_max_count: int = 1000
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated CORS origins to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def analysis_endpoint(self) -> str:
        """Target URL, routed through the CORS relay when one is configured."""
        if self.cors_relay_url:
            return self.cors_relay_url + self.text_to_sql_url
        return self.text_to_sql_url

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@lru_cache()
def get_firebase_config() -> FirebaseConfig:
    # Raises if any FIREBASE_* value is missing; there is no fallback.
    return FirebaseConfig()
