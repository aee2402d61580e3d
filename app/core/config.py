"""Application configuration."""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Vapi
    vapi_api_key: Optional[str] = None
    vapi_base_url: str = "https://api.vapi.ai"
    vapi_timeout_seconds: float = 30.0

    # Outbound calls
    default_country_code: str = "1"

    # Voice sessions
    session_reset_delay_seconds: float = 3.0

    # Server
    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"


settings = Settings()
