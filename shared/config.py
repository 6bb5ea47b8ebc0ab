"""Service configuration loaded from the environment."""
import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://staging.modeanalytics.com"


class Settings(BaseModel):
    """Runtime settings for the facade and its upstream client."""
    mode_token: Optional[str] = Field(default=None, description="Credential sent to the Mode API")
    auth_header: str = Field(default="Cookie", description="Header carrying the credential")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Mode API host")
    tracking_source: str = Field(default="editor", description="Default trk_source parameter")
    request_timeout: float = Field(default=30.0, gt=0, description="Upstream timeout in seconds")
    environment: str = Field(default="development", description="Log renderer selection")
    log_level: str = Field(default="INFO", description="Minimum log level")
    port: int = Field(default=4000, description="Port the GraphQL service listens on")


def load_settings() -> Settings:
    """
    Build settings from environment variables.

    Returns:
        Settings populated from MODE_* variables, ENVIRONMENT, LOG_LEVEL and PORT
    """
    return Settings(
        mode_token=os.getenv("MODE_TOKEN") or None,
        auth_header=os.getenv("MODE_AUTH_HEADER", "Cookie"),
        base_url=os.getenv("MODE_BASE_URL", DEFAULT_BASE_URL),
        tracking_source=os.getenv("MODE_TRACKING_SOURCE", "editor"),
        request_timeout=float(os.getenv("MODE_REQUEST_TIMEOUT", "30")),
        environment=os.getenv("ENVIRONMENT", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        port=int(os.getenv("PORT", "4000")),
    )
