"""
Configuration settings for the Scenario Assist API.

All settings can be overridden via environment variables.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Environment Configuration
    ENVIRONMENT: str = Field(default="development", description="Current environment")

    # API Configuration
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8090, description="API port")
    ENABLE_DOCS: bool = Field(default=True, description="Enable OpenAPI docs")
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:8080", "http://127.0.0.1:5173", "http://127.0.0.1:8080"],
        description="CORS allowed origins"
    )

    # Local mobile helper (device/emulator/Appium agent). Reported only,
    # the analysis engine never calls it.
    AGENT_URL: str = Field(
        default="http://localhost:3001",
        description="Local mobile automation helper base URL"
    )
    AGENT_TIMEOUT_MS: int = Field(default=5000, description="Helper status request timeout")

    # Flow inference
    FLOW_PATTERNS_FILE: Optional[str] = Field(
        default=None,
        description="YAML file overriding the packaged flow keyword table"
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_FORMAT: str = Field(default="json", description="Log format: json or text")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


settings = Settings()


# Validation
def validate_settings():
    """Validate critical settings on startup."""
    errors = []

    if settings.LOG_FORMAT.lower() not in ("json", "text"):
        errors.append(
            f"LOG_FORMAT: unsupported value '{settings.LOG_FORMAT}'. Use 'json' or 'text'."
        )

    if settings.AGENT_TIMEOUT_MS <= 0:
        errors.append("AGENT_TIMEOUT_MS: must be a positive number of milliseconds.")

    if errors:
        raise ValueError("Configuration errors: " + "; ".join(errors))


# Secret patterns for redaction
SECRET_PATTERNS = [
    r"password",
    r"passwd",
    r"secret",
    r"token",
    r"api[_-]?key",
    r"auth",
    r"credential",
    r"bearer",
    r"otp",
]
