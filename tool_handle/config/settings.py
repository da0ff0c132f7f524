from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env once at module import so every BaseSettings subclass sees its vars
load_dotenv()


class HttpSettings(BaseSettings):
    """Default HTTP transport settings. Env vars prefixed with TOOL_HANDLE_HTTP_."""

    model_config = SettingsConfigDict(env_prefix="TOOL_HANDLE_HTTP_")

    timeout_s: float = Field(30.0, gt=0)
    follow_redirects: bool = False
    user_agent: str = "tool-handle"
    read_chunk_size: int = Field(8192, gt=0)  # fixed read buffer for response bodies


class LoggingSettings(BaseSettings):
    """Logging settings. Env vars prefixed with TOOL_HANDLE_LOG_."""

    model_config = SettingsConfigDict(env_prefix="TOOL_HANDLE_LOG_")

    json_output: bool = True
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        normalized = v.upper()
        if normalized not in allowed:
            msg = f"TOOL_HANDLE_LOG_LEVEL must be one of {sorted(allowed)} (got '{v}')"
            raise ValueError(msg)
        return normalized


class Settings(BaseSettings):
    """Root settings composing all sub-configurations."""

    model_config = SettingsConfigDict(extra="ignore")

    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def get_settings() -> Settings:
    """Load and validate settings. Raises ValidationError on invalid values."""
    return Settings()
