"""
Configuration management.

Centralized environment variable management and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore"
    )

    # API keys (required only by the clients that use them)
    openai_api_key: str = ""
    replicate_api_token: str = ""
    elevenlabs_api_key: str = ""

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Output
    output_path: Optional[Path] = None

    # Media tool
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    overlay_font_path: Optional[str] = None
    overlay_bold_font_path: Optional[str] = None

    # Remote calls
    replicate_poll_interval_s: float = 1.5
    replicate_poll_timeout_s: float = 600.0
    http_timeout_s: float = 60.0

    # Models
    openai_text_model: str = "gpt-4o"
    openai_tts_model: str = "tts-1"
    elevenlabs_model_id: str = "eleven_multilingual_v2"

    # Brand context injected into prompts
    brand_name: str = "Poppat Jamals"
    brand_description: str = "Premium homeware retailer"

    # Frontend configuration
    frontend_url: str = "http://localhost:3000"

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_api_key(cls, v: str) -> str:
        """Validate OpenAI API key format."""
        if not v:
            return v
        if not v.startswith("sk-"):
            raise ConfigError("OPENAI_API_KEY must start with 'sk-'")
        if len(v) < 20:
            raise ConfigError("OPENAI_API_KEY appears to be invalid")
        return v

    @field_validator("replicate_api_token")
    @classmethod
    def validate_replicate_api_token(cls, v: str) -> str:
        """Validate Replicate API token format."""
        if not v:
            return v
        if not v.startswith("r8_"):
            raise ConfigError("REPLICATE_API_TOKEN must start with 'r8_'")
        if len(v) < 20:
            raise ConfigError("REPLICATE_API_TOKEN appears to be invalid")
        return v

    @field_validator("replicate_poll_interval_s", "replicate_poll_timeout_s", "http_timeout_s")
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        """Timeouts and intervals must be positive."""
        if v <= 0:
            raise ConfigError("Timeouts and poll intervals must be positive")
        return v

    @field_validator("frontend_url")
    @classmethod
    def validate_frontend_url(cls, v: str) -> str:
        """Validate frontend URL format."""
        if not v.startswith(("http://", "https://")):
            raise ConfigError("FRONTEND_URL must be a valid HTTP/HTTPS URL")
        return v

    def resolve_output_path(self) -> Path:
        """Output root, defaulting to ~/ProductVideos."""
        if self.output_path is not None:
            return self.output_path.expanduser()
        return Path.home() / "ProductVideos"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        ConfigError: If settings are invalid
    """
    try:
        return Settings()
    except ConfigError:
        raise
    except Exception as e:
        # Re-raise as ConfigError for consistency
        raise ConfigError(f"Failed to load configuration: {str(e)}") from e
