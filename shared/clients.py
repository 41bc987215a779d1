"""
Remote service clients.

Client handles are built once per process and passed explicitly to the
providers and the content generator.
"""

from typing import Optional

import httpx
from openai import OpenAI

from shared.config import Settings, get_settings
from shared.errors import ConfigError
from shared.logging import get_logger

logger = get_logger("clients")

_KEY_ENV_NAMES = {
    "openai_api_key": "OPENAI_API_KEY",
    "replicate_api_token": "REPLICATE_API_TOKEN",
    "elevenlabs_api_key": "ELEVENLABS_API_KEY",
}


class ServiceClients:
    """Shared HTTP and OpenAI clients plus the settings they were built from."""

    def __init__(
        self,
        settings: Settings,
        http: Optional[httpx.AsyncClient] = None,
        openai_client: Optional[OpenAI] = None
    ):
        """
        Initialize client handles.

        Args:
            settings: Application settings
            http: Async HTTP client (created from settings if omitted)
            openai_client: OpenAI client (created lazily on first use if omitted)
        """
        self.settings = settings
        self.http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_s),
            follow_redirects=True,
        )
        self._openai = openai_client

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ServiceClients":
        return cls(settings or get_settings())

    def require_key(self, name: str) -> str:
        """
        Return a configured API key.

        Raises:
            ConfigError: If the key is not configured
        """
        value = getattr(self.settings, name, "")
        if not value:
            env_name = _KEY_ENV_NAMES.get(name, name.upper())
            raise ConfigError(f"{env_name} is not configured")
        return value

    @property
    def openai(self) -> OpenAI:
        """
        OpenAI client, built on first use.

        Raises:
            ConfigError: If OPENAI_API_KEY is not configured
        """
        if self._openai is None:
            self._openai = OpenAI(api_key=self.require_key("openai_api_key"))
            logger.info("OpenAI client initialized")
        return self._openai

    def configured_keys(self) -> dict:
        """Which API keys are present, for health reporting."""
        return {
            env_name.lower(): bool(getattr(self.settings, name, ""))
            for name, env_name in _KEY_ENV_NAMES.items()
        }

    async def aclose(self) -> None:
        await self.http.aclose()
