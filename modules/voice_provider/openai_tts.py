"""
OpenAI text-to-speech provider.

Voice identifiers are passed to the API unchanged.
"""

import asyncio
from decimal import Decimal
from typing import Optional

from openai import OpenAI, OpenAIError

from shared.errors import ConfigError, GenerationError
from shared.logging import get_logger

from modules.voice_provider.base import Voice, VoiceProvider

logger = get_logger("voice_provider.openai")


class OpenAITTSProvider(VoiceProvider):
    name = "OpenAI TTS"
    provider_type = "openai"
    cost_per_1k_chars = Decimal("0.015")
    voices = [
        Voice(id="alloy", name="Alloy", gender="neutral", description="Balanced, versatile voice"),
        Voice(id="echo", name="Echo", gender="male", description="Clear, professional tone"),
        Voice(id="fable", name="Fable", gender="neutral", description="Expressive, storytelling quality"),
        Voice(id="onyx", name="Onyx", gender="male", description="Deep, authoritative voice"),
        Voice(id="nova", name="Nova", gender="female", description="Bright, energetic tone"),
        Voice(id="shimmer", name="Shimmer", gender="female", description="Warm, friendly voice"),
    ]

    def __init__(self, client: Optional[OpenAI] = None, model: str = "tts-1"):
        self._client = client
        self.model = model

    async def _synthesize(self, text: str, voice_id: str) -> bytes:
        if self._client is None:
            raise ConfigError("OpenAI TTS requires an OpenAI client")

        # Synchronous SDK call wrapped in executor for async compatibility
        loop = asyncio.get_running_loop()

        def _call_speech():
            response = self._client.audio.speech.create(
                model=self.model,
                voice=voice_id,
                input=text,
            )
            return response.content

        try:
            return await loop.run_in_executor(None, _call_speech)
        except OpenAIError as e:
            logger.error(f"OpenAI TTS call failed: {str(e)}", extra={"voice": voice_id})
            raise GenerationError(f"OpenAI TTS error: {str(e)}") from e
