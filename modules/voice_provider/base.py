"""
Voice provider abstraction.

Each provider wraps one text-to-speech back end, owns its voice catalogue and
bills by script length.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Literal

from pydantic import BaseModel, ConfigDict

from shared.errors import InvalidVoiceError, ValidationError
from shared.logging import get_logger

logger = get_logger("voice_provider")


class Voice(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    gender: Literal["male", "female", "neutral"]
    description: str


class VoiceProvider(ABC):
    """Base class for text-to-speech providers."""

    name: str
    provider_type: str
    voices: List[Voice]
    cost_per_1k_chars: Decimal

    def get_available_voices(self) -> List[Voice]:
        return list(self.voices)

    def validate_voice(self, voice_id: str) -> bool:
        return any(v.id == voice_id for v in self.voices)

    def get_cost(self, text: str) -> Decimal:
        """USD cost of synthesizing text, proportional to its length."""
        return Decimal(len(text)) / Decimal(1000) * self.cost_per_1k_chars

    async def generate_voiceover(self, text: str, voice_id: str) -> bytes:
        """
        Synthesize speech.

        Args:
            text: Script to speak
            voice_id: Voice identifier from this provider's catalogue

        Returns:
            Raw MP3 bytes

        Raises:
            InvalidVoiceError: If the voice is not offered by this provider (no remote call is made)
            ValidationError: If text is empty
            GenerationError: If the remote call fails
        """
        if not self.validate_voice(voice_id):
            raise InvalidVoiceError(
                f"Invalid voice: {voice_id}. Must be one of: {', '.join(v.id for v in self.voices)}"
            )
        if not text or not text.strip():
            raise ValidationError("Voiceover text is required")

        logger.info(
            f"Generating voiceover with {self.name}",
            extra={"voice": voice_id, "characters": len(text)}
        )
        audio = await self._synthesize(text, voice_id)
        logger.info(f"Voiceover generated: {len(audio)} bytes", extra={"voice": voice_id})
        return audio

    @abstractmethod
    async def _synthesize(self, text: str, voice_id: str) -> bytes:
        """Issue the remote call for an already validated voice."""
