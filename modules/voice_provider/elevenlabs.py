"""
ElevenLabs text-to-speech provider.

Abstract voice names map to ElevenLabs voice IDs through a fixed table.
"""

from decimal import Decimal
from typing import Dict, Optional

import httpx

from shared.errors import ConfigError, GenerationError
from shared.logging import get_logger

from modules.voice_provider.base import Voice, VoiceProvider

logger = get_logger("voice_provider.elevenlabs")

ELEVENLABS_API_BASE = "https://api.elevenlabs.io/v1"

VOICE_IDS: Dict[str, str] = {
    # Indian English voices
    "preethi": "flq6f7yk4E4fJM5XTYuZ",
    "prabhat": "IKne3meq5aSn9XLyUdCD",
    # Multilingual voices that work well for Indian English
    "adam": "21m00Tcm4TlvDq8ikWAM",
    "bella": "EXAVITQu4vr4xnSDxMaL",
    "rachel": "nPczCjzI2devNBz1zQrb",
    "antoni": "ErXwobaYiN019PkySvjV",
}

VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.0,
    "use_speaker_boost": True,
}


class ElevenLabsProvider(VoiceProvider):
    name = "ElevenLabs"
    provider_type = "elevenlabs"
    cost_per_1k_chars = Decimal("0.30")
    voices = [
        Voice(id="preethi", name="Preethi", gender="female", description="Indian English - Warm, professional"),
        Voice(id="prabhat", name="Prabhat", gender="male", description="Indian English - Clear, authoritative"),
        Voice(id="bella", name="Bella", gender="female", description="International - Soft, friendly"),
        Voice(id="rachel", name="Rachel", gender="female", description="International - Warm, engaging"),
        Voice(id="adam", name="Adam", gender="male", description="International - Deep, professional"),
        Voice(id="antoni", name="Antoni", gender="male", description="International - Clear, articulate"),
    ]

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        api_key: str = "",
        model_id: str = "eleven_multilingual_v2"
    ):
        self._http = http
        self._api_key = api_key
        self.model_id = model_id

    def validate_voice(self, voice_id: str) -> bool:
        return voice_id in VOICE_IDS

    async def _synthesize(self, text: str, voice_id: str) -> bytes:
        if self._http is None or not self._api_key:
            raise ConfigError("ELEVENLABS_API_KEY is not configured")

        try:
            response = await self._http.post(
                f"{ELEVENLABS_API_BASE}/text-to-speech/{VOICE_IDS[voice_id]}",
                headers={
                    "Accept": "audio/mpeg",
                    "Content-Type": "application/json",
                    "xi-api-key": self._api_key,
                },
                json={
                    "text": text,
                    "model_id": self.model_id,
                    "voice_settings": VOICE_SETTINGS,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs request failed: {str(e)}", extra={"voice": voice_id})
            raise GenerationError(f"ElevenLabs request failed: {str(e)}") from e

        if response.status_code >= 400:
            raise GenerationError(f"ElevenLabs API error: {response.status_code} - {response.text}")

        if not response.content:
            raise GenerationError("ElevenLabs returned empty audio")
        return response.content
