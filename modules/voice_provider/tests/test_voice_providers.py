"""
Unit tests for voice providers.
"""

import json
from decimal import Decimal
from unittest.mock import MagicMock, Mock

import httpx
import pytest

from modules.voice_provider.elevenlabs import VOICE_IDS, ElevenLabsProvider
from modules.voice_provider.factory import get_voice_provider, get_voice_rate, list_voice_providers
from modules.voice_provider.openai_tts import OpenAITTSProvider
from shared.errors import ConfigError, GenerationError, InvalidVoiceError, ValidationError

OPENAI_VOICES = ["alloy", "echo", "fable", "onyx", "nova", "shimmer"]
ELEVENLABS_VOICES = ["preethi", "prabhat", "adam", "bella", "rachel", "antoni"]


class TestValidateVoice:
    """Test voice catalogues."""

    @pytest.mark.parametrize("voice", OPENAI_VOICES)
    def test_openai_accepts_own_voices(self, voice):
        assert OpenAITTSProvider().validate_voice(voice) is True

    @pytest.mark.parametrize("voice", ELEVENLABS_VOICES + ["", "Nova", "unknown"])
    def test_openai_rejects_other_voices(self, voice):
        assert OpenAITTSProvider().validate_voice(voice) is False

    @pytest.mark.parametrize("voice", ELEVENLABS_VOICES)
    def test_elevenlabs_accepts_own_voices(self, voice):
        assert ElevenLabsProvider().validate_voice(voice) is True

    @pytest.mark.parametrize("voice", OPENAI_VOICES + ["", "Preethi", VOICE_IDS["adam"]])
    def test_elevenlabs_rejects_other_voices(self, voice):
        assert ElevenLabsProvider().validate_voice(voice) is False

    def test_catalogues_match_lookup(self):
        assert [v.id for v in OpenAITTSProvider().get_available_voices()] == OPENAI_VOICES
        assert sorted(v.id for v in ElevenLabsProvider().get_available_voices()) == sorted(VOICE_IDS)


class TestCost:
    """Test per-character pricing."""

    def test_openai_cost(self):
        assert OpenAITTSProvider().get_cost("x" * 1000) == Decimal("0.015")
        assert OpenAITTSProvider().get_cost("x" * 200) == Decimal("0.003")

    def test_elevenlabs_cost(self):
        assert ElevenLabsProvider().get_cost("x" * 500) == Decimal("0.15")

    def test_empty_text_costs_nothing(self):
        assert OpenAITTSProvider().get_cost("") == Decimal("0")

    def test_voice_rate_lookup(self):
        assert get_voice_rate("openai") == Decimal("0.015")
        assert get_voice_rate("elevenlabs") == Decimal("0.30")


class TestOpenAITTS:
    """Test OpenAI speech calls."""

    @pytest.mark.asyncio
    async def test_generates_audio(self):
        client = MagicMock()
        client.audio.speech.create.return_value = Mock(content=b"ID3audio")
        provider = OpenAITTSProvider(client=client)

        audio = await provider.generate_voiceover("Crafted for your kitchen.", "nova")

        assert audio == b"ID3audio"
        client.audio.speech.create.assert_called_once_with(
            model="tts-1", voice="nova", input="Crafted for your kitchen."
        )

    @pytest.mark.asyncio
    async def test_invalid_voice_raises_before_remote_call(self):
        client = MagicMock()
        provider = OpenAITTSProvider(client=client)

        with pytest.raises(InvalidVoiceError, match="Invalid voice: preethi"):
            await provider.generate_voiceover("Hello", "preethi")

        client.audio.speech.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_text_raises(self):
        with pytest.raises(ValidationError):
            await OpenAITTSProvider(client=MagicMock()).generate_voiceover("   ", "nova")

    @pytest.mark.asyncio
    async def test_missing_client_raises_config_error(self):
        with pytest.raises(ConfigError):
            await OpenAITTSProvider().generate_voiceover("Hello", "alloy")


class TestElevenLabs:
    """Test ElevenLabs REST calls."""

    @pytest.mark.asyncio
    async def test_posts_mapped_voice_token(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, content=b"ID3mp3")

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = ElevenLabsProvider(http=http, api_key="el-key")

        audio = await provider.generate_voiceover("Namaste.", "preethi")

        assert audio == b"ID3mp3"
        request = captured["request"]
        assert request.url.path == "/v1/text-to-speech/flq6f7yk4E4fJM5XTYuZ"
        assert request.headers["xi-api-key"] == "el-key"
        assert request.headers["Accept"] == "audio/mpeg"
        body = json.loads(request.content)
        assert body["model_id"] == "eleven_multilingual_v2"
        assert body["voice_settings"] == {
            "stability": 0.5,
            "similarity_boost": 0.75,
            "style": 0.0,
            "use_speaker_boost": True,
        }

    @pytest.mark.asyncio
    async def test_api_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="invalid api key")

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = ElevenLabsProvider(http=http, api_key="bad")

        with pytest.raises(GenerationError, match="ElevenLabs API error: 401 - invalid api key"):
            await provider.generate_voiceover("Hello", "adam")

    @pytest.mark.asyncio
    async def test_invalid_voice_raises_before_remote_call(self):
        handler = Mock()
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = ElevenLabsProvider(http=http, api_key="el-key")

        with pytest.raises(InvalidVoiceError):
            await provider.generate_voiceover("Hello", "nova")

        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_key_raises_config_error(self):
        with pytest.raises(ConfigError):
            await ElevenLabsProvider().generate_voiceover("Hello", "adam")


class TestFactory:
    """Test voice provider factory."""

    def test_resolves_known_types(self):
        assert isinstance(get_voice_provider("openai"), OpenAITTSProvider)
        assert isinstance(get_voice_provider("elevenlabs"), ElevenLabsProvider)

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError, match="Unknown voice provider"):
            get_voice_provider("polly")

    def test_list_voice_providers(self):
        providers = list_voice_providers()
        assert [p["id"] for p in providers] == ["openai", "elevenlabs"]
        assert len(providers[1]["voices"]) == 6
