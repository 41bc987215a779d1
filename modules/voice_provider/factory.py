"""
Voice provider factory.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Type, Union

from shared.clients import ServiceClients
from shared.errors import ValidationError
from shared.models.generation import VoiceProviderType

from modules.voice_provider.base import VoiceProvider
from modules.voice_provider.elevenlabs import ElevenLabsProvider
from modules.voice_provider.openai_tts import OpenAITTSProvider

VOICE_PROVIDERS: Dict[VoiceProviderType, Type[VoiceProvider]] = {
    VoiceProviderType.OPENAI: OpenAITTSProvider,
    VoiceProviderType.ELEVENLABS: ElevenLabsProvider,
}


def resolve_voice_provider_type(value: Union[VoiceProviderType, str]) -> VoiceProviderType:
    """
    Raises:
        ValidationError: If the identifier is not a known provider
    """
    try:
        return VoiceProviderType(value)
    except ValueError as e:
        known = ", ".join(t.value for t in VoiceProviderType)
        raise ValidationError(f"Unknown voice provider '{value}'. Must be one of: {known}") from e


def get_voice_provider(
    provider_type: Union[VoiceProviderType, str],
    clients: Optional[ServiceClients] = None
) -> VoiceProvider:
    """
    Get a voice provider instance.

    Args:
        provider_type: Provider identifier
        clients: Client handles (omit for catalogue/validation/costing only)

    Returns:
        VoiceProvider

    Raises:
        ValidationError: If the identifier is not a known provider
        ConfigError: If clients are given but the provider's API key is missing
    """
    resolved = resolve_voice_provider_type(provider_type)
    if clients is None:
        return VOICE_PROVIDERS[resolved]()

    settings = clients.settings
    if resolved is VoiceProviderType.OPENAI:
        return OpenAITTSProvider(client=clients.openai, model=settings.openai_tts_model)
    return ElevenLabsProvider(
        http=clients.http,
        api_key=clients.require_key("elevenlabs_api_key"),
        model_id=settings.elevenlabs_model_id,
    )


def get_all_voice_providers() -> List[VoiceProvider]:
    return [cls() for cls in VOICE_PROVIDERS.values()]


def get_voice_rate(provider_type: Union[VoiceProviderType, str]) -> Decimal:
    """USD per 1,000 characters."""
    return VOICE_PROVIDERS[resolve_voice_provider_type(provider_type)].cost_per_1k_chars


def list_voice_providers() -> List[dict]:
    """Providers and their voices for UI display."""
    return [
        {
            "id": provider.provider_type,
            "name": provider.name,
            "cost_per_1k_chars": float(provider.cost_per_1k_chars),
            "voices": [v.model_dump() for v in provider.get_available_voices()],
        }
        for provider in get_all_voice_providers()
    ]
