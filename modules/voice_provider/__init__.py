"""
Voice Provider Module.

Text-to-speech through interchangeable back ends.
"""

from modules.voice_provider.base import Voice, VoiceProvider
from modules.voice_provider.factory import (
    get_all_voice_providers,
    get_voice_provider,
    get_voice_rate,
    list_voice_providers,
)

__all__ = [
    "Voice",
    "VoiceProvider",
    "get_all_voice_providers",
    "get_voice_provider",
    "get_voice_rate",
    "list_voice_providers",
]
