"""
Video provider factory.

Resolves the closed set of provider identifiers to provider instances.
"""

from typing import Dict, List, Optional, Type, Union

from shared.clients import ServiceClients
from shared.errors import ValidationError
from shared.models.generation import VideoProviderType

from modules.video_provider.base import VideoProvider
from modules.video_provider.hailuo2 import Hailuo2Provider
from modules.video_provider.replicate_client import ReplicateClient
from modules.video_provider.seedance_pro_fast import SeedanceProFastProvider
from modules.video_provider.veo3_fast import Veo3FastProvider

VIDEO_PROVIDERS: Dict[VideoProviderType, Type[VideoProvider]] = {
    VideoProviderType.VEO3_FAST: Veo3FastProvider,
    VideoProviderType.HAILUO2: Hailuo2Provider,
    VideoProviderType.SEEDANCE_PRO_FAST: SeedanceProFastProvider,
}


def resolve_video_provider_type(value: Union[VideoProviderType, str]) -> VideoProviderType:
    """
    Raises:
        ValidationError: If the identifier is not a known provider
    """
    try:
        return VideoProviderType(value)
    except ValueError as e:
        known = ", ".join(t.value for t in VideoProviderType)
        raise ValidationError(f"Unknown video provider '{value}'. Must be one of: {known}") from e


def build_replicate_client(clients: ServiceClients) -> ReplicateClient:
    """
    Raises:
        ConfigError: If REPLICATE_API_TOKEN is not configured
    """
    settings = clients.settings
    return ReplicateClient(
        http=clients.http,
        api_token=clients.require_key("replicate_api_token"),
        poll_interval_s=settings.replicate_poll_interval_s,
        poll_timeout_s=settings.replicate_poll_timeout_s,
    )


def get_video_provider(
    provider_type: Union[VideoProviderType, str],
    replicate: Optional[ReplicateClient] = None
) -> VideoProvider:
    """
    Get a video provider instance.

    Args:
        provider_type: Provider identifier
        replicate: Replicate client (omit for validation/costing only)

    Returns:
        VideoProvider

    Raises:
        ValidationError: If the identifier is not a known provider
    """
    return VIDEO_PROVIDERS[resolve_video_provider_type(provider_type)](replicate)


def get_all_video_providers() -> List[VideoProvider]:
    return [cls() for cls in VIDEO_PROVIDERS.values()]


def get_provider_info(provider_type: Union[VideoProviderType, str]) -> dict:
    info = get_video_provider(provider_type).info()
    info["id"] = resolve_video_provider_type(provider_type).value
    return info
