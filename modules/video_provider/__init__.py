"""
Video Provider Module.

Image-to-video synthesis through interchangeable Replicate-hosted models.
"""

from modules.video_provider.base import (
    CapabilityEnvelope,
    PricingTable,
    ValidationResult,
    VideoGenerationParams,
    VideoProvider,
)
from modules.video_provider.factory import (
    build_replicate_client,
    get_all_video_providers,
    get_provider_info,
    get_video_provider,
)
from modules.video_provider.replicate_client import ReplicateClient

__all__ = [
    "CapabilityEnvelope",
    "PricingTable",
    "ReplicateClient",
    "ValidationResult",
    "VideoGenerationParams",
    "VideoProvider",
    "build_replicate_client",
    "get_all_video_providers",
    "get_provider_info",
    "get_video_provider",
]
