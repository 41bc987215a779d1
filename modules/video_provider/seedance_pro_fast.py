"""
ByteDance Seedance 1 Pro Fast.

Ultra-budget tier; the only provider taking any whole-second duration in its
range.
"""

from decimal import Decimal
from typing import Any, Dict

from modules.video_provider.base import (
    CapabilityEnvelope,
    PricingTable,
    VideoGenerationParams,
    VideoProvider,
)


class SeedanceProFastProvider(VideoProvider):
    name = "Seedance 1 Pro Fast"
    model_id = "bytedance/seedance-1-pro-fast"
    description = "Ultra budget-friendly with fast generation times"
    tier = "ultra-budget"
    capabilities = CapabilityEnvelope(
        duration_range=(2, 12),
        aspect_ratios=("16:9", "9:16", "1:1"),
        resolutions=("480p", "720p", "1080p"),
    )
    pricing = PricingTable(
        rates={
            "480p": Decimal("0.015"),
            "720p": Decimal("0.025"),
            "1080p": Decimal("0.06"),
        },
        default_resolution="720p",
    )
    estimated_seconds = 60

    def build_input(self, params: VideoGenerationParams) -> Dict[str, Any]:
        model_input: Dict[str, Any] = {
            "prompt": params.prompt,
            "duration": params.duration,
            "resolution": params.resolution or self.pricing.default_resolution,
        }
        # Seedance ignores aspect_ratio when an image is used
        if params.image:
            model_input["image"] = self.encode_image(params.image)
        else:
            model_input["aspect_ratio"] = params.aspect_ratio
        return model_input
