"""
Google Veo 3 Fast.

Premium tier. Audio generation is switched off because the voiceover is
produced separately, which puts it on the flat no-audio rate.
"""

from decimal import Decimal
from typing import Any, Dict

from modules.video_provider.base import (
    CapabilityEnvelope,
    PricingTable,
    VideoGenerationParams,
    VideoProvider,
)


class Veo3FastProvider(VideoProvider):
    name = "Google Veo 3 Fast"
    model_id = "google/veo-3-fast"
    description = "Premium quality, cinematic video generation with fast processing"
    tier = "premium"
    capabilities = CapabilityEnvelope(
        audio=True,
        durations=(4, 6, 8),
        aspect_ratios=("16:9", "9:16"),
        resolutions=("720p", "1080p"),
    )
    pricing = PricingTable(flat_rate=Decimal("0.10"), default_resolution="1080p")
    estimated_seconds = 90

    def build_input(self, params: VideoGenerationParams) -> Dict[str, Any]:
        model_input: Dict[str, Any] = {
            "prompt": params.prompt,
            "duration": params.duration,
            "resolution": params.resolution or self.pricing.default_resolution,
            "generate_audio": False,
        }
        # The source image's own aspect ratio governs the output
        if params.image:
            model_input["image"] = self.encode_image(params.image)
        else:
            model_input["aspect_ratio"] = params.aspect_ratio
        if params.seed is not None:
            model_input["seed"] = params.seed
        return model_input
