"""
MiniMax Hailuo 2.

Budget tier with resolution-tiered pricing. 1080p is not offered for 10-second
clips, and the model takes no aspect ratio at all.
"""

from decimal import Decimal
from typing import Any, Dict

from modules.video_provider.base import (
    CapabilityEnvelope,
    PricingTable,
    VideoGenerationParams,
    VideoProvider,
)


class Hailuo2Provider(VideoProvider):
    name = "Hailuo 2"
    model_id = "minimax/hailuo-02"
    description = "Budget-friendly video generation with realistic physics"
    tier = "budget"
    capabilities = CapabilityEnvelope(
        durations=(6, 10),
        aspect_ratios=("16:9", "9:16", "1:1"),
        resolutions=("512p", "768p", "1080p"),
        excluded_resolutions={10: ("1080p",)},
    )
    pricing = PricingTable(
        rates={
            "512p": Decimal("0.025"),
            "768p": Decimal("0.045"),
            "1080p": Decimal("0.08"),
        },
        default_resolution="768p",
    )
    estimated_seconds = 75

    def build_input(self, params: VideoGenerationParams) -> Dict[str, Any]:
        model_input: Dict[str, Any] = {
            "prompt": params.prompt,
            "duration": params.duration,
            "resolution": params.resolution or self.pricing.default_resolution,
        }
        if params.image:
            model_input["first_frame_image"] = self.encode_image(params.image)
        return model_input
