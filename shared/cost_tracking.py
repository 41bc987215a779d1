"""
Cost tracking utilities.

Per-run cost breakdown in USD. LLM calls are billed at fixed rates; video and
voice costs come from the selected providers' pricing.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from shared.errors import ValidationError
from shared.logging import get_logger
from shared.models.generation import VideoProviderType, VoiceProviderType
from shared.models.metadata import MetadataCosts

logger = get_logger("cost_tracking")

# Fixed rates for GPT-4o calls
VISION_ANALYSIS_COST = Decimal("0.02")
PROMPT_GENERATION_COST = Decimal("0.005")
SCRIPT_GENERATION_COST = Decimal("0.005")

# Approximate conversion rate
USD_TO_INR_RATE = Decimal("85")


class CostBreakdown(BaseModel):
    """Line items of one run; total is always their sum."""

    vision_analysis: Decimal = Decimal("0")
    prompt_generation: Decimal = Decimal("0")
    script_generation: Decimal = Decimal("0")
    video_generation: Decimal = Decimal("0")
    voiceover: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return (
            self.vision_analysis
            + self.prompt_generation
            + self.script_generation
            + self.video_generation
            + self.voiceover
        )

    def to_metadata(self) -> MetadataCosts:
        return MetadataCosts(
            vision_analysis=float(self.vision_analysis),
            prompt_generation=float(self.prompt_generation),
            script_generation=float(self.script_generation),
            video_generation=float(self.video_generation),
            voiceover=float(self.voiceover),
            total=float(self.total),
        )


def calculate_costs(
    video_cost: Decimal,
    voiceover_cost: Decimal,
    product_identified: bool,
    prompt_generated: bool,
    script_generated: bool,
) -> CostBreakdown:
    """
    Build the cost breakdown of a run.

    Content the caller supplied is not billed, so its line item is zero.

    Args:
        video_cost: Video provider cost for the requested duration/resolution
        voiceover_cost: Voice provider cost for the script
        product_identified: Whether the vision identification call ran
        prompt_generated: Whether the scene prompt was generated
        script_generated: Whether the script was generated

    Returns:
        CostBreakdown

    Raises:
        ValidationError: If a provider cost is negative
    """
    video_cost = Decimal(str(video_cost))
    voiceover_cost = Decimal(str(voiceover_cost))
    if video_cost < 0 or voiceover_cost < 0:
        raise ValidationError(
            f"Cost cannot be negative: video={video_cost}, voiceover={voiceover_cost}"
        )

    breakdown = CostBreakdown(
        vision_analysis=VISION_ANALYSIS_COST if product_identified else Decimal("0"),
        prompt_generation=PROMPT_GENERATION_COST if prompt_generated else Decimal("0"),
        script_generation=SCRIPT_GENERATION_COST if script_generated else Decimal("0"),
        video_generation=video_cost,
        voiceover=voiceover_cost,
    )
    logger.debug(
        f"Calculated run cost ${breakdown.total}",
        extra={"total_cost": float(breakdown.total)}
    )
    return breakdown


def estimate_costs(
    video_provider: VideoProviderType,
    duration: int,
    resolution: str,
    script_length: int,
    voice_provider: VoiceProviderType = VoiceProviderType.OPENAI,
    prompt_supplied: bool = False,
    script_supplied: bool = False,
    product_description: Optional[str] = None,
) -> CostBreakdown:
    """
    Estimate the cost of a run before starting it.

    Args:
        video_provider: Selected video provider
        duration: Video duration in seconds
        resolution: Requested resolution
        script_length: Expected script length in characters
        voice_provider: Selected voice provider
        prompt_supplied: Caller will supply the scene prompt
        script_supplied: Caller will supply the script
        product_description: Caller-supplied description (skips identification)

    Returns:
        CostBreakdown
    """
    # Imported here to keep shared free of module imports at load time
    from modules.video_provider.factory import get_video_provider
    from modules.voice_provider.factory import get_voice_rate

    video_cost = get_video_provider(video_provider).cost_per_video(duration, resolution)
    voiceover_cost = Decimal(script_length) / Decimal(1000) * get_voice_rate(voice_provider)

    return calculate_costs(
        video_cost=video_cost,
        voiceover_cost=voiceover_cost,
        product_identified=not prompt_supplied and not product_description,
        prompt_generated=not prompt_supplied,
        script_generated=not script_supplied,
    )


def usd_to_inr(usd: Decimal) -> Decimal:
    """Convert USD to INR at the approximate fixed rate."""
    return Decimal(str(usd)) * USD_TO_INR_RATE
