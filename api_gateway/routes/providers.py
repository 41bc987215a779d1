"""
Catalogue endpoints.

Video/voice providers, content themes and pre-flight cost estimates for the
frontend.
"""

from typing import Optional

from fastapi import APIRouter
from pydantic import Field

from api_gateway.routes.generation import CamelModel
from modules.video_provider.factory import get_provider_info
from modules.voice_provider.factory import list_voice_providers
from shared.cost_tracking import estimate_costs, usd_to_inr
from shared.errors import ValidationError
from shared.models.generation import VideoProviderType, VideoTheme, VoiceProviderType
from shared.themes import DEFAULT_THEME, get_theme_config, list_themes

router = APIRouter()


class CostEstimateRequest(CamelModel):
    video_provider: VideoProviderType = VideoProviderType.VEO3_FAST
    duration: int = Field(6, gt=0)
    resolution: str = "1080p"
    voice_provider: VoiceProviderType = VoiceProviderType.OPENAI
    script_length: int = Field(100, ge=0)
    prompt_supplied: bool = False
    script_supplied: bool = False
    product_description: Optional[str] = None


@router.get("/providers/video")
async def list_video_providers():
    """All video providers with capabilities, pricing and time estimates."""
    return {"providers": [get_provider_info(t) for t in VideoProviderType]}


@router.get("/providers/video/{provider_id}")
async def get_video_provider_info(provider_id: str):
    """
    One video provider.

    Raises:
        ValidationError: If the provider is unknown
    """
    return get_provider_info(provider_id)


@router.get("/providers/voice")
async def list_voice_provider_catalogue():
    """Voice providers and their voices."""
    return {"providers": list_voice_providers()}


@router.get("/themes")
async def list_theme_options():
    return {"themes": list_themes(), "default": DEFAULT_THEME.value}


@router.get("/themes/{theme}")
async def get_theme(theme: str):
    """
    Full theme configuration, including text style and overlay presets.

    Raises:
        ValidationError: If the theme is unknown
    """
    try:
        resolved = VideoTheme(theme)
    except ValueError as e:
        raise ValidationError(
            f"Unknown theme: {theme}. Must be one of: {', '.join(t.value for t in VideoTheme)}"
        ) from e
    return get_theme_config(resolved).model_dump(mode="json")


@router.post("/estimate-cost")
async def estimate_cost(body: CostEstimateRequest):
    """Estimated cost of a run in USD, with the INR equivalent."""
    costs = estimate_costs(
        video_provider=body.video_provider,
        duration=body.duration,
        resolution=body.resolution,
        script_length=body.script_length,
        voice_provider=body.voice_provider,
        prompt_supplied=body.prompt_supplied,
        script_supplied=body.script_supplied,
        product_description=body.product_description,
    )
    return {
        "costs": costs.to_metadata().model_dump(),
        "totalInr": float(round(usd_to_inr(costs.total), 2)),
    }
