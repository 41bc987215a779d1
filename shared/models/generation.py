"""
Generation request models.

The orchestrator's single external input and the text overlays it carries.
"""

import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Fade length applied by bumper clips; an enabled bumper must be at least this long
BUMPER_FADE_SECONDS = 0.5

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


class VideoProviderType(str, Enum):
    VEO3_FAST = "veo3-fast"
    HAILUO2 = "hailuo2"
    SEEDANCE_PRO_FAST = "seedance-pro-fast"


class VoiceProviderType(str, Enum):
    OPENAI = "openai"
    ELEVENLABS = "elevenlabs"


class VideoTheme(str, Enum):
    PROMOTIONAL = "promotional"
    NEW_PRODUCT = "new-product"
    INFORMATIONAL = "informational"
    SEASONAL = "seasonal"


class OverlayPosition(str, Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER = "center"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class FontWeight(str, Enum):
    NORMAL = "normal"
    BOLD = "bold"


def normalize_hex_color(value: Optional[str]) -> Optional[str]:
    """Return a color as '#RRGGBB', accepting it with or without the leading '#'."""
    if value is None:
        return None
    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise ValueError(f"Color must be a hex value like '#FFFFFF', got {value!r}")
    return f"#{match.group(1).upper()}"


class TextOverlay(BaseModel):
    """A timed, styled caption burned into the final video."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    text: str = Field(..., min_length=1)
    position: OverlayPosition
    start_time: float = Field(..., ge=0)
    end_time: float = Field(..., gt=0)
    fade_duration: float = Field(0.5, ge=0)

    # Styling falls back to the theme's text style when absent
    text_color: Optional[str] = None
    font_size: Optional[int] = Field(None, gt=0)
    font_weight: Optional[FontWeight] = None
    background_color: Optional[str] = None
    background_opacity: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("text_color", "background_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return normalize_hex_color(v)

    @model_validator(mode="after")
    def validate_window(self) -> "TextOverlay":
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Overlay end time ({self.end_time}s) must be after start time ({self.start_time}s)"
            )
        return self


class GenerationRequest(BaseModel):
    """Everything one pipeline run needs; immutable once built."""

    model_config = ConfigDict(frozen=True)

    image: bytes = Field(..., min_length=1, repr=False)

    # Video settings
    video_provider: VideoProviderType = VideoProviderType.VEO3_FAST
    duration: int = 6
    aspect_ratio: str = "9:16"
    resolution: str = "1080p"

    # Content (generated when absent)
    prompt: Optional[str] = None
    script: Optional[str] = None
    product_description: Optional[str] = None
    theme: VideoTheme = VideoTheme.INFORMATIONAL

    # Voiceover
    voice_provider: VoiceProviderType = VoiceProviderType.OPENAI
    voice: str = "nova"

    # Logo bumpers
    logo: Optional[bytes] = Field(None, repr=False)
    enable_logo_intro: bool = False
    enable_logo_outro: bool = False
    intro_duration: float = Field(0.0, ge=0)
    outro_duration: float = Field(0.0, ge=0)

    text_overlays: List[TextOverlay] = Field(default_factory=list)

    @field_validator("prompt", "script", "product_description")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def logo_requested(self) -> bool:
        """A logo was supplied and at least one bumper is switched on."""
        return bool(self.logo) and (self.enable_logo_intro or self.enable_logo_outro)

    @property
    def intro_enabled(self) -> bool:
        return self.logo_requested and self.enable_logo_intro and self.intro_duration > 0

    @property
    def outro_enabled(self) -> bool:
        return self.logo_requested and self.enable_logo_outro and self.outro_duration > 0

    @property
    def total_duration(self) -> float:
        """Length of the finished video when every requested stage succeeds."""
        total = float(self.duration)
        if self.intro_enabled:
            total += self.intro_duration
        if self.outro_enabled:
            total += self.outro_duration
        return total

    @model_validator(mode="after")
    def validate_bumpers_and_overlays(self) -> "GenerationRequest":
        for label, enabled, seconds in (
            ("Intro", self.intro_enabled, self.intro_duration),
            ("Outro", self.outro_enabled, self.outro_duration),
        ):
            if enabled and seconds < BUMPER_FADE_SECONDS:
                raise ValueError(
                    f"{label} duration must be at least {BUMPER_FADE_SECONDS}s, got {seconds}s"
                )

        total = self.total_duration
        for index, overlay in enumerate(self.text_overlays):
            if overlay.end_time > total:
                raise ValueError(
                    f"Text overlay {index + 1} ends at {overlay.end_time}s, "
                    f"after the end of the video ({total}s)"
                )
        return self
