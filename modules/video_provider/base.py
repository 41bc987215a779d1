"""
Video provider abstraction.

Each provider wraps one image-to-video model. Its capability envelope and
pricing table are plain data; validation and costing are shared here, and a
variant only decides how its request parameters map onto the model's input.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import ConfigError, UnexpectedOutputError, ValidationError
from shared.logging import get_logger
from shared.validation import image_to_data_url

from modules.video_provider.replicate_client import ReplicateClient

logger = get_logger("video_provider")

ProviderTier = Literal["premium", "budget", "ultra-budget"]


class CapabilityEnvelope(BaseModel):
    """Parameter combinations a provider accepts."""

    model_config = ConfigDict(frozen=True)

    text_to_video: bool = True
    image_to_video: bool = True
    audio: bool = False

    # Either a discrete set of durations or an inclusive integer range
    durations: Optional[Tuple[int, ...]] = None
    duration_range: Optional[Tuple[int, int]] = None

    aspect_ratios: Tuple[str, ...]
    resolutions: Tuple[str, ...]

    # duration -> resolutions not available at that duration
    excluded_resolutions: Dict[int, Tuple[str, ...]] = Field(default_factory=dict)

    @property
    def min_duration(self) -> int:
        if self.duration_range:
            return self.duration_range[0]
        return min(self.durations)

    @property
    def max_duration(self) -> int:
        if self.duration_range:
            return self.duration_range[1]
        return max(self.durations)

    def supports_duration(self, duration: int) -> bool:
        if self.duration_range:
            low, high = self.duration_range
            return low <= duration <= high
        return duration in self.durations


class PricingTable(BaseModel):
    """Per-second USD rate, either flat or by resolution tier."""

    model_config = ConfigDict(frozen=True)

    flat_rate: Optional[Decimal] = None
    rates: Dict[str, Decimal] = Field(default_factory=dict)
    default_resolution: str

    def cost_per_second(self, resolution: Optional[str] = None) -> Decimal:
        if self.flat_rate is not None:
            return self.flat_rate
        # Unknown tiers are billed at the default tier
        return self.rates.get(resolution or self.default_resolution, self.rates[self.default_resolution])

    def describe(self) -> str:
        if self.flat_rate is not None:
            return f"${self.flat_rate}/sec"
        return "Variable by resolution"


class VideoGenerationParams(BaseModel):
    prompt: str
    duration: int
    aspect_ratio: str
    resolution: Optional[str] = None
    image: Optional[bytes] = Field(None, repr=False)
    seed: Optional[int] = None


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)


class VideoProvider(ABC):
    """Base class for image-to-video providers."""

    name: str
    model_id: str
    description: str
    tier: ProviderTier
    capabilities: CapabilityEnvelope
    pricing: PricingTable
    estimated_seconds: int

    def __init__(self, replicate: Optional[ReplicateClient] = None):
        """
        Initialize provider.

        Args:
            replicate: Replicate client; only needed for generate_video
        """
        self._replicate = replicate

    def validate(self, params: VideoGenerationParams) -> ValidationResult:
        """
        Check parameters against the capability envelope.

        Never raises; every violation is reported.
        """
        caps = self.capabilities
        errors: List[str] = []

        if not caps.supports_duration(params.duration):
            if caps.duration_range:
                errors.append(
                    f"Duration must be between {caps.min_duration} and {caps.max_duration} seconds"
                )
            else:
                errors.append(
                    f"Duration must be one of: {', '.join(str(d) for d in caps.durations)} seconds"
                )

        if params.aspect_ratio not in caps.aspect_ratios:
            errors.append(f"Aspect ratio must be one of: {', '.join(caps.aspect_ratios)}")

        if params.resolution and params.resolution not in caps.resolutions:
            errors.append(f"Resolution must be one of: {', '.join(caps.resolutions)}")

        excluded = caps.excluded_resolutions.get(params.duration, ())
        if params.resolution and params.resolution in excluded:
            allowed = [r for r in caps.resolutions if r not in excluded]
            errors.append(
                f"{params.duration}-second videos are only available at "
                f"{' and '.join(allowed)} resolutions "
                f"({', '.join(excluded)} not supported for {params.duration}s)"
            )

        return ValidationResult(valid=not errors, errors=errors)

    @abstractmethod
    def build_input(self, params: VideoGenerationParams) -> Dict[str, Any]:
        """Map validated parameters onto the model's input object."""

    async def generate_video(self, params: VideoGenerationParams) -> str:
        """
        Generate a video and return its URL.

        Args:
            params: Generation parameters

        Returns:
            URL of the generated video

        Raises:
            ValidationError: If parameters fall outside the envelope (no remote call is made)
            ConfigError: If no Replicate client was supplied
            GenerationError: If the remote call fails
            UnexpectedOutputError: If the model returns anything but a single URL string
        """
        result = self.validate(params)
        if not result.valid:
            raise ValidationError(f"Invalid parameters: {', '.join(result.errors)}")

        if self._replicate is None:
            raise ConfigError(f"{self.name} requires a Replicate client")

        model_input = self.build_input(params)
        logger.info(
            f"Generating {params.duration}s video with {self.name}",
            extra={
                "model_id": self.model_id,
                "duration": params.duration,
                "resolution": model_input.get("resolution"),
                "image_to_video": params.image is not None,
            }
        )

        output = await self._replicate.run(self.model_id, model_input)
        if isinstance(output, str):
            return output

        raise UnexpectedOutputError(f"Unexpected output format from {self.name}")

    def estimate_generation_time(self, duration: int) -> int:
        """Typical wall-clock seconds; a static hint, independent of duration."""
        return self.estimated_seconds

    def cost_per_video(self, duration: int, resolution: Optional[str] = None) -> Decimal:
        return Decimal(duration) * self.pricing.cost_per_second(resolution)

    def info(self) -> Dict[str, Any]:
        """Provider summary for UI display."""
        caps = self.capabilities
        return {
            "name": self.name,
            "model_id": self.model_id,
            "description": self.description,
            "tier": self.tier,
            "capabilities": {
                "text_to_video": caps.text_to_video,
                "image_to_video": caps.image_to_video,
                "audio": caps.audio,
                "min_duration": caps.min_duration,
                "max_duration": caps.max_duration,
                "supported_durations": (
                    list(range(caps.min_duration, caps.max_duration + 1))
                    if caps.duration_range else list(caps.durations)
                ),
                "aspect_ratios": list(caps.aspect_ratios),
                "resolutions": list(caps.resolutions),
            },
            "cost_per_second": self.pricing.describe(),
            "estimated_time": f"~{self.estimate_generation_time(6)}s",
        }

    @staticmethod
    def encode_image(image: bytes) -> str:
        return image_to_data_url(image)
