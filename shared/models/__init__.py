"""
Data models for the product video pipeline.

This module exports all Pydantic models used across pipeline modules.
"""

from shared.models.generation import (
    FontWeight,
    GenerationRequest,
    OverlayPosition,
    TextOverlay,
    VideoProviderType,
    VideoTheme,
    VoiceProviderType,
)
from shared.models.metadata import (
    GenerationMetadata,
    LogoMetadata,
    MetadataContent,
    MetadataCosts,
    MetadataFiles,
    MetadataSettings,
    TextOverlayMetadata,
)
from shared.models.run import PipelineRun, RunArtifacts, StageTimings
from shared.models.state import GenerationState, can_transition

__all__ = [
    # Request models
    "FontWeight",
    "GenerationRequest",
    "OverlayPosition",
    "TextOverlay",
    "VideoProviderType",
    "VideoTheme",
    "VoiceProviderType",
    # Run models
    "GenerationState",
    "PipelineRun",
    "RunArtifacts",
    "StageTimings",
    "can_transition",
    # Metadata models
    "GenerationMetadata",
    "LogoMetadata",
    "MetadataContent",
    "MetadataCosts",
    "MetadataFiles",
    "MetadataSettings",
    "TextOverlayMetadata",
]
