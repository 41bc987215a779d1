"""
Generation metadata record.

One JSON document is written per run into its output folder.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MetadataSettings(BaseModel):
    video_model: str
    duration: int
    aspect_ratio: str
    resolution: str


class MetadataContent(BaseModel):
    prompt: str
    script: str
    voice: str
    voice_provider: str
    theme: str


class MetadataCosts(BaseModel):
    vision_analysis: float
    prompt_generation: float
    script_generation: float
    video_generation: float
    voiceover: float
    total: float


class MetadataFiles(BaseModel):
    original_video: str
    voiceover: str
    final_video: str


class LogoMetadata(BaseModel):
    enabled: bool = True
    intro: bool
    outro: bool
    intro_duration: float
    outro_duration: float
    error: Optional[str] = None


class TextOverlayMetadata(BaseModel):
    enabled: bool = True
    count: int
    overlays: List[dict] = Field(default_factory=list)
    error: Optional[str] = None


class GenerationMetadata(BaseModel):
    """Settings, content, costs, timings and file names of one finished run."""

    timestamp: str
    video_path: str
    settings: MetadataSettings
    content: MetadataContent
    costs: MetadataCosts
    timings: Dict[str, float]
    files: MetadataFiles
    logo: Optional[LogoMetadata] = None
    text_overlays: Optional[TextOverlayMetadata] = None

    def to_record(self) -> dict:
        """JSON-ready dict; optional sections and unset errors are omitted."""
        return self.model_dump(mode="json", exclude_none=True)
