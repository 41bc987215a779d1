"""
Compositing engine.

Runs the ffmpeg invocations of the pipeline: logo bumper clips,
concatenation, dimension probe, audio merge and text overlay burn-in.
"""

import json
import shutil
import uuid
from pathlib import Path
from typing import Optional, Sequence, Tuple

from shared.config import Settings
from shared.errors import CompositionError
from shared.logging import get_logger
from shared.models.generation import TextOverlay, VideoTheme

from modules.compositor import filters
from modules.compositor.filters import PathLike
from modules.compositor.runner import run_media_tool

logger = get_logger("compositor")


def _copy_file(source: PathLike, destination: PathLike) -> Path:
    try:
        shutil.copyfile(source, destination)
    except OSError as e:
        raise CompositionError(f"Failed to copy {source} to {destination}: {str(e)}") from e
    return Path(destination)


class CompositingEngine:
    """ffmpeg-backed media operations."""

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        font_path: Optional[str] = None,
        bold_font_path: Optional[str] = None
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.font_path = font_path
        self.bold_font_path = bold_font_path

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompositingEngine":
        return cls(
            ffmpeg_binary=settings.ffmpeg_binary,
            ffprobe_binary=settings.ffprobe_binary,
            font_path=settings.overlay_font_path,
            bold_font_path=settings.overlay_bold_font_path,
        )

    async def _ffmpeg(self, args: Sequence[str]) -> None:
        await run_media_tool(self.ffmpeg_binary, ["-hide_banner", "-loglevel", "error", *args])

    async def create_bumper(
        self,
        image_path: PathLike,
        output_path: PathLike,
        duration: float,
        width: int,
        height: int,
        fade_in: bool = True,
        fade_out: bool = True
    ) -> Path:
        """
        Render a still image into a fixed-length clip.

        Args:
            image_path: Logo image
            output_path: Clip to write
            duration: Clip length in seconds
            width: Target frame width
            height: Target frame height
            fade_in: Fade in over the first 0.5s
            fade_out: Fade out over the last 0.5s

        Returns:
            Path of the written clip

        Raises:
            CompositionError: If ffmpeg fails
        """
        if duration <= 0:
            raise CompositionError(f"Bumper duration must be positive, got {duration}s")

        logger.info(f"Creating {duration}s logo clip at {width}x{height}")
        await self._ffmpeg(
            filters.bumper_args(image_path, output_path, duration, width, height, fade_in, fade_out)
        )
        return Path(output_path)

    async def concatenate(self, inputs: Sequence[PathLike], output_path: PathLike) -> Path:
        """
        Join clips with identical codecs by stream copy.

        A single input is copied; the temporary list file is always removed.

        Raises:
            CompositionError: If there are no inputs or ffmpeg fails
        """
        if not inputs:
            raise CompositionError("No videos to concatenate")

        if len(inputs) == 1:
            return _copy_file(inputs[0], output_path)

        output_path = Path(output_path)
        list_path = output_path.with_name(f"concat_list_{uuid.uuid4().hex[:8]}.txt")
        logger.info(f"Concatenating {len(inputs)} video clips")
        try:
            list_path.write_text(filters.concat_list_content(inputs), encoding="utf-8")
            await self._ffmpeg(filters.concat_args(list_path, output_path))
        except OSError as e:
            raise CompositionError(f"Failed to write concat list: {str(e)}") from e
        finally:
            list_path.unlink(missing_ok=True)
        return output_path

    async def probe_dimensions(self, video_path: PathLike) -> Tuple[int, int]:
        """
        Width and height of the first video stream.

        Raises:
            CompositionError: If ffprobe fails or its output cannot be parsed
        """
        stdout, _ = await run_media_tool(self.ffprobe_binary, filters.probe_args(video_path))
        try:
            stream = json.loads(stdout)["streams"][0]
            width, height = int(stream["width"]), int(stream["height"])
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompositionError(f"Could not parse video dimensions of {video_path}") from e

        if width <= 0 or height <= 0:
            raise CompositionError(f"Invalid video dimensions {width}x{height} for {video_path}")
        logger.debug(f"Video dimensions: {width}x{height}")
        return width, height

    async def merge_audio(
        self,
        video_path: PathLike,
        audio_path: PathLike,
        output_path: PathLike
    ) -> Path:
        """
        Mux a voice track onto a video; video is copied, audio encoded to AAC,
        output truncated to the shorter stream.

        Raises:
            CompositionError: If ffmpeg fails
        """
        logger.info(f"Merging audio into {Path(video_path).name}")
        await self._ffmpeg(filters.merge_args(video_path, audio_path, output_path))
        return Path(output_path)

    async def burn_text_overlays(
        self,
        video_path: PathLike,
        overlays: Sequence[TextOverlay],
        output_path: PathLike,
        theme: VideoTheme = VideoTheme.INFORMATIONAL
    ) -> Path:
        """
        Draw timed text overlays onto a video.

        Zero overlays copies the input unchanged.

        Raises:
            CompositionError: If ffmpeg fails
        """
        if not overlays:
            return _copy_file(video_path, output_path)

        chain = filters.text_overlay_filter(overlays, theme, self.font_path, self.bold_font_path)
        logger.info(f"Burning {len(overlays)} text overlay(s)", extra={"theme": VideoTheme(theme).value})
        await self._ffmpeg(filters.text_overlay_args(video_path, output_path, chain))
        return Path(output_path)

    async def check_available(self) -> dict:
        """Report whether the media tools can be executed."""
        status = {}
        for name, binary in (("ffmpeg", self.ffmpeg_binary), ("ffprobe", self.ffprobe_binary)):
            try:
                await run_media_tool(binary, ["-version"])
                status[name] = True
            except CompositionError:
                status[name] = False
        return status
