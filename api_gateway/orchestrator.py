"""
Pipeline orchestration logic.

Executes the generation stages sequentially with state tracking and error
handling: content generation, video synthesis, logo bumpers (optional),
voiceover, audio merge, text overlays (optional), costs and metadata.
"""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from modules.compositor.engine import CompositingEngine
from modules.content_generator.client import ContentGenerator
from modules.storage.files import StorageLayer
from modules.video_provider.base import VideoGenerationParams, VideoProvider
from modules.video_provider.factory import build_replicate_client, get_video_provider
from modules.voice_provider.base import VoiceProvider
from modules.voice_provider.factory import get_voice_provider
from shared.clients import ServiceClients
from shared.cost_tracking import calculate_costs
from shared.errors import InvalidVoiceError, PipelineError, ValidationError, error_code_for
from shared.logging import get_logger, set_job_id
from shared.models.generation import GenerationRequest, VideoProviderType, VoiceProviderType
from shared.models.metadata import (
    GenerationMetadata,
    LogoMetadata,
    MetadataContent,
    MetadataFiles,
    MetadataSettings,
    TextOverlayMetadata,
)
from shared.models.run import PipelineRun
from shared.models.state import TERMINAL_STATES, GenerationState
from api_gateway.services.stage_runner import run_optional_stage

logger = get_logger("api_gateway.orchestrator")

VideoProviderFactory = Callable[[VideoProviderType], VideoProvider]
VoiceProviderFactory = Callable[[VoiceProviderType], VoiceProvider]


class PipelineResult(BaseModel):
    """Outcome of one pipeline run."""

    success: bool
    job_id: UUID
    state: GenerationState
    output_folder: Optional[Path] = None
    final_video_path: Optional[Path] = None
    metadata: Optional[GenerationMetadata] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    state_history: List[GenerationState] = Field(default_factory=list)


class PipelineOrchestrator:
    """Drives a GenerationRequest through every stage of the pipeline."""

    def __init__(
        self,
        clients: ServiceClients,
        storage: Optional[StorageLayer] = None,
        compositor: Optional[CompositingEngine] = None,
        content: Optional[ContentGenerator] = None,
        video_provider_factory: Optional[VideoProviderFactory] = None,
        voice_provider_factory: Optional[VoiceProviderFactory] = None
    ):
        """
        Initialize orchestrator.

        Args:
            clients: Shared client handles
            storage: Storage layer (built from settings if omitted)
            compositor: Compositing engine (built from settings if omitted)
            content: Content generator (built on first use if omitted)
            video_provider_factory: Builds a client-backed video provider
            voice_provider_factory: Builds a client-backed voice provider
        """
        self.clients = clients
        self.storage = storage or StorageLayer.from_clients(clients)
        self.compositor = compositor or CompositingEngine.from_settings(clients.settings)
        self._content = content
        self._video_provider_factory = video_provider_factory or self._build_video_provider
        self._voice_provider_factory = voice_provider_factory or self._build_voice_provider

    def _build_video_provider(self, provider_type: VideoProviderType) -> VideoProvider:
        return get_video_provider(provider_type, build_replicate_client(self.clients))

    def _build_voice_provider(self, provider_type: VoiceProviderType) -> VoiceProvider:
        return get_voice_provider(provider_type, self.clients)

    @property
    def content(self) -> ContentGenerator:
        """
        Raises:
            ConfigError: If OPENAI_API_KEY is not configured
        """
        if self._content is None:
            self._content = ContentGenerator.from_clients(self.clients)
        return self._content

    @staticmethod
    def _video_params(request: GenerationRequest, prompt: str) -> VideoGenerationParams:
        return VideoGenerationParams(
            prompt=prompt,
            duration=request.duration,
            aspect_ratio=request.aspect_ratio,
            resolution=request.resolution,
            image=request.image,
        )

    def validate_request(self, request: GenerationRequest) -> None:
        """
        Check the request against the selected providers without any remote call.

        Raises:
            ValidationError: If duration, aspect ratio or resolution fall outside the envelope
            InvalidVoiceError: If the voice is not offered by the voice provider
        """
        video_provider = get_video_provider(request.video_provider)
        result = video_provider.validate(self._video_params(request, request.prompt or ""))
        if not result.valid:
            raise ValidationError(f"Invalid parameters: {', '.join(result.errors)}")

        voice_provider = get_voice_provider(request.voice_provider)
        if not voice_provider.validate_voice(request.voice):
            raise InvalidVoiceError(
                f"Invalid voice: {request.voice}. Must be one of: "
                f"{', '.join(v.id for v in voice_provider.get_available_voices())}"
            )

    def create_run(self, request: GenerationRequest) -> PipelineRun:
        return PipelineRun(request=request)

    async def generate(self, request: GenerationRequest) -> PipelineResult:
        """Create a run for the request and execute it."""
        return await self.execute(self.create_run(request))

    def _advance(self, run: PipelineRun, state: GenerationState) -> None:
        run.transition(state)
        logger.info(
            f"Pipeline state: {state.value}",
            extra={"job_id": str(run.job_id), "state": state.value, "progress": run.progress}
        )

    async def execute(self, run: PipelineRun) -> PipelineResult:
        """
        Execute the generation pipeline for one run.

        Failures of the logo and text overlay stages are recorded and
        bypassed; any other failure moves the run to the error state and is
        reported in the result.

        Args:
            run: Pipeline run in the idle state

        Returns:
            PipelineResult
        """
        request = run.request
        job_id = str(run.job_id)
        set_job_id(run.job_id)
        logger.info(
            "Starting video generation",
            extra={
                "job_id": job_id,
                "video_provider": request.video_provider.value,
                "voice_provider": request.voice_provider.value,
                "duration": request.duration,
            }
        )

        try:
            self.validate_request(request)
            video_provider = self._video_provider_factory(request.video_provider)
            voice_provider = self._voice_provider_factory(request.voice_provider)

            # Output folder and source image
            self._advance(run, GenerationState.UPLOADING_IMAGE)
            folder = self.storage.create_output_folder()
            run.output_folder = folder
            run.artifacts.source_image = self.storage.save_image_file(
                folder, "source_image.jpg", request.image
            )

            # Scene prompt
            product_identified = False
            if request.prompt:
                run.prompt = request.prompt
            else:
                self._advance(run, GenerationState.ANALYZING_IMAGE)
                if not request.product_description:
                    with run.time_stage("vision"):
                        run.detected_product = await self.content.identify_product(request.image)
                    product_identified = True
                with run.time_stage("prompt"):
                    run.prompt = await self.content.generate_video_prompt(
                        request.image,
                        request.duration,
                        request.aspect_ratio,
                        video_provider.name,
                        request.product_description or run.detected_product,
                    )

            # Voiceover script
            if request.script:
                run.script = request.script
            else:
                self._advance(run, GenerationState.GENERATING_SCRIPT)
                with run.time_stage("script"):
                    run.script = await self.content.generate_script(
                        request.product_description or run.detected_product,
                        request.duration,
                        request.theme,
                    )

            # Product video
            self._advance(run, GenerationState.GENERATING_VIDEO)
            with run.time_stage("video"):
                video_url = await video_provider.generate_video(
                    self._video_params(request, run.prompt)
                )
            ts = int(time.time() * 1000)
            original_filename = f"video_original_{ts}.mp4"
            run.artifacts.original_video = await self.storage.download_video(
                video_url, folder, original_filename
            )

            # Logo bumpers (optional)
            video_for_audio = run.artifacts.original_video
            logo_error = None
            if request.logo_requested:
                outcome = await run_optional_stage(
                    run, "logo", lambda: self._apply_logo(run, folder, ts), video_for_audio
                )
                logo_error = outcome.error
                if not outcome.failed and outcome.artifact != video_for_audio:
                    run.artifacts.logo_video = outcome.artifact
                video_for_audio = outcome.artifact

            # Voiceover
            self._advance(run, GenerationState.GENERATING_VOICEOVER)
            with run.time_stage("voiceover"):
                audio = await voice_provider.generate_voiceover(run.script, request.voice)
            voiceover_filename = f"voiceover_{ts}.mp3"
            run.artifacts.voiceover = self.storage.save_audio_file(folder, voiceover_filename, audio)

            # Audio merge
            self._advance(run, GenerationState.MERGING_AUDIO)
            with run.time_stage("merge"):
                run.artifacts.merged_video = await self.compositor.merge_audio(
                    video_for_audio, run.artifacts.voiceover, folder / f"video_final_{ts}.mp4"
                )
            final_video = run.artifacts.merged_video

            # Text overlays (optional)
            overlay_error = None
            if request.text_overlays:
                outcome = await run_optional_stage(
                    run,
                    "text_overlay",
                    lambda: self._apply_text_overlays(run, folder / f"video_final_text_{ts}.mp4"),
                    final_video,
                )
                overlay_error = outcome.error
                final_video = outcome.artifact
            run.artifacts.final_video = final_video

            costs = calculate_costs(
                video_cost=video_provider.cost_per_video(request.duration, request.resolution),
                voiceover_cost=voice_provider.get_cost(run.script),
                product_identified=product_identified,
                prompt_generated=not request.prompt,
                script_generated=not request.script,
            )

            # Metadata
            self._advance(run, GenerationState.SAVING_FILES)
            metadata = GenerationMetadata(
                timestamp=datetime.now(timezone.utc).isoformat(),
                video_path=str(final_video),
                settings=MetadataSettings(
                    video_model=video_provider.model_id,
                    duration=request.duration,
                    aspect_ratio=request.aspect_ratio,
                    resolution=request.resolution,
                ),
                content=MetadataContent(
                    prompt=run.prompt,
                    script=run.script,
                    voice=request.voice,
                    voice_provider=request.voice_provider.value,
                    theme=request.theme.value,
                ),
                costs=costs.to_metadata(),
                timings=run.timings.as_dict(run.elapsed),
                files=MetadataFiles(
                    original_video=original_filename,
                    voiceover=voiceover_filename,
                    final_video=final_video.name,
                ),
                logo=self._logo_metadata(request, logo_error),
                text_overlays=self._overlay_metadata(request, overlay_error),
            )
            self.storage.save_metadata(folder, metadata)

            self._advance(run, GenerationState.COMPLETE)
            logger.info(
                "Pipeline completed successfully",
                extra={"job_id": job_id, "total_cost": float(costs.total), "final_video": str(final_video)}
            )
            return PipelineResult(
                success=True,
                job_id=run.job_id,
                state=run.state,
                output_folder=folder,
                final_video_path=final_video,
                metadata=metadata,
                state_history=list(run.state_history),
            )

        except Exception as e:
            return self._fail(run, e)

    def _fail(self, run: PipelineRun, error: Exception) -> PipelineResult:
        message = error.message if isinstance(error, PipelineError) else str(error)
        code = error_code_for(error)
        logger.error(
            f"Pipeline execution failed: {message}",
            exc_info=error,
            extra={"job_id": str(run.job_id), "error_code": code, "state": run.state.value}
        )
        run.error = message
        if run.state not in TERMINAL_STATES:
            run.transition(GenerationState.ERROR)
        return PipelineResult(
            success=False,
            job_id=run.job_id,
            state=run.state,
            output_folder=run.output_folder,
            error=message,
            error_code=code,
            state_history=list(run.state_history),
        )

    async def _apply_logo(self, run: PipelineRun, folder: Path, ts: int) -> Path:
        """Wrap the product video in intro/outro bumpers; temporary clips are always removed."""
        request = run.request
        video = run.artifacts.original_video
        if not (request.intro_enabled or request.outro_enabled):
            return video

        logo_path = self.storage.save_image_file(folder, f"logo_{ts}.png", request.logo)
        run.artifacts.logo_image = logo_path
        width, height = await self.compositor.probe_dimensions(video)

        intro_path = folder / f"logo_intro_{ts}.mp4"
        outro_path = folder / f"logo_outro_{ts}.mp4"
        output_path = folder / f"video_with_logo_{ts}.mp4"
        try:
            clips: List[Path] = []
            if request.intro_enabled:
                clips.append(await self.compositor.create_bumper(
                    logo_path, intro_path, request.intro_duration, width, height,
                    fade_in=True, fade_out=False,
                ))
            clips.append(video)
            if request.outro_enabled:
                clips.append(await self.compositor.create_bumper(
                    logo_path, outro_path, request.outro_duration, width, height,
                    fade_in=False, fade_out=True,
                ))
            return await self.compositor.concatenate(clips, output_path)
        except Exception:
            output_path.unlink(missing_ok=True)
            raise
        finally:
            intro_path.unlink(missing_ok=True)
            outro_path.unlink(missing_ok=True)

    async def _apply_text_overlays(self, run: PipelineRun, output_path: Path) -> Path:
        request = run.request
        try:
            return await self.compositor.burn_text_overlays(
                run.artifacts.merged_video, request.text_overlays, output_path, request.theme
            )
        except Exception:
            output_path.unlink(missing_ok=True)
            raise

    @staticmethod
    def _logo_metadata(request: GenerationRequest, error: Optional[str]) -> Optional[LogoMetadata]:
        if not request.logo:
            return None
        return LogoMetadata(
            enabled=request.logo_requested,
            intro=request.enable_logo_intro,
            outro=request.enable_logo_outro,
            intro_duration=request.intro_duration,
            outro_duration=request.outro_duration,
            error=error,
        )

    @staticmethod
    def _overlay_metadata(request: GenerationRequest, error: Optional[str]) -> Optional[TextOverlayMetadata]:
        if not request.text_overlays:
            return None
        return TextOverlayMetadata(
            enabled=True,
            count=len(request.text_overlays),
            overlays=[o.model_dump(mode="json", exclude_none=True) for o in request.text_overlays],
            error=error,
        )
