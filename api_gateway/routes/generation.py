"""
Generation endpoints.

Scene prompt, voiceover script and full video generation. Images arrive as
base64 strings (optionally data-URL prefixed) and are decoded here.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from api_gateway.dependencies import get_content_generator, get_orchestrator
from api_gateway.orchestrator import PipelineOrchestrator
from modules.content_generator.client import ContentGenerator
from shared.errors import ValidationError
from shared.logging import get_logger
from shared.models.generation import (
    GenerationRequest,
    TextOverlay,
    VideoProviderType,
    VideoTheme,
    VoiceProviderType,
)
from shared.validation import decode_base64_image, format_validation_errors, validate_text

logger = get_logger("api_gateway.routes.generation")

PROMPT_MAX_LENGTH = 2000
SCRIPT_MAX_LENGTH = 1000

router = APIRouter()

# Error codes reported with 400 instead of 500
CLIENT_ERROR_CODES = frozenset({"VALIDATION_ERROR", "INVALID_VOICE"})


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class GeneratePromptRequest(CamelModel):
    image: str
    duration: int = 6
    aspect_ratio: str = "9:16"
    model_name: str = "Google Veo 3 Fast"
    product_description: Optional[str] = None


class GeneratePromptResponse(CamelModel):
    prompt: str
    detected_product: str


class GenerateScriptRequest(CamelModel):
    duration: int = Field(..., gt=0)
    product_description: Optional[str] = None
    theme: VideoTheme = VideoTheme.INFORMATIONAL


class GenerateScriptResponse(CamelModel):
    script: str


class GenerateVideoRequest(CamelModel):
    image: str
    video_provider: VideoProviderType = VideoProviderType.VEO3_FAST
    duration: int = 6
    aspect_ratio: str = "9:16"
    resolution: str = "1080p"
    prompt: Optional[str] = None
    script: Optional[str] = None
    product_description: Optional[str] = None
    theme: VideoTheme = VideoTheme.INFORMATIONAL
    voice_provider: VoiceProviderType = VoiceProviderType.OPENAI
    voice: str = "nova"
    logo: Optional[str] = None
    enable_logo_intro: bool = False
    enable_logo_outro: bool = False
    intro_duration: float = 0.0
    outro_duration: float = 0.0
    text_overlays: List[TextOverlay] = Field(default_factory=list)

    def to_generation_request(self) -> GenerationRequest:
        """
        Decode the images and build the pipeline request.

        Raises:
            ValidationError: If an image, the supplied text or a cross-field constraint is invalid
        """
        image = decode_base64_image(self.image)
        logo = decode_base64_image(self.logo, field="Logo") if self.logo else None
        # Blank text is left for the pipeline to generate
        prompt = script = None
        if (self.prompt or "").strip():
            prompt = validate_text(self.prompt, "Prompt", PROMPT_MAX_LENGTH)
        if (self.script or "").strip():
            script = validate_text(self.script, "Script", SCRIPT_MAX_LENGTH)
        try:
            return GenerationRequest(
                image=image,
                logo=logo,
                prompt=prompt,
                script=script,
                **self.model_dump(exclude={"image", "logo", "prompt", "script"}),
            )
        except PydanticValidationError as e:
            raise ValidationError(format_validation_errors(e.errors())) from e


@router.post("/generate-prompt", response_model=GeneratePromptResponse)
async def generate_prompt(
    body: GeneratePromptRequest,
    content: ContentGenerator = Depends(get_content_generator)
):
    """
    Identify the product and write a scene prompt for it.

    Returns:
        Prompt and the product the vision model detected
    """
    image = decode_base64_image(body.image)
    detected_product = await content.identify_product(image)
    prompt = await content.generate_video_prompt(
        image,
        body.duration,
        body.aspect_ratio,
        body.model_name,
        body.product_description,
    )
    return GeneratePromptResponse(prompt=prompt, detected_product=detected_product)


@router.post("/generate-script", response_model=GenerateScriptResponse)
async def generate_script(
    body: GenerateScriptRequest,
    content: ContentGenerator = Depends(get_content_generator)
):
    """Write a voiceover script within the duration's word limit."""
    script = await content.generate_script(body.product_description, body.duration, body.theme)
    return GenerateScriptResponse(script=script)


@router.post("/generate-video")
async def generate_video(
    body: GenerateVideoRequest,
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator)
):
    """
    Run the full generation pipeline.

    Returns:
        Output folder, final video path and metadata on success; error and
        code with status 400 (bad request) or 500 (pipeline failure) otherwise
    """
    request = body.to_generation_request()
    result = await orchestrator.generate(request)

    if not result.success:
        status_code = 400 if result.error_code in CLIENT_ERROR_CODES else 500
        return JSONResponse(
            status_code=status_code,
            content={
                "error": result.error or "Video generation failed",
                "code": result.error_code,
                "jobId": str(result.job_id),
            }
        )

    logger.info(
        "Video generated",
        extra={"job_id": str(result.job_id), "final_video": str(result.final_video_path)}
    )
    return {
        "success": True,
        "jobId": str(result.job_id),
        "outputFolder": str(result.output_folder),
        "finalVideoPath": str(result.final_video_path),
        "metadata": result.metadata.to_record(),
        "stateHistory": [state.value for state in result.state_history],
    }
