"""
Content generation with GPT-4o.

Product identification, scene prompt writing (vision) and voiceover script
writing (text). Each call is a single attempt; failures propagate.
"""

import asyncio
from typing import List, Optional

from openai import OpenAI, OpenAIError

from shared.clients import ServiceClients
from shared.errors import GenerationError
from shared.logging import get_logger
from shared.models.generation import VideoTheme
from shared.validation import image_to_data_url

from modules.content_generator import prompts

logger = get_logger("content_generator")

VISION_MAX_TOKENS = 500
SCRIPT_MAX_TOKENS = 150


class ContentGenerator:
    """Vision/text generation collaborator of the pipeline."""

    def __init__(
        self,
        client: OpenAI,
        model: str = "gpt-4o",
        brand_name: str = "Poppat Jamals",
        brand_description: str = "Premium homeware retailer"
    ):
        self._client = client
        self.model = model
        self.brand_name = brand_name
        self.brand_description = brand_description

    @classmethod
    def from_clients(cls, clients: ServiceClients) -> "ContentGenerator":
        """
        Raises:
            ConfigError: If OPENAI_API_KEY is not configured
        """
        settings = clients.settings
        return cls(
            client=clients.openai,
            model=settings.openai_text_model,
            brand_name=settings.brand_name,
            brand_description=settings.brand_description,
        )

    @property
    def brand(self) -> str:
        return f"{self.brand_name} ({self.brand_description})"

    async def _complete(self, content, max_tokens: int, purpose: str) -> str:
        """Run one chat completion and return its stripped text."""
        loop = asyncio.get_running_loop()

        def _call_chat():
            return self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": content}],
                max_tokens=max_tokens,
            )

        try:
            response = await loop.run_in_executor(None, _call_chat)
        except OpenAIError as e:
            logger.error(f"OpenAI {purpose} call failed: {str(e)}")
            raise GenerationError(f"Failed to generate {purpose}: {str(e)}") from e

        text = ""
        if response.choices:
            text = (response.choices[0].message.content or "").strip()
        if not text:
            raise GenerationError(f"OpenAI returned an empty {purpose}")

        logger.info(f"Generated {purpose} ({len(text)} chars)")
        return text

    async def analyze_image(self, image: bytes, instruction: str, purpose: str = "image analysis") -> str:
        """
        Ask the vision model about an image.

        Args:
            image: Raw image bytes
            instruction: Task-specific instruction
            purpose: Label used in logs and errors

        Returns:
            Model response text

        Raises:
            GenerationError: If the call fails or returns nothing
        """
        content: List[dict] = [
            {"type": "text", "text": instruction},
            {"type": "image_url", "image_url": {"url": image_to_data_url(image)}},
        ]
        return await self._complete(content, VISION_MAX_TOKENS, purpose)

    async def identify_product(self, image: bytes) -> str:
        """Name the product shown in the image (e.g. 'Copper Tea Kettle')."""
        return await self.analyze_image(image, prompts.identify_product_prompt(), "product identification")

    async def generate_video_prompt(
        self,
        image: bytes,
        duration: int,
        aspect_ratio: str,
        model_name: str,
        product_description: Optional[str] = None
    ) -> str:
        """
        Write a cinematic scene prompt for the video model.

        Args:
            image: Product image
            duration: Video duration in seconds
            aspect_ratio: Target aspect ratio
            model_name: Display name of the video model
            product_description: Known product description, if any

        Returns:
            Scene prompt
        """
        instruction = prompts.video_prompt_instruction(
            duration, aspect_ratio, model_name, self.brand, product_description
        )
        return await self.analyze_image(image, instruction, "video prompt")

    async def generate_script(
        self,
        product_description: Optional[str],
        duration: int,
        theme: VideoTheme = VideoTheme.INFORMATIONAL
    ) -> str:
        """
        Write a voiceover script within the duration's word limit.

        Args:
            product_description: What the product is (a generic label when unknown)
            duration: Video duration in seconds
            theme: Content theme steering tone and keywords

        Returns:
            Script text
        """
        instruction = prompts.script_instruction(
            product_description or prompts.UNKNOWN_PRODUCT,
            duration,
            self.brand_name,
            self.brand_description,
            theme,
        )
        return await self._complete(instruction, SCRIPT_MAX_TOKENS, "script")
