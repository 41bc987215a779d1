"""
Instruction templates for the vision/text model.
"""

from typing import Optional

from shared.models.generation import VideoTheme
from shared.themes import get_theme_config

# Hard maximums derived from a TTS rate of ~2.5 words per second
SCRIPT_WORD_LIMITS = {
    2: 5,
    4: 10,
    6: 15,
    8: 20,
    10: 25,
    12: 30,
}
DEFAULT_SCRIPT_WORD_LIMIT = 15

UNKNOWN_PRODUCT = "Product from image"


def script_word_limit(duration: int) -> int:
    return SCRIPT_WORD_LIMITS.get(duration, DEFAULT_SCRIPT_WORD_LIMIT)


def identify_product_prompt() -> str:
    return """Identify the product in this image. Be specific and concise.

Output format: Just the product name/type (e.g., "Olive Oil Mister", "Copper Tea Kettle", "Stainless Steel Colander")

Focus on:
- Product category and type
- Material if visible
- Primary function

Output ONLY the product name, nothing else."""


def video_prompt_instruction(
    duration: int,
    aspect_ratio: str,
    model_name: str,
    brand: str,
    product_description: Optional[str] = None
) -> str:
    """Instruction for writing a cinematic scene prompt from the product image."""
    product_context = (
        f"Product: {product_description}" if product_description
        else "Product: (identify from image)"
    )
    description_hint = (
        "\n- Use the provided product description to create accurate, specific prompts"
        if product_description else ""
    )
    return f"""Analyze this product image and create a cinematic video prompt optimized for {model_name}.

{product_context}
Brand: {brand}
Video Duration: {duration}s
Aspect Ratio: {aspect_ratio}
Video Model: {model_name}

Requirements:
- Describe camera movements (slow pan, dolly, zoom, rotate)
- Specify lighting (warm, natural, cinematic)
- Include setting/environment (modern Indian kitchen, elegant dining)
- Consider aspect ratio framing
- Emphasize: premium, classy, excellent value, quality, curation
- Overall aesthetic: cinematic product commercial with 4K quality look
- Visual style: rich, modern, contemporary
- DO NOT include any text overlays or captions in the video{description_hint}

Output ONLY the prompt text, no explanations."""


def script_instruction(
    product_description: str,
    duration: int,
    brand_name: str,
    brand_description: str,
    theme: VideoTheme = VideoTheme.INFORMATIONAL
) -> str:
    """Instruction for writing a voiceover script that fits the video length."""
    config = get_theme_config(theme)
    word_limit = script_word_limit(duration)
    return f"""Create a voiceover script for a {duration}s product video.

Product: {product_description}
Brand: {brand_name} - {brand_description}
Theme: {config.name} ({config.description})
Tone: {config.script_tone}
Keywords: {', '.join(config.script_keywords)}

CRITICAL LENGTH REQUIREMENT: {word_limit} words maximum
IMPORTANT: If you exceed this word count, the audio will be CUT OFF mid-sentence. Stay UNDER the limit.

Style:
- {config.script_style}
- Conversational yet elegant
- Optional tagline format: "{brand_name} - [quality descriptor]"
- Avoid excessive focus on brand history or age
- Prioritize brevity - every word counts!

Output ONLY the script text for voiceover, no explanations."""
