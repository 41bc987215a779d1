"""
Content themes.

A theme steers script generation (tone, keywords, style) and supplies the
default text styling and quick overlay presets for the editor.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.models.generation import FontWeight, OverlayPosition, VideoTheme


class ThemeTextStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    text_color: str
    font_size: int
    font_weight: FontWeight = FontWeight.BOLD
    background_color: Optional[str] = None
    background_opacity: Optional[float] = None


class TextOverlayPreset(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    text: str
    position: OverlayPosition
    start_time: float
    end_time: float
    fade_duration: float = 0.5


class ThemeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    script_tone: str
    script_keywords: List[str] = Field(default_factory=list)
    script_style: str
    text_style: ThemeTextStyle
    presets: List[TextOverlayPreset] = Field(default_factory=list)


DEFAULT_THEME = VideoTheme.INFORMATIONAL


def _preset(label: str, text: str, position: str, start: float, end: float) -> TextOverlayPreset:
    return TextOverlayPreset(
        label=label,
        text=text,
        position=OverlayPosition(position),
        start_time=start,
        end_time=end,
    )


THEME_CONFIGS: Dict[VideoTheme, ThemeConfig] = {
    VideoTheme.PROMOTIONAL: ThemeConfig(
        name="Promotional",
        description="Sales, discounts, limited time offers",
        script_tone="Urgent, compelling, value-focused",
        script_keywords=[
            "deal", "save", "offer", "limited time", "special price", "don't miss", "value", "now",
        ],
        script_style=(
            "Create excitement and urgency around the promotional offer. "
            "Emphasize value and savings. Use action-oriented language."
        ),
        text_style=ThemeTextStyle(
            text_color="#FF0000",
            font_size=72,
            background_color="#FFEB3B",
            background_opacity=0.9,
        ),
        presets=[
            _preset("50% OFF", "50% OFF", "top-center", 0, 3),
            _preset("SALE", "SALE", "top-right", 0, 4),
            _preset("Limited Time", "Limited Time Only", "bottom-center", 0, 3),
            _preset("Special Offer", "Special Offer", "top-left", 0, 4),
        ],
    ),
    VideoTheme.NEW_PRODUCT: ThemeConfig(
        name="New Product",
        description="Product launches, new arrivals, fresh additions",
        script_tone="Exciting, innovative, fresh",
        script_keywords=[
            "new", "introducing", "just arrived", "fresh", "latest", "discover", "innovation",
            "now available",
        ],
        script_style=(
            "Generate excitement about the new product. Emphasize innovation, newness, "
            "and the opportunity to be among the first. Upbeat and energetic."
        ),
        text_style=ThemeTextStyle(
            text_color="#FFFFFF",
            font_size=64,
            background_color="#2196F3",
            background_opacity=0.85,
        ),
        presets=[
            _preset("NEW", "NEW", "top-right", 0, 6),
            _preset("Just Arrived", "Just Arrived", "top-center", 0, 3),
            _preset("Introducing", "Introducing", "bottom-center", 0, 2),
            _preset("Fresh", "Fresh Arrival", "top-left", 0, 3),
        ],
    ),
    VideoTheme.INFORMATIONAL: ThemeConfig(
        name="Informational",
        description="Product features, benefits, educational content",
        script_tone="Clear, educational, trustworthy",
        script_keywords=[
            "quality", "features", "crafted", "designed", "premium", "perfect for", "ideal",
            "benefits",
        ],
        script_style=(
            "Focus on product features and benefits in a clear, informative way. "
            "Educational but still engaging. Emphasize quality and value."
        ),
        text_style=ThemeTextStyle(
            text_color="#FFFFFF",
            font_size=56,
            background_color="#000000",
            background_opacity=0.7,
        ),
        presets=[
            _preset("Learn More", "Learn More", "bottom-center", 4, 6),
            _preset("Premium Quality", "Premium Quality", "top-center", 0, 3),
            _preset("Features", "Key Features", "top-left", 2, 6),
            _preset("Handpicked", "Carefully Curated", "bottom-right", 0, 4),
        ],
    ),
    VideoTheme.SEASONAL: ThemeConfig(
        name="Seasonal",
        description="Holiday specials, seasonal offerings, limited editions",
        script_tone="Festive, timely, exclusive",
        script_keywords=[
            "seasonal", "holiday", "limited edition", "celebrate", "festive", "special",
            "exclusive", "perfect gift",
        ],
        script_style=(
            "Emphasize seasonal relevance and timeliness. Create a sense of occasion and "
            "exclusivity. Mention gifting opportunities if appropriate."
        ),
        text_style=ThemeTextStyle(
            text_color="#FFFFFF",
            font_size=68,
            background_color="#C62828",
            background_opacity=0.85,
        ),
        presets=[
            _preset("Holiday Special", "Holiday Special", "top-center", 0, 3),
            _preset("Limited Edition", "Limited Edition", "top-right", 0, 6),
            _preset("Season's Best", "Season's Best", "bottom-center", 0, 4),
            _preset("Perfect Gift", "The Perfect Gift", "top-left", 2, 6),
        ],
    ),
}


def get_theme_config(theme: VideoTheme) -> ThemeConfig:
    return THEME_CONFIGS[VideoTheme(theme)]


def list_themes() -> List[Dict[str, str]]:
    """Theme options for UI display."""
    return [
        {"value": theme.value, "label": config.name, "description": config.description}
        for theme, config in THEME_CONFIGS.items()
    ]
