"""
Compositor Module.

Logo bumpers, concatenation, audio merge and text overlays via ffmpeg.
"""

from modules.compositor.engine import CompositingEngine
from modules.compositor.filters import alpha_expression, text_overlay_filter

__all__ = [
    "CompositingEngine",
    "alpha_expression",
    "text_overlay_filter",
]
