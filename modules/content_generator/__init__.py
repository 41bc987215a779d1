"""
Content Generator Module.

Product identification, scene prompts and voiceover scripts from GPT-4o.
"""

from modules.content_generator.client import ContentGenerator
from modules.content_generator.prompts import script_word_limit

__all__ = [
    "ContentGenerator",
    "script_word_limit",
]
