"""
Generation state machine.

States only move forward (skipping is allowed, revisiting is not). The error
state is reachable from any non-terminal state; complete and error are
terminal.
"""

from enum import Enum
from typing import Dict, NamedTuple


class GenerationState(str, Enum):
    IDLE = "idle"
    UPLOADING_IMAGE = "uploading_image"
    ANALYZING_IMAGE = "analyzing_image"
    GENERATING_SCRIPT = "generating_script"
    GENERATING_VIDEO = "generating_video"
    GENERATING_VOICEOVER = "generating_voiceover"
    MERGING_AUDIO = "merging_audio"
    SAVING_FILES = "saving_files"
    COMPLETE = "complete"
    ERROR = "error"


class StateInfo(NamedTuple):
    message: str
    progress: int


STATE_INFO: Dict[GenerationState, StateInfo] = {
    GenerationState.IDLE: StateInfo("Ready to generate", 0),
    GenerationState.UPLOADING_IMAGE: StateInfo("Uploading image...", 5),
    GenerationState.ANALYZING_IMAGE: StateInfo("Analyzing product image...", 10),
    GenerationState.GENERATING_SCRIPT: StateInfo("Writing voiceover script...", 25),
    GenerationState.GENERATING_VIDEO: StateInfo("Generating video (this may take 1-2 minutes)...", 40),
    GenerationState.GENERATING_VOICEOVER: StateInfo("Creating voiceover...", 85),
    GenerationState.MERGING_AUDIO: StateInfo("Merging audio and video...", 90),
    GenerationState.SAVING_FILES: StateInfo("Saving files...", 95),
    GenerationState.COMPLETE: StateInfo("Complete!", 100),
    GenerationState.ERROR: StateInfo("An error occurred", 0),
}

TERMINAL_STATES = frozenset({GenerationState.COMPLETE, GenerationState.ERROR})

# Position in the forward order; error sits outside it
_RANK = {
    state: index
    for index, state in enumerate(s for s in GenerationState if s is not GenerationState.ERROR)
}


def can_transition(current: GenerationState, target: GenerationState) -> bool:
    """
    Check whether the state machine may move from current to target.

    Args:
        current: Current state
        target: Requested next state

    Returns:
        True if the move is legal
    """
    if current in TERMINAL_STATES:
        return False
    if target is GenerationState.ERROR:
        return True
    return _RANK[target] > _RANK[current]


def state_message(state: GenerationState) -> str:
    return STATE_INFO[state].message


def state_progress(state: GenerationState) -> int:
    return STATE_INFO[state].progress
