"""
Pipeline run model.

One PipelineRun per job: the immutable request, per-stage timings, the current
state and its history, and the artifact paths accumulated so far. Runs live in
memory only.
"""

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from shared.errors import InvalidStateTransitionError
from shared.models.generation import GenerationRequest
from shared.models.state import GenerationState, can_transition, state_message, state_progress

TIMING_STAGES = (
    "vision",
    "prompt",
    "script",
    "video",
    "logo",
    "voiceover",
    "merge",
    "text_overlay",
)


class StageTimings(BaseModel):
    """Wall-clock seconds per named stage."""

    entries: Dict[str, float] = Field(default_factory=dict)

    def record(self, stage: str, seconds: float) -> None:
        self.entries[stage] = round(seconds, 3)

    def reset(self, stage: str) -> None:
        """Zero a stage whose work was discarded."""
        self.entries[stage] = 0.0

    def get(self, stage: str) -> float:
        return self.entries.get(stage, 0.0)

    def as_dict(self, total: float) -> Dict[str, float]:
        """All known stages (zero when skipped) plus the run total."""
        result = {stage: self.get(stage) for stage in TIMING_STAGES}
        result["total"] = round(total, 3)
        return result


class RunArtifacts(BaseModel):
    source_image: Optional[Path] = None
    logo_image: Optional[Path] = None
    original_video: Optional[Path] = None
    logo_video: Optional[Path] = None
    voiceover: Optional[Path] = None
    merged_video: Optional[Path] = None
    final_video: Optional[Path] = None


class PipelineRun(BaseModel):
    """Mutable record of one pipeline execution, owned by the orchestrator."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: GenerationRequest
    job_id: UUID = Field(default_factory=uuid4)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    state: GenerationState = GenerationState.IDLE
    state_history: List[GenerationState] = Field(
        default_factory=lambda: [GenerationState.IDLE]
    )
    timings: StageTimings = Field(default_factory=StageTimings)
    artifacts: RunArtifacts = Field(default_factory=RunArtifacts)
    output_folder: Optional[Path] = None
    error: Optional[str] = None

    # Content as it was produced (or supplied) during the run
    prompt: Optional[str] = None
    script: Optional[str] = None
    detected_product: Optional[str] = None

    def transition(self, target: GenerationState) -> None:
        """
        Move to a new state.

        Raises:
            InvalidStateTransitionError: If the move goes backwards or leaves a terminal state
        """
        if not can_transition(self.state, target):
            raise InvalidStateTransitionError(
                f"Cannot transition from {self.state.value} to {target.value}",
                job_id=self.job_id,
            )
        self.state = target
        self.state_history.append(target)

    @property
    def message(self) -> str:
        if self.state is GenerationState.ERROR and self.error:
            return self.error
        return state_message(self.state)

    @property
    def progress(self) -> int:
        return state_progress(self.state)

    @property
    def elapsed(self) -> float:
        return (datetime.now(timezone.utc) - self.started_at).total_seconds()

    @contextmanager
    def time_stage(self, stage: str) -> Iterator[None]:
        """Record the wall-clock duration of a block that completes normally."""
        start = time.perf_counter()
        yield
        self.timings.record(stage, time.perf_counter() - start)
