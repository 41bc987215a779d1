"""
Optional stage execution.

Runs a compositing stage whose failure must not abort the pipeline. The
outcome carries either the stage's artifact or the fallback artifact plus
the recorded error.
"""

from pathlib import Path
from typing import Awaitable, Callable, NamedTuple, Optional

from shared.logging import get_logger
from shared.models.run import PipelineRun

logger = get_logger("api_gateway.stage_runner")


class StageOutcome(NamedTuple):
    """Artifact to continue with, and the error if the stage was bypassed."""

    artifact: Path
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


async def run_optional_stage(
    run: PipelineRun,
    stage: str,
    operation: Callable[[], Awaitable[Path]],
    fallback: Path
) -> StageOutcome:
    """
    Run a fail-soft stage.

    On success the stage timing is recorded and the produced artifact is
    returned. On any failure the error is logged, the stage timing is reset
    to zero and the fallback artifact is returned with the error message.

    Args:
        run: Pipeline run being executed
        stage: Timing stage name
        operation: Coroutine factory producing the stage artifact
        fallback: Artifact to continue with if the stage fails

    Returns:
        StageOutcome
    """
    try:
        with run.time_stage(stage):
            artifact = await operation()
    except Exception as e:
        logger.warning(
            f"Optional stage '{stage}' failed, continuing without it: {str(e)}",
            exc_info=e,
            extra={"job_id": str(run.job_id), "stage": stage}
        )
        run.timings.reset(stage)
        return StageOutcome(artifact=Path(fallback), error=str(e))

    logger.info(
        f"Optional stage '{stage}' completed",
        extra={"job_id": str(run.job_id), "stage": stage, "duration": run.timings.get(stage)}
    )
    return StageOutcome(artifact=Path(artifact))
