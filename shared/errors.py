"""
Error handling.

Custom exception classes for consistent error handling across the pipeline.
"""

from typing import Optional
from uuid import UUID


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        job_id: Optional[UUID] = None,
        code: Optional[str] = None
    ):
        """
        Initialize pipeline error.

        Args:
            message: Error message
            job_id: Optional job ID associated with the error
            code: Optional error code for categorization
        """
        self.message = message
        self.job_id = job_id
        self.code = code
        super().__init__(self.message)


class ConfigError(PipelineError):
    """Configuration errors (missing env vars, invalid settings, missing API keys)."""
    pass


class ValidationError(PipelineError):
    """Input validation errors (capability envelope, request data)."""
    pass


class InvalidVoiceError(ValidationError):
    """Requested voice is not offered by the selected voice provider."""
    pass


class GenerationError(PipelineError):
    """Remote AI generation failures (text, video, voice)."""
    pass


class UnexpectedOutputError(GenerationError):
    """Remote call succeeded but returned something other than the expected shape."""
    pass


class CompositionError(PipelineError):
    """Media tool (ffmpeg/ffprobe) failures."""
    pass


class StorageError(PipelineError):
    """Local persistence failures."""
    pass


class InvalidStateTransitionError(PipelineError):
    """Pipeline state machine was asked to move backwards or out of a terminal state."""
    pass


_ERROR_CODES = (
    (InvalidVoiceError, "INVALID_VOICE"),
    (ValidationError, "VALIDATION_ERROR"),
    (UnexpectedOutputError, "UNEXPECTED_OUTPUT"),
    (GenerationError, "GENERATION_FAILED"),
    (CompositionError, "COMPOSITION_FAILED"),
    (StorageError, "STORAGE_FAILED"),
    (ConfigError, "CONFIG_ERROR"),
    (InvalidStateTransitionError, "INVALID_STATE_TRANSITION"),
)


def error_code_for(error: Exception) -> str:
    """
    Error code for an exception: its explicit code, else one derived from its class.

    Args:
        error: Any exception

    Returns:
        Error code string
    """
    explicit = getattr(error, "code", None)
    if explicit:
        return explicit
    for error_type, code in _ERROR_CODES:
        if isinstance(error, error_type):
            return code
    return "INTERNAL_ERROR"


__all__ = [
    "PipelineError",
    "ConfigError",
    "ValidationError",
    "InvalidVoiceError",
    "GenerationError",
    "UnexpectedOutputError",
    "CompositionError",
    "StorageError",
    "InvalidStateTransitionError",
    "error_code_for",
]
