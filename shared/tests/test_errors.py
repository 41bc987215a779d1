"""
Tests for error handling.
"""

import pytest

from shared.errors import (
    CompositionError,
    ConfigError,
    GenerationError,
    InvalidStateTransitionError,
    InvalidVoiceError,
    PipelineError,
    StorageError,
    UnexpectedOutputError,
    ValidationError,
    error_code_for,
)


def test_pipeline_error_inheritance():
    """Test that all exceptions inherit from PipelineError."""
    for error_type in (
        ConfigError,
        ValidationError,
        GenerationError,
        CompositionError,
        StorageError,
        InvalidStateTransitionError,
    ):
        assert issubclass(error_type, PipelineError)
    assert issubclass(InvalidVoiceError, ValidationError)
    assert issubclass(UnexpectedOutputError, GenerationError)


def test_pipeline_error_with_job_id(mock_uuid):
    """Test that exceptions can include job_id."""
    error = ConfigError("Test error", job_id=mock_uuid, code="TEST_ERROR")

    assert error.message == "Test error"
    assert error.job_id == mock_uuid
    assert error.code == "TEST_ERROR"
    assert str(error) == "Test error"


@pytest.mark.parametrize("error,code", [
    (InvalidVoiceError("Invalid voice: x"), "INVALID_VOICE"),
    (ValidationError("bad"), "VALIDATION_ERROR"),
    (UnexpectedOutputError("list"), "UNEXPECTED_OUTPUT"),
    (GenerationError("502"), "GENERATION_FAILED"),
    (CompositionError("exit 1"), "COMPOSITION_FAILED"),
    (StorageError("disk"), "STORAGE_FAILED"),
    (ConfigError("missing"), "CONFIG_ERROR"),
    (InvalidStateTransitionError("back"), "INVALID_STATE_TRANSITION"),
    (RuntimeError("boom"), "INTERNAL_ERROR"),
])
def test_error_code_for(error, code):
    assert error_code_for(error) == code


def test_explicit_code_wins():
    assert error_code_for(GenerationError("quota", code="RATE_LIMITED")) == "RATE_LIMITED"
