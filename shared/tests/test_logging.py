"""
Tests for structured logging.
"""

import json
import logging
import sys

from shared.logging import (
    JobContextFilter,
    JSONFormatter,
    configure_logging,
    get_job_id,
    get_logger,
    set_job_id,
)


def _record(message="Pipeline state: generating_video", **extra) -> logging.LogRecord:
    record = logging.LogRecord("productvideo.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_get_logger_uses_package_namespace():
    logger = get_logger("orchestrator")
    assert logger.name == "productvideo.orchestrator"
    assert get_logger("productvideo.storage").name == "productvideo.storage"
    assert any(isinstance(f, JobContextFilter) for f in logger.filters)


def test_job_id_context(mock_uuid):
    set_job_id(mock_uuid)
    try:
        assert get_job_id() == str(mock_uuid)
        record = _record()
        JobContextFilter().filter(record)
        assert record.job_id == str(mock_uuid)
    finally:
        set_job_id(None)
    assert get_job_id() is None


def test_explicit_job_id_is_kept(mock_uuid):
    set_job_id(mock_uuid)
    try:
        record = _record(job_id="explicit")
        JobContextFilter().filter(record)
        assert record.job_id == "explicit"
    finally:
        set_job_id(None)


def test_json_formatter_includes_extra_fields():
    record = _record(job_id="job-1", state="generating_video", progress=40)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Pipeline state: generating_video"
    assert payload["level"] == "INFO"
    assert payload["job_id"] == "job-1"
    assert payload["state"] == "generating_video"
    assert payload["progress"] == 40
    assert "exception" not in payload


def test_json_formatter_serialises_exceptions():
    try:
        raise RuntimeError("ffmpeg exited with code 1")
    except RuntimeError:
        record = logging.LogRecord("productvideo.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(JSONFormatter().format(record))
    assert "ffmpeg exited with code 1" in payload["exception"]


def test_configure_logging_installs_single_handler():
    configure_logging("DEBUG", "json")
    configure_logging("WARNING", "text")

    root = logging.getLogger("productvideo")
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0].formatter, JSONFormatter)
    assert root.propagate is False
