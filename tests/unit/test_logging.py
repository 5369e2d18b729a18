"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from treepatch.errors import DetachedNodeError
from treepatch.models.node import Node
from treepatch.utils.logging import (
    JSONFormatter,
    get_logger,
    log_error_with_context,
    log_phase_transition,
    setup_logging,
)


@pytest.fixture
def captured():
    """Logger adapter writing JSON records to a buffer."""
    logger = get_logger("test_treepatch", revision_pair="A.java -> B.java")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    yield logger, stream
    logger.logger.removeHandler(handler)


def _records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    logger = logging.getLogger("test_formatter")
    logger.setLevel(logging.INFO)
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    logger.info("Test message", extra={"phase": "delete", "patch_index": 3})
    logger.removeHandler(handler)

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test_formatter"
    assert log_data["message"] == "Test message"
    assert log_data["phase"] == "delete"
    assert log_data["context"] == {"patch_index": 3}
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", revision_pair="A.java -> B.java", phase="insert")

    assert logger.extra["revision_pair"] == "A.java -> B.java"
    assert logger.extra["phase"] == "insert"


def test_call_extra_overrides_adapter_context(captured):
    """Test per-call extra fields win over the adapter's context."""
    logger, stream = captured

    logger.info("Applying", extra={"phase": "update"})

    record = _records(stream)[0]
    assert record["revision_pair"] == "A.java -> B.java"
    assert record["phase"] == "update"


def test_log_phase_transition(captured):
    """Test phase transition logging."""
    logger, stream = captured

    log_phase_transition(logger, "insert", "started", 4)

    record = _records(stream)[0]
    assert record["message"] == "Patch phase started: insert"
    assert record["phase"] == "insert"
    assert record["context"]["status"] == "started"
    assert record["context"]["patch_count"] == 4


def test_log_error_with_context(captured):
    """Test error logging includes the stack trace and context."""
    logger, stream = captured

    try:
        raise ValueError("Test error")
    except ValueError as e:
        log_error_with_context(logger, "Patch failed", e, phase="delete", patch_index=0)

    record = _records(stream)[0]
    assert record["level"] == "ERROR"
    assert record["phase"] == "delete"
    assert record["error"]["type"] == "ValueError"
    assert record["error"]["message"] == "Test error"
    assert "Traceback" in record["error"]["stack_trace"]


def test_with_context_creates_new_adapter():
    logger = get_logger("test_module", revision_pair="A.java -> B.java")

    child = logger.with_context(phase="delete")

    assert child.extra == {"revision_pair": "A.java -> B.java", "phase": "delete"}
    assert "phase" not in logger.extra


@pytest.mark.parametrize("json_output,handler_formatter", [
    (True, JSONFormatter),
    (False, logging.Formatter),
])
def test_setup_logging(json_output, handler_formatter):
    """Test logging setup installs a single stderr handler."""
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    try:
        setup_logging("DEBUG", json_output=json_output)

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert type(root_logger.handlers[0].formatter) is handler_formatter
    finally:
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)


def test_error_names_failing_node(captured):
    """Test patch errors report the node they failed on."""
    logger, stream = captured
    node = Node("expression_statement")

    try:
        raise DetachedNodeError(node, "delete")
    except DetachedNodeError as e:
        log_error_with_context(logger, "Patch failed", e, phase="delete")

    record = _records(stream)[0]
    assert record["error"]["node"] == f"expression_statement#{node.handle}"
