"""Tests for logging configuration."""

import io
import json
import logging

import pytest
import structlog

from mcp_boilerplate.log import configure_logging, get_logger


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_logs_go_to_configured_stream(restore_logging):
    """Test JSON rendering and the side-channel stream."""
    stream = io.StringIO()
    configure_logging("debug", json_logs=True, stream=stream)

    get_logger("tests.log").info("hello", answer=42)

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["event"] == "hello"
    assert record["answer"] == 42
    assert record["level"] == "info"
    assert record["logger"] == "tests.log"
    assert "timestamp" in record


def test_level_filtering(restore_logging):
    """Test entries below the configured level are dropped."""
    stream = io.StringIO()
    configure_logging("warning", json_logs=True, stream=stream)

    logger = get_logger("tests.log")
    logger.info("quiet")
    logger.warning("loud")

    output = stream.getvalue()
    assert "quiet" not in output
    assert "loud" in output


def test_console_renderer(restore_logging):
    """Test the development renderer writes plain text."""
    stream = io.StringIO()
    configure_logging("info", stream=stream)

    get_logger("tests.log").info("console line")

    assert "console line" in stream.getvalue()


def test_defaults_to_stderr(restore_logging, capsys):
    """Test stdout stays clean for stdio framing."""
    configure_logging("info", json_logs=True)

    get_logger("tests.log").info("side channel")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "side channel" in captured.err
