"""Tests for the exporter's diagnostic logger."""

import io
import json
import logging
import sys

from mezmo_exporter.logger import Handler, JsonFormatter, get_logger


def test_json_formatter_fields():
    record = logging.LogRecord(
        "mezmo_exporter.test", logging.ERROR, __file__, 10, "got %s", ("500",), None
    )
    record.context = {"status_code": 500}

    entry = json.loads(JsonFormatter().format(record))

    assert entry["level"] == "ERROR"
    assert entry["message"] == "got 500"
    assert entry["logger"] == "mezmo_exporter.test"
    assert entry["context"] == {"status_code": 500}
    assert "exception" not in entry


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        exc_info = sys.exc_info()
    record = logging.LogRecord(
        "mezmo_exporter.test", logging.ERROR, __file__, 10, "failed", (), exc_info
    )

    entry = json.loads(JsonFormatter().format(record))

    assert entry["context"] == {}
    assert "ValueError: bad" in entry["exception"]


def test_get_logger_with_custom_handler():
    stream = io.StringIO()
    logger = get_logger(
        [Handler(handler=logging.StreamHandler(stream))],
        logging.WARNING,
        "mezmo_exporter.test.custom",
    )

    logger.info("dropped")
    logger.warning("kept", extra={"context": {"k": "v"}})

    [line] = stream.getvalue().splitlines()
    assert json.loads(line)["message"] == "kept"
    assert logger.propagate is False


def test_get_logger_reuses_configured_logger():
    name = "mezmo_exporter.test.reuse"
    first = get_logger(None, logging.INFO, name)
    second = get_logger(None, logging.DEBUG, name)

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.INFO
