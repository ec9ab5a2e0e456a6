"""JSON formatter for the exporter's own diagnostics.

Example output:
    {
        "timestamp": "2025-09-20T08:15:30.123456+00:00",
        "logger": "mezmo_exporter.140234",
        "function_name": "_log_rejection",
        "line_number": 71,
        "level": "ERROR",
        "message": "got http status (/otel/ingest/rest): 500 Internal Server Error",
        "context": {
            "url": "https://logs.mezmo.com/otel/ingest/rest",
            "status_code": 500
        }
    }
"""

import datetime
import logging

import orjson


class JsonFormatter(logging.Formatter):
    """Format log records as single line JSON objects.

    Structured fields are passed with `extra={"context": {...}}` and end
    up under the "context" key. Exception tracebacks, when present, are
    added as "exception".
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.datetime.fromtimestamp(
            record.created, datetime.UTC
        ).isoformat()
        entry = {
            "timestamp": timestamp,
            "logger": record.name,
            "function_name": record.funcName,
            "line_number": record.lineno,
            "level": record.levelname,
            "message": record.getMessage(),
            "context": getattr(record, "context", {}),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode()
