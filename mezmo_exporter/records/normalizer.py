"""Conversion of pipeline log records into ingestion lines.

Normalization never fails: oversized values are truncated, missing values
fall back to defaults. All truncation happens here on decoded strings, so
the JSON encoder downstream only ever sees whole code points.
"""

import time
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import orjson

from mezmo_exporter.records.data_model import (
    InstrumentationScope,
    LogRecord,
    Logs,
    NormalizedLine,
    Resource,
)

HOSTNAME_ATTRIBUTE = "host.name"
APPNAME_ATTRIBUTE = "appname"
DEFAULT_LEVEL = "info"

MAX_MESSAGE_SIZE = 32 * 1024
MAX_META_DATA_SIZE = 32 * 1024
MAX_APPNAME_LEN = 512
MAX_LOG_LEVEL_LEN = 80


@dataclass(frozen=True)
class TruncationLimits:
    message: int = MAX_MESSAGE_SIZE
    meta_value: int = MAX_META_DATA_SIZE
    app_name: int = MAX_APPNAME_LEN
    level: int = MAX_LOG_LEVEL_LEN


DEFAULT_LIMITS = TruncationLimits()


def truncate_string(value: str, limit: int) -> str:
    """Keep at most `limit` code points of `value`."""
    if len(value) <= limit:
        return value
    return value[:limit]


def as_string(value: Any) -> str:
    """Render an attribute or body value as a string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, (dict, list, tuple)):
        try:
            return orjson.dumps(
                value, default=str, option=orjson.OPT_NON_STR_KEYS
            ).decode()
        except orjson.JSONEncodeError:
            # lone surrogates; repr() escapes them
            return str(value)
    return str(value)


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def _is_empty_id(identifier: bytes) -> bool:
    return not any(identifier)


def build_meta(
    record: LogRecord, resource: Resource, limits: TruncationLimits
) -> dict[str, str]:
    meta = {}
    if HOSTNAME_ATTRIBUTE in resource.attributes:
        meta["hostname"] = truncate_string(
            as_string(resource.attributes[HOSTNAME_ATTRIBUTE]), limits.meta_value
        )
    if not _is_empty_id(record.trace_id):
        meta["trace.id"] = record.trace_id.hex()
    if not _is_empty_id(record.span_id):
        meta["span.id"] = record.span_id.hex()

    # record attributes win over the keys derived above
    for key, value in record.attributes.items():
        meta[key] = truncate_string(as_string(value), limits.meta_value)
    return meta


def normalize_record(
    record: LogRecord,
    resource: Resource,
    scope: InstrumentationScope | None = None,
    limits: TruncationLimits = DEFAULT_LIMITS,
) -> NormalizedLine:
    """Map one record and its resource context to a NormalizedLine.

    Args:
        record: The log record
        resource: Resource the record was emitted under
        scope: Instrumentation scope of the record (not part of the line)
        limits: Field length ceilings

    Returns:
        The wire ready line
    """
    timestamp = record.timestamp // 1_000_000
    if timestamp == 0:
        timestamp = _now_millis()

    level = truncate_string(record.severity_text, limits.level)
    if not level.strip():
        level = DEFAULT_LEVEL

    app = as_string(record.attributes.get(APPNAME_ATTRIBUTE))

    return NormalizedLine(
        timestamp=timestamp,
        line=truncate_string(as_string(record.body), limits.message),
        app=truncate_string(app, limits.app_name),
        level=level,
        meta=build_meta(record, resource, limits),
    )


def iter_lines(
    logs: Logs, limits: TruncationLimits = DEFAULT_LIMITS
) -> Iterator[NormalizedLine]:
    """Yield normalized lines in resource -> scope -> record order."""
    for resource_logs in logs:
        resource = resource_logs.resource
        for scope_logs in resource_logs.scope_logs:
            for record in scope_logs.log_records:
                yield normalize_record(record, resource, scope_logs.scope, limits)
