from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, RootModel, field_validator

TRACE_ID_SIZE = 16
SPAN_ID_SIZE = 8


def _identifier(value: Any, size: int) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        value = bytes.fromhex(value)
    value = bytes(value)
    if value and len(value) != size:
        raise ValueError(f"identifier must be {size} bytes, got {len(value)}")
    return value


# Input Models
class Resource(BaseModel, frozen=True):
    attributes: dict[str, Any] = {}


class InstrumentationScope(BaseModel, frozen=True):
    name: str = ""
    version: str = ""


class LogRecord(BaseModel, frozen=True):
    """One structured log entry as handed over by the pipeline.

    Args:
        timestamp: Unix time in nanoseconds, 0 when unset
        severity_text: Free-form severity, e.g. "WARN"
        body: The log message, usually a string
        trace_id: 16 raw bytes or a 32 char hex string, empty when unset
        span_id: 8 raw bytes or a 16 char hex string, empty when unset
        attributes: Record level key/value pairs
    """

    timestamp: int = 0
    severity_text: str = ""
    body: Any = None
    trace_id: bytes = b""
    span_id: bytes = b""
    attributes: dict[str, Any] = {}

    @field_validator("trace_id", mode="before")
    @classmethod
    def _parse_trace_id(cls, value):
        return _identifier(value, TRACE_ID_SIZE)

    @field_validator("span_id", mode="before")
    @classmethod
    def _parse_span_id(cls, value):
        return _identifier(value, SPAN_ID_SIZE)


class ScopeLogs(BaseModel, frozen=True):
    scope: InstrumentationScope = InstrumentationScope()
    log_records: tuple[LogRecord, ...] = ()


class ResourceLogs(BaseModel, frozen=True):
    resource: Resource = Resource()
    scope_logs: tuple[ScopeLogs, ...] = ()


class Logs(RootModel[list[ResourceLogs]]):
    root: list[ResourceLogs] = []

    def __iter__(self):
        return iter(self.root)

    def __bool__(self):
        return len(self.root) > 0

    def record_count(self) -> int:
        return sum(
            len(scope_logs.log_records)
            for resource_logs in self.root
            for scope_logs in resource_logs.scope_logs
        )


# Wire Models
@dataclass
class NormalizedLine:
    """A log line in the shape accepted by the ingestion API.

    Field order is the JSON field order on the wire.
    """

    timestamp: int
    line: str
    app: str
    level: str
    meta: dict[str, str] = field(default_factory=dict)
