from mezmo_exporter.records.data_model import (
    InstrumentationScope,
    LogRecord,
    Logs,
    NormalizedLine,
    Resource,
    ResourceLogs,
    ScopeLogs,
)
from mezmo_exporter.records.normalizer import (
    TruncationLimits,
    iter_lines,
    normalize_record,
    truncate_string,
)

__all__ = [
    "InstrumentationScope",
    "LogRecord",
    "Logs",
    "NormalizedLine",
    "Resource",
    "ResourceLogs",
    "ScopeLogs",
    "TruncationLimits",
    "iter_lines",
    "normalize_record",
    "truncate_string",
]
