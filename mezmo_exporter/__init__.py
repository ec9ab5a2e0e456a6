from mezmo_exporter.batching import AssemblyStats
from mezmo_exporter.buffers import BufferPool
from mezmo_exporter.config import ExporterConfig
from mezmo_exporter.errors import (
    CompressionError,
    ConfigError,
    EncodingError,
    ExporterError,
    ExporterNotStartedError,
    LineTooLargeError,
    TransportError,
)
from mezmo_exporter.main import MezmoExporter, create_exporter
from mezmo_exporter.records import (
    InstrumentationScope,
    LogRecord,
    Logs,
    Resource,
    ResourceLogs,
    ScopeLogs,
)
from mezmo_exporter.version import __version__

__all__ = [
    "AssemblyStats",
    "BufferPool",
    "CompressionError",
    "ConfigError",
    "EncodingError",
    "ExporterConfig",
    "ExporterError",
    "ExporterNotStartedError",
    "InstrumentationScope",
    "LineTooLargeError",
    "LogRecord",
    "Logs",
    "MezmoExporter",
    "Resource",
    "ResourceLogs",
    "ScopeLogs",
    "TransportError",
    "__version__",
    "create_exporter",
]
