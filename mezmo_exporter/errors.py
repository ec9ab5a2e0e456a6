"""Exception hierarchy for the Mezmo exporter."""


class ExporterError(Exception):
    """Base class for every error raised by the exporter."""


class ConfigError(ExporterError):
    """Configuration could not be resolved or failed validation."""


class ExporterNotStartedError(ExporterError):
    """push() was called before start() or after stop()."""


class EncodingError(ExporterError):
    """A normalized line could not be serialized to JSON."""


class LineTooLargeError(EncodingError):
    """A single line does not fit in a document of the configured size."""

    def __init__(self, line_size: int, max_body_size: int):
        self.line_size = line_size
        self.max_body_size = max_body_size
        super().__init__(
            f"encoded line of {line_size} bytes cannot fit in a body "
            f"limited to {max_body_size} bytes"
        )


class CompressionError(ExporterError):
    """Gzip compression of a finished document failed."""


class TransportError(ExporterError):
    """The HTTP exchange with the ingestion endpoint failed."""
