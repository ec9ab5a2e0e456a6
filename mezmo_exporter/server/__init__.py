from mezmo_exporter.server.ingest import (
    Failed,
    Sent,
    TransportOutcome,
    build_headers,
    gzip_document,
    send_document,
    user_agent,
)

__all__ = [
    "Failed",
    "Sent",
    "TransportOutcome",
    "build_headers",
    "gzip_document",
    "send_document",
    "user_agent",
]
