"""Shared fixtures: a local ingestion endpoint and record factories."""

import gzip
import json
import logging.handlers
import socket
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from mezmo_exporter.logger import Handler
from mezmo_exporter.records import (
    LogRecord,
    Logs,
    Resource,
    ResourceLogs,
    ScopeLogs,
)

INGEST_PATH = "/otel/ingest/rest"


@dataclass
class ReceivedRequest:
    path: str
    headers: object
    body: bytes

    def document(self) -> bytes:
        if self.headers.get("Content-Encoding") == "gzip":
            return gzip.decompress(self.body)
        return self.body

    def json(self) -> dict:
        return json.loads(self.document())


class _IngestHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        self.server.received.append(ReceivedRequest(self.path, self.headers, body))

        status, payload = self.server.response
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def ingest_server():
    """Local HTTP endpoint recording every POST it receives.

    Set `ingest_server.response = (status, body)` to change the reply.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _IngestHandler)
    server.received = []
    server.response = (200, b'{"status": "ok"}')
    server.url = f"http://127.0.0.1:{server.server_address[1]}{INGEST_PATH}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def closed_port_url():
    """URL on a local port nothing is listening on."""
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}{INGEST_PATH}"


@pytest.fixture
def log_capture():
    """Handler list for MezmoExporter plus the records it captures."""
    buffer = logging.handlers.BufferingHandler(capacity=10_000)
    yield [Handler(handler=buffer)], buffer.buffer
    buffer.close()


def make_record(i: int = 0, **kwargs) -> LogRecord:
    fields = {
        "timestamp": 1_700_000_000_000_000_000 + i * 1_000_000,
        "severity_text": "INFO",
        "body": f"message {i}",
    }
    fields.update(kwargs)
    return LogRecord(**fields)


def make_logs(*groups) -> Logs:
    """Build Logs from (resource_attributes, [records]) pairs, one scope each."""
    return Logs(
        [
            ResourceLogs(
                resource=Resource(attributes=attributes),
                scope_logs=(ScopeLogs(log_records=tuple(records)),),
            )
            for attributes, records in groups
        ]
    )
