"""Tests for the transport sender."""

import gzip
import io
import logging
from unittest import mock

import pytest
import requests

from mezmo_exporter.buffers import BufferPool
from mezmo_exporter.errors import CompressionError, TransportError
from mezmo_exporter.server import (
    Failed,
    Sent,
    build_headers,
    gzip_document,
    send_document,
    user_agent,
)

DOCUMENT = b'{"lines": [{"timestamp":1,"line":"hi","app":"","level":"info","meta":{}}]}'
LOGGER_NAME = "tests.ingest"


def _document(content: bytes = DOCUMENT) -> io.BytesIO:
    buffer = io.BytesIO()
    buffer.write(content)
    return buffer


def _records(caplog, level):
    return [
        r for r in caplog.records if r.name == LOGGER_NAME and r.levelno == level
    ]


def _send(session, url, **kwargs):
    options = {
        "ingest_url": url,
        "ingest_key": "secret-key",
        "user_agent": user_agent("1.2.3"),
        "pool": BufferPool(),
        "logger": logging.getLogger(LOGGER_NAME),
    }
    options.update(kwargs)
    return send_document(session, _document(), **options)


def _mock_session(status_code=500, reason="Internal Server Error", text=""):
    response = mock.MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.text = text
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    session = mock.MagicMock()
    session.post.return_value = response
    return session, response


class TestHeaders:
    def test_plain_headers(self):
        headers = build_headers("mezmo-otel-exporter/1.0", "key", compressed=False)

        assert headers == {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "mezmo-otel-exporter/1.0",
            "apikey": "key",
        }

    def test_gzip_header(self):
        headers = build_headers("ua", "key", compressed=True)
        assert headers["Content-Encoding"] == "gzip"

    def test_user_agent_carries_version(self):
        assert user_agent("0.9.1") == "mezmo-otel-exporter/0.9.1"


class TestGzipDocument:
    def test_round_trip(self):
        target = io.BytesIO()
        target.write(b"stale bytes from an earlier use")

        gzip_document(_document(), target)

        assert gzip.decompress(target.getvalue()) == DOCUMENT

    def test_compressor_failure_raises(self):
        with mock.patch("gzip.GzipFile", side_effect=OSError("no space")):
            with pytest.raises(CompressionError):
                gzip_document(_document(), io.BytesIO())


class TestSendDocument:
    def test_posts_document_with_headers(self, ingest_server):
        outcome = _send(requests.Session(), ingest_server.url)

        assert outcome == Sent(status_code=200)
        [request] = ingest_server.received
        assert request.path == "/otel/ingest/rest"
        assert request.body == DOCUMENT
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["User-Agent"] == "mezmo-otel-exporter/1.2.3"
        assert request.headers["apikey"] == "secret-key"
        assert request.headers.get("Content-Encoding") is None

    def test_compressed_body(self, ingest_server):
        outcome = _send(requests.Session(), ingest_server.url, compression=True)

        assert outcome == Sent(status_code=200)
        [request] = ingest_server.received
        assert request.headers["Content-Encoding"] == "gzip"
        assert gzip.decompress(request.body) == DOCUMENT

    def test_rejection_is_logged_not_failed(self, ingest_server, caplog):
        ingest_server.response = (500, b'{"error": "boom"}')
        caplog.set_level(logging.INFO, logger=LOGGER_NAME)

        outcome = _send(requests.Session(), ingest_server.url)

        assert outcome == Sent(status_code=500, rejected=True)
        errors = _records(caplog, logging.ERROR)
        assert len(errors) == 1
        assert "/otel/ingest/rest" in errors[0].getMessage()
        assert "500" in errors[0].getMessage()
        assert _records(caplog, logging.DEBUG) == []

    def test_rejection_body_logged_at_debug(self, ingest_server, caplog):
        ingest_server.response = (400, b'{"error": "bad key"}')
        caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

        _send(requests.Session(), ingest_server.url)

        [debug] = _records(caplog, logging.DEBUG)
        assert debug.context == {"response": '{"error": "bad key"}'}

    def test_success_logs_nothing(self, ingest_server, caplog):
        caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

        _send(requests.Session(), ingest_server.url)

        assert [r for r in caplog.records if r.name == LOGGER_NAME] == []

    def test_connection_failure(self, closed_port_url):
        outcome = _send(requests.Session(), closed_port_url)

        assert isinstance(outcome, Failed)
        assert isinstance(outcome.error, TransportError)
        assert isinstance(outcome.error.__cause__, requests.ConnectionError)

    def test_timeout_is_a_failure(self):
        session = mock.MagicMock()
        session.post.side_effect = requests.Timeout("read timed out")

        outcome = _send(session, "https://logs.example.com/ingest", timeout=0.5)

        assert isinstance(outcome, Failed)
        assert session.post.call_args.kwargs["timeout"] == 0.5

    def test_response_closed_on_rejection(self):
        session, response = _mock_session(status_code=503, text="unavailable")

        outcome = _send(session, "https://logs.example.com/ingest")

        assert outcome.rejected
        response.__exit__.assert_called_once()

    def test_compression_failure_raises_before_sending(self):
        session, _ = _mock_session(status_code=200)

        with mock.patch("gzip.GzipFile", side_effect=OSError("broken")):
            with pytest.raises(CompressionError):
                _send(session, "https://logs.example.com/ingest", compression=True)

        session.post.assert_not_called()
