"""Ingestion endpoint communication with optional gzip bodies."""

import gzip
import io
import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

import requests

from mezmo_exporter.buffers import BufferPool, get_default_pool, reset_buffer
from mezmo_exporter.errors import CompressionError, TransportError

USER_AGENT_PREFIX = "mezmo-otel-exporter"
API_KEY_HEADER = "apikey"
DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True)
class Sent:
    """The HTTP exchange completed; `rejected` is set for status >= 400."""

    status_code: int
    rejected: bool = False


@dataclass(frozen=True)
class Failed:
    """The HTTP exchange itself failed (connection, DNS, TLS, timeout)."""

    error: TransportError


TransportOutcome = Sent | Failed


def user_agent(version: str) -> str:
    return f"{USER_AGENT_PREFIX}/{version}"


def build_headers(user_agent: str, ingest_key: str, compressed: bool) -> dict:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": user_agent,
        API_KEY_HEADER: ingest_key,
    }
    if compressed:
        headers["Content-Encoding"] = "gzip"
    return headers


def gzip_document(document: io.BytesIO, target: io.BytesIO) -> io.BytesIO:
    """Gzip the content of `document` into `target`.

    Args:
        document: Finished JSON document
        target: Scratch buffer receiving the compressed bytes

    Returns:
        `target`, holding only the gzip stream

    Raises:
        CompressionError: If the compressor fails
    """
    reset_buffer(target)
    try:
        with (
            gzip.GzipFile(fileobj=target, mode="wb") as gz,
            document.getbuffer() as view,
        ):
            gz.write(view)
    except (OSError, ValueError, BufferError) as e:
        raise CompressionError(f"failed to compress log data: {e}") from e
    return target


def _log_rejection(
    logger: logging.Logger, url: str, response: requests.Response
) -> None:
    path = urlsplit(url).path
    logger.error(
        "got http status (%s): %s %s",
        path,
        response.status_code,
        response.reason,
        extra={"context": {"url": url, "status_code": response.status_code}},
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "http response",
            extra={"context": {"response": response.text}},
        )


def send_document(
    session: requests.Session,
    document: io.BytesIO,
    *,
    ingest_url: str,
    ingest_key: str,
    user_agent: str,
    compression: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
    pool: BufferPool | None = None,
    logger: logging.Logger | None = None,
) -> TransportOutcome:
    """POST one finished document to the ingestion endpoint.

    A status >= 400 is reported as Sent(rejected=True) and logged; only a
    failed exchange yields Failed.

    Raises:
        CompressionError: If compression is on and gzip fails
    """
    pool = pool or get_default_pool()
    logger = logger or logging.getLogger(__name__)
    headers = build_headers(user_agent, ingest_key, compression)

    if compression:
        with pool.borrow() as scratch:
            body = gzip_document(document, scratch).getvalue()
    else:
        body = document.getvalue()

    try:
        with session.post(
            ingest_url, data=body, headers=headers, timeout=timeout
        ) as response:
            if response.status_code >= 400:
                _log_rejection(logger, ingest_url, response)
                return Sent(status_code=response.status_code, rejected=True)
            return Sent(status_code=response.status_code)
    except requests.RequestException as e:
        # Connection error, DNS failure, TLS, timeout
        error = TransportError(f"failed to POST log to Mezmo: {e}")
        error.__cause__ = e
        return Failed(error=error)
