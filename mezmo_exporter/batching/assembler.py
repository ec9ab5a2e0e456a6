"""Packing of normalized lines into size bounded JSON documents."""

import io
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import orjson

from mezmo_exporter.buffers import BufferPool, get_default_pool, reset_buffer
from mezmo_exporter.errors import EncodingError, LineTooLargeError
from mezmo_exporter.records.data_model import NormalizedLine
from mezmo_exporter.server.ingest import Failed, TransportOutcome

DOCUMENT_OPEN = b'{"lines": ['
DOCUMENT_CLOSE = b"]}"
LINE_SEPARATOR = b","

MAX_BODY_SIZE = 10 * 1024 * 1024


@dataclass
class AssemblyStats:
    """Totals for one push.

    Args:
        documents: Documents sent, including rejected ones
        lines: Lines contained in those documents
        bytes_sent: Uncompressed size of all documents
        rejected: Documents answered with a status >= 400
    """

    documents: int = 0
    lines: int = 0
    bytes_sent: int = 0
    rejected: int = 0


def encode_line(line: NormalizedLine) -> bytes:
    try:
        return orjson.dumps(line)
    except orjson.JSONEncodeError as e:
        raise EncodingError(f"error creating JSON payload: {e}") from e


def _open_document(document: io.BytesIO):
    reset_buffer(document)
    document.write(DOCUMENT_OPEN)


def _close_and_send(
    document: io.BytesIO,
    line_count: int,
    send: Callable[[io.BytesIO], TransportOutcome],
    stats: AssemblyStats,
):
    document.write(DOCUMENT_CLOSE)
    outcome = send(document)
    if isinstance(outcome, Failed):
        raise outcome.error

    stats.documents += 1
    stats.lines += line_count
    stats.bytes_sent += document.tell()
    if outcome.rejected:
        stats.rejected += 1


def push_lines(
    lines: Iterable[NormalizedLine],
    send: Callable[[io.BytesIO], TransportOutcome],
    *,
    max_body_size: int = MAX_BODY_SIZE,
    pool: BufferPool | None = None,
) -> AssemblyStats:
    """Encode lines into `{"lines": [...]}` documents and send each one.

    A document is closed and sent before appending a line would take it to
    `max_body_size` or beyond. The last document is always sent, even when
    it holds no lines. Documents are sent in order, one at a time.

    Args:
        lines: Normalized lines in output order
        send: Called with each finished document
        max_body_size: Exclusive ceiling on the size of a document in bytes
        pool: Pool the document buffer is borrowed from

    Returns:
        AssemblyStats for the documents that were sent

    Raises:
        EncodingError: A line could not be encoded or can never fit
        CompressionError, TransportError: Sending a document failed
    """
    pool = pool or get_default_pool()
    stats = AssemblyStats()
    limit = max_body_size - len(DOCUMENT_CLOSE)

    with pool.borrow() as document:
        _open_document(document)
        pending = 0

        for line in lines:
            encoded = encode_line(line)
            if len(DOCUMENT_OPEN) + len(encoded) >= limit:
                raise LineTooLargeError(
                    len(DOCUMENT_OPEN) + len(encoded) + len(DOCUMENT_CLOSE),
                    max_body_size,
                )

            separator = len(LINE_SEPARATOR) if pending else 0
            if document.tell() + separator + len(encoded) >= limit:
                _close_and_send(document, pending, send, stats)
                _open_document(document)
                pending = 0

            if pending:
                document.write(LINE_SEPARATOR)
            document.write(encoded)
            pending += 1

        _close_and_send(document, pending, send, stats)

    return stats
