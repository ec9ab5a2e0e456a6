import functools
import itertools
from pathlib import Path

import requests
from dotenv import load_dotenv
from requests.adapters import HTTPAdapter

from mezmo_exporter.batching import AssemblyStats, push_lines
from mezmo_exporter.buffers import BufferPool, get_default_pool
from mezmo_exporter.config import ExporterConfig, ResolvedConfig
from mezmo_exporter.errors import ExporterError, ExporterNotStartedError
from mezmo_exporter.logger import Handler, get_logger
from mezmo_exporter.records import Logs, iter_lines
from mezmo_exporter.server import send_document, user_agent
from mezmo_exporter.utils.inflight import InFlightTracker
from mezmo_exporter.version import __version__

load_dotenv()

_EXPORTER_IDS = itertools.count(1)


class MezmoExporter:
    """Ships batches of log records to the Mezmo ingestion endpoint.

    Lifecycle is start() -> push() any number of times, possibly from
    several threads -> stop(). Each push blocks until all of its documents
    have been sent or the first failure is raised.
    """

    def __init__(
        self,
        config: ExporterConfig,
        *,
        session: requests.Session | None = None,
        pool: BufferPool | None = None,
        handlers: list[Handler] | None = None,
        build_version: str | None = None,
    ):
        self.config = config
        self.pool = pool or get_default_pool()
        self.user_agent = user_agent(build_version or __version__)
        self._handlers = handlers
        self._logger_name = f"mezmo_exporter.exporter.{next(_EXPORTER_IDS)}"
        self.logger = get_logger(handlers, config.log_level, self._logger_name)
        self._injected_session = session
        self._session = None
        self._in_flight = InFlightTracker()

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=self.config.pool_connections,
            pool_maxsize=self.config.pool_maxsize,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @property
    def started(self) -> bool:
        return self._session is not None

    def start(self):
        """Acquire the HTTP session used by every push."""
        if self._session is not None:
            return
        self.logger = get_logger(
            self._handlers, self.config.log_level, self._logger_name
        )
        self._session = self._injected_session or self._build_session()
        self.logger.debug(
            "Exporter started",
            extra={"context": {"ingest_url": self.config.ingest_url}},
        )

    def stop(self, timeout: float | None = None):
        """Stop accepting pushes, wait for in-flight ones, then release resources.

        An owned session is closed. An injected session stays usable but its
        idle connections are dropped. If `timeout` expires first, nothing is
        released: the session and log handlers are left to the pushes still
        running.

        Args:
            timeout: Max seconds to wait for in-flight pushes, None waits forever
        """
        if self._session is None:
            return
        session, self._session = self._session, None
        if not self._in_flight.wait(timeout):
            self.logger.warning(
                "Stop timed out, leaving resources to in-flight pushes",
                extra={"context": {"in_flight": self._in_flight.count}},
            )
            return
        self._release_session(session)
        self._detach_handlers()

    def _release_session(self, session: requests.Session):
        if session is self._injected_session:
            for adapter in session.adapters.values():
                adapter.close()
        else:
            session.close()

    def _detach_handlers(self):
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)

    def push(self, logs: Logs | list) -> AssemblyStats:
        """Normalize, batch and send `logs`.

        Args:
            logs: Records grouped by resource and scope

        Returns:
            AssemblyStats of the documents sent

        Raises:
            ExporterNotStartedError: If start() was not called
            EncodingError: A line could not be serialized
            CompressionError: A document could not be gzipped
            TransportError: The endpoint could not be reached
        """
        if not isinstance(logs, Logs):
            logs = Logs(logs)

        with self._in_flight:
            session = self._session
            if session is None:
                raise ExporterNotStartedError("exporter is not started")

            send = functools.partial(
                send_document,
                session,
                ingest_url=self.config.ingest_url,
                ingest_key=self.config.ingest_key.get_secret_value(),
                user_agent=self.user_agent,
                compression=self.config.compression,
                timeout=self.config.timeout,
                pool=self.pool,
                logger=self.logger,
            )
            try:
                stats = push_lines(
                    iter_lines(logs, self.config.truncation_limits),
                    send,
                    max_body_size=self.config.max_body_size,
                    pool=self.pool,
                )
            except ExporterError as e:
                self.logger.warning(
                    "Push failed",
                    extra={
                        "context": {
                            "error": str(e),
                            "error_type": type(e).__name__,
                            "records": logs.record_count(),
                        }
                    },
                )
                raise

        self.logger.debug(
            "Push complete",
            extra={
                "context": {
                    "documents": stats.documents,
                    "lines": stats.lines,
                    "bytes": stats.bytes_sent,
                    "rejected": stats.rejected,
                }
            },
        )
        return stats


def create_exporter(
    config_dir: Path | str = ".mezmo",
    *,
    session: requests.Session | None = None,
    pool: BufferPool | None = None,
    handlers: list[Handler] | None = None,
    **overrides,
) -> MezmoExporter:
    """Build an exporter from config.yml, environment and `overrides`.

    Raises:
        ConfigError: If the resolved configuration is invalid
    """
    config = ResolvedConfig(Path(config_dir).absolute(), **overrides).get()
    return MezmoExporter(config, session=session, pool=pool, handlers=handlers)
