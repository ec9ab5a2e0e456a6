from mezmo_exporter.config.builder import DEFAULT_INGEST_URL, ConfigBuilder
from mezmo_exporter.config.data_model import ExporterConfig
from mezmo_exporter.config.resolved import ResolvedConfig

__all__ = ["DEFAULT_INGEST_URL", "ConfigBuilder", "ExporterConfig", "ResolvedConfig"]
