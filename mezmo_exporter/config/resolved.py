from pathlib import Path

from pydantic import ValidationError

from mezmo_exporter.config.builder import ConfigBuilder
from mezmo_exporter.config.data_model import ExporterConfig
from mezmo_exporter.errors import ConfigError


class ResolvedConfig:
    """Config file values, then environment, then defaults; overrides win."""

    def __init__(self, config_dir: Path, **overrides):
        self.config_dir = config_dir
        self.overrides = overrides

    def _apply_overrides(self, cfg: dict):
        for k, v in self.overrides.items():
            if k not in cfg:
                raise ConfigError(f"unknown config option {k!r}")
            if v is not None:
                cfg[k] = v
        return cfg

    def get(self) -> ExporterConfig:
        cfg = self._apply_overrides(ConfigBuilder(self.config_dir).build())
        try:
            return ExporterConfig(**cfg)
        except ValidationError as e:
            raise ConfigError(f"invalid exporter configuration: {e}") from e
