import os
from pathlib import Path

from mezmo_exporter.utils.files import load_from_yaml

DEFAULT_INGEST_URL = "https://logs.mezmo.com/otel/ingest/rest"


class ConfigBuilder:
    def __init__(self, config_dir: Path):
        self.config_dir = config_dir
        self.config_yaml = {}

        self.mapping = {
            "ingest_url": {
                "config": "ingest.url",
                "env": "MEZMO_INGEST_URL",
                "default": DEFAULT_INGEST_URL,
            },
            "ingest_key": {
                "config": "ingest.key",
                "env": "MEZMO_INGEST_KEY",
                "default": None,
            },
            "compression": {
                "config": "ingest.compression",
                "env": "MEZMO_COMPRESSION",
                "default": False,
            },
            "timeout": {
                "config": "http.timeout",
                "env": "MEZMO_TIMEOUT",
                "default": 5.0,
            },
            "pool_connections": {
                "config": "http.pool_connections",
                "default": 10,
            },
            "pool_maxsize": {
                "config": "http.pool_maxsize",
                "default": 10,
            },
            "max_body_size": {
                "config": "limits.body_size",
                "env": "MEZMO_MAX_BODY_SIZE",
                "default": 10 * 1024 * 1024,
            },
            "max_message_size": {
                "config": "limits.message_size",
                "default": 32 * 1024,
            },
            "max_meta_data_size": {
                "config": "limits.meta_data_size",
                "default": 32 * 1024,
            },
            "max_appname_len": {
                "config": "limits.appname_len",
                "default": 512,
            },
            "max_log_level_len": {
                "config": "limits.log_level_len",
                "default": 80,
            },
            "log_level": {
                "config": "log.level",
                "env": "MEZMO_LOG_LEVEL",
                "default": "INFO",
            },
        }

        self._load_yaml()

    def _load_yaml(self):
        for name in ("config.yml", "config.yaml"):
            p = Path(self.config_dir) / name
            if p.exists():
                self.config_yaml = load_from_yaml(p) or {}
                return
        self.config_yaml = {}

    def _from_yaml(self, path: str):
        cur = self.config_yaml
        for part in path.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return None
            cur = cur[part]
        return cur

    def _resolve(self, option: dict):
        if option.get("config"):
            val = self._from_yaml(option["config"])
            if val is not None:
                return val

        if option.get("env"):
            val = os.getenv(option["env"])
            if val is not None:
                return val

        return option.get("default")

    def build(self) -> dict:
        return {k: self._resolve(option) for k, option in self.mapping.items()}
