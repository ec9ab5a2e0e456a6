import logging
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, SecretStr, field_validator

from mezmo_exporter.records.normalizer import TruncationLimits


class ExporterConfig(BaseModel, frozen=True):
    """Validated exporter settings."""

    ingest_url: str
    ingest_key: SecretStr
    compression: bool = False
    timeout: float = Field(default=5.0, gt=0)
    pool_connections: int = Field(default=10, gt=0)
    pool_maxsize: int = Field(default=10, gt=0)
    max_body_size: int = Field(default=10 * 1024 * 1024, ge=64)
    max_message_size: int = Field(default=32 * 1024, gt=0)
    max_meta_data_size: int = Field(default=32 * 1024, gt=0)
    max_appname_len: int = Field(default=512, gt=0)
    max_log_level_len: int = Field(default=80, gt=0)
    log_level: int = logging.INFO

    @field_validator("ingest_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlsplit(value)
        if parsed.scheme not in ("http", "https"):
            raise ValueError('"ingest_url" must be a valid http(s) URL')
        if not parsed.hostname:
            raise ValueError('"ingest_url" must contain a valid host')
        return value

    @field_validator("ingest_key")
    @classmethod
    def _check_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError('"ingest_key" must not be empty')
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value):
        if isinstance(value, str):
            if value.upper() not in logging._nameToLevel:
                raise ValueError(f"unknown log level {value!r}")
            return logging._nameToLevel[value.upper()]
        return value

    @property
    def truncation_limits(self) -> TruncationLimits:
        return TruncationLimits(
            message=self.max_message_size,
            meta_value=self.max_meta_data_size,
            app_name=self.max_appname_len,
            level=self.max_log_level_len,
        )
