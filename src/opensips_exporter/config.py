"""Exporter configuration module.

Configuration is read from a YAML file, from environment variables with
the ``OPENSIPS_EXPORTER_`` prefix, or built programmatically.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from opensips_exporter.exceptions import ConfigurationError
from opensips_exporter.processors.metric import DEFAULT_NAMESPACE

ENV_PREFIX = "OPENSIPS_EXPORTER_"

NAMESPACE_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS = ("json", "text")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name, default)


def _env_flag(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


@dataclass
class LoggingConfig:
    """Configuration for exporter logging."""

    level: str = "INFO"
    format: str = "text"  # or "json"
    output_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        return cls(
            level=_env("LOG_LEVEL", "INFO").upper(),
            format=_env("LOG_FORMAT", "text").lower(),
            output_file=_env("LOG_FILE"),
        )


@dataclass
class ExporterConfig:
    """Configuration of the OpenSIPS exporter.

    Example:
        >>> config = ExporterConfig.from_env()
        >>> config = ExporterConfig(
        ...     namespace="sip",
        ...     log_unknown_statistics=True,
        ...     logging=LoggingConfig(level="DEBUG", format="json"),
        ... )
        >>> config.validate()
    """

    namespace: str = DEFAULT_NAMESPACE
    log_unknown_statistics: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "ExporterConfig":
        """Create configuration from environment variables.

        Environment Variables:
            OPENSIPS_EXPORTER_NAMESPACE: Metric name prefix (default: opensips)
            OPENSIPS_EXPORTER_LOG_UNKNOWN: Log statistics without a metric (default: false)
            OPENSIPS_EXPORTER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
            OPENSIPS_EXPORTER_LOG_FORMAT: json or text (default: text)
            OPENSIPS_EXPORTER_LOG_FILE: Log file path (optional, defaults to stderr)
        """
        return cls(
            namespace=_env("NAMESPACE", DEFAULT_NAMESPACE),
            log_unknown_statistics=_env_flag("LOG_UNKNOWN", False),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExporterConfig":
        """Create configuration from a parsed configuration mapping."""
        logging_data = data.get("logging") or {}
        if not isinstance(logging_data, dict):
            raise ConfigurationError("'logging' must be a mapping")
        return cls(
            namespace=str(data.get("namespace", DEFAULT_NAMESPACE)),
            log_unknown_statistics=bool(data.get("log_unknown_statistics", False)),
            logging=LoggingConfig(
                level=str(logging_data.get("level", "INFO")).upper(),
                format=str(logging_data.get("format", "text")).lower(),
                output_file=logging_data.get("output_file"),
            ),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ExporterConfig":
        """Load configuration from a YAML file, then apply environment overrides.

        Configuration file format::

            namespace: opensips
            log_unknown_statistics: false
            logging:
              level: INFO
              format: text

        Raises:
            ConfigurationError: If the file cannot be read or is not a
                YAML mapping.
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except IOError as e:
            raise ConfigurationError(f"Failed to read config file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        config = cls.from_dict(data)
        config.apply_env_overrides()
        return config

    def apply_env_overrides(self) -> None:
        """Override values with any ``OPENSIPS_EXPORTER_*`` variables that are set."""
        self.namespace = _env("NAMESPACE", self.namespace)
        self.log_unknown_statistics = _env_flag("LOG_UNKNOWN", self.log_unknown_statistics)
        self.logging.level = _env("LOG_LEVEL", self.logging.level).upper()
        self.logging.format = _env("LOG_FORMAT", self.logging.format).lower()
        self.logging.output_file = _env("LOG_FILE", self.logging.output_file)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid.
        """
        if not NAMESPACE_PATTERN.match(self.namespace):
            raise ConfigurationError(f"Invalid metric namespace: {self.namespace!r}")

        if self.logging.level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.logging.level}. Must be one of {VALID_LOG_LEVELS}"
            )
        if self.logging.format not in VALID_LOG_FORMATS:
            raise ConfigurationError(
                f"Invalid log format: {self.logging.format}. Must be 'json' or 'text'"
            )
