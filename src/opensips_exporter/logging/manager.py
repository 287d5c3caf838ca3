"""Logger manager for the exporter.

Configures the ``opensips_exporter`` logger hierarchy from a
:class:`LoggingConfig`; module loggers created with
``logging.getLogger(__name__)`` inherit its handler and level.
"""

import logging
import sys
from typing import Optional

from opensips_exporter.config import LoggingConfig
from opensips_exporter.logging.structured import StructuredFormatter, TextFormatter

ROOT_LOGGER_NAME = "opensips_exporter"


class LoggerManager:
    """Manager for the exporter's root logger.

    Example:
        >>> manager = LoggerManager(LoggingConfig(level="DEBUG", format="json"))
        >>> manager.configure()
        >>> get_logger("collector").debug("Scrape started")
        >>> manager.shutdown()
    """

    def __init__(self, config: LoggingConfig) -> None:
        self.config = config
        self._handler: Optional[logging.Handler] = None
        self._formatter: Optional[logging.Formatter] = None
        self._configured = False

    def configure(self) -> None:
        """Attach a handler with the configured format and level.

        Calling it again has no effect until :meth:`shutdown`.
        """
        if self._configured:
            return

        if self.config.format == "json":
            self._formatter = StructuredFormatter()
        else:
            self._formatter = TextFormatter()

        if self.config.output_file:
            self._handler = logging.FileHandler(self.config.output_file)
        else:
            self._handler = logging.StreamHandler(sys.stderr)
        self._handler.setFormatter(self._formatter)

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(self._parse_level(self.config.level))
        root_logger.addHandler(self._handler)
        # Keep records out of Python's root logger
        root_logger.propagate = False

        self._configured = True

    def shutdown(self) -> None:
        """Remove the handler installed by :meth:`configure`."""
        if not self._configured:
            return

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        if self._handler:
            root_logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None
        root_logger.setLevel(logging.NOTSET)
        root_logger.propagate = True

        self._configured = False

    def set_level(self, level: str) -> None:
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(self._parse_level(level))

    @property
    def is_configured(self) -> bool:
        return self._configured

    def _parse_level(self, level: str) -> int:
        return getattr(logging, level.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the ``opensips_exporter`` hierarchy.

    Example:
        >>> get_logger("cli").name
        'opensips_exporter.cli'
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
