"""Logging setup for the exporter."""

from opensips_exporter.logging.manager import LoggerManager, get_logger
from opensips_exporter.logging.structured import StructuredFormatter, TextFormatter

__all__ = ["LoggerManager", "StructuredFormatter", "TextFormatter", "get_logger"]
