"""Prometheus exporter for OpenSIPS statistics.

This package translates the flat ``<subsystem>:<name>`` statistics reported
by OpenSIPS into typed, labelled Prometheus metrics.

Example:
    >>> from prometheus_client import CollectorRegistry, generate_latest
    >>> from opensips_exporter import ExporterConfig, create_collector
    >>> from opensips_exporter.statistics import snapshot_from_values
    >>>
    >>> def fetch():
    ...     return snapshot_from_values({"core:rcv_requests": 10})
    >>>
    >>> registry = CollectorRegistry()
    >>> registry.register(create_collector(ExporterConfig(), fetch))
    >>> b"opensips_core_received_requests_total 10.0" in generate_latest(registry)
    True
"""

from opensips_exporter.collector import OpenSIPSCollector, StatisticsSource
from opensips_exporter.config import ExporterConfig, LoggingConfig
from opensips_exporter.processors import default_registry
from opensips_exporter.statistics import Statistic, snapshot_from_values

__version__ = "0.1.0"


def create_collector(config: ExporterConfig, source: StatisticsSource) -> OpenSIPSCollector:
    """Validate ``config`` and build a collector over every known subsystem.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    config.validate()
    return OpenSIPSCollector(
        default_registry(config.namespace),
        source,
        log_unknown_statistics=config.log_unknown_statistics,
    )


__all__ = [
    "ExporterConfig",
    "LoggingConfig",
    "OpenSIPSCollector",
    "Statistic",
    "create_collector",
    "snapshot_from_values",
]
