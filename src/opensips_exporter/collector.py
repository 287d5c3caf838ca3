"""Prometheus collector driving the statistics processors.

:class:`OpenSIPSCollector` is registered on a ``prometheus_client``
``CollectorRegistry``. On every scrape it asks its statistics source for a
fresh snapshot, resolves one processor per subsystem through the
:class:`ProcessorRegistry` and forwards the metric families they produce.
"""

import logging
from typing import Callable, Iterator, List

from opensips_exporter.processors.metric import MetricFamily
from opensips_exporter.processors.processor import Processor
from opensips_exporter.processors.registry import ProcessorRegistry
from opensips_exporter.statistics import Snapshot

logger = logging.getLogger(__name__)

StatisticsSource = Callable[[], Snapshot]


class OpenSIPSCollector:
    """Custom collector exposing OpenSIPS statistics.

    Example:
        >>> from prometheus_client import CollectorRegistry, generate_latest
        >>> from opensips_exporter.processors import default_registry
        >>>
        >>> registry = CollectorRegistry()
        >>> registry.register(OpenSIPSCollector(default_registry(), fetch_statistics))
        >>> print(generate_latest(registry).decode())
    """

    def __init__(
        self,
        processors: ProcessorRegistry,
        source: StatisticsSource,
        log_unknown_statistics: bool = False,
    ) -> None:
        """Initialize the collector.

        Args:
            processors: Sealed processor registry.
            source: Callable returning the statistics snapshot for a scrape.
                Errors raised by it propagate to the scrape.
            log_unknown_statistics: Log statistics that no catalog exports
                at DEBUG level instead of dropping them silently.
        """
        self.processors = processors
        self.source = source
        self.log_unknown_statistics = log_unknown_statistics

    def describe(self) -> Iterator[MetricFamily]:
        """Yield the complete, data-independent set of metric families."""
        for processor in self.processors.processors():
            yield from processor.describe()

    def collect(self) -> Iterator[MetricFamily]:
        """Fetch a snapshot and yield the metric families built from it."""
        snapshot = self.source()
        processors = self.resolve(snapshot)
        logger.debug(
            f"Collecting {len(snapshot)} statistics with {len(processors)} processor(s)"
        )
        for processor in processors:
            yield from processor.collect()

    def resolve(self, snapshot: Snapshot) -> List[Processor]:
        """Resolve the processors needed for ``snapshot``."""
        if self.log_unknown_statistics:
            for statistic in snapshot.values():
                if not self.processors.recognizes(statistic):
                    logger.debug(
                        f"Ignoring unknown statistic {statistic.full_name}",
                        extra={"statistic": statistic.full_name},
                    )
        return self.processors.resolve(snapshot)
