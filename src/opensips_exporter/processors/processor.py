"""Generic statistics processor.

A processor is built for a single scrape from the raw statistics snapshot
and a subsystem catalog. It implements the ``prometheus_client`` collector
protocol, so it can be registered on a ``CollectorRegistry`` directly or
driven by :class:`opensips_exporter.collector.OpenSIPSCollector`.
"""

from typing import TYPE_CHECKING, Dict, Iterator

from opensips_exporter.processors.metric import MetricDescriptor, MetricFamily, Sample
from opensips_exporter.statistics import Snapshot

if TYPE_CHECKING:
    from opensips_exporter.processors.catalog import Catalog


class Processor:
    """Translate one subsystem's statistics into Prometheus metrics.

    The processor only reads the snapshot; ``describe`` and ``collect`` may
    be called concurrently and any number of times.

    Example:
        >>> from opensips_exporter.processors.core import build_core_catalog
        >>> from opensips_exporter.statistics import snapshot_from_values
        >>> snapshot = snapshot_from_values({"core:fwd_requests": 3})
        >>> processor = build_core_catalog().processor(snapshot)
        >>> [(s.descriptor.name, s.value, s.label_values) for s in processor.samples()]
        [('requests', 3.0, ('forwarded',))]
    """

    def __init__(self, catalog: "Catalog", snapshot: Snapshot) -> None:
        self.catalog = catalog
        self.statistics = snapshot

    @property
    def subsystem(self) -> str:
        return self.catalog.subsystem

    def describe(self) -> Iterator[MetricFamily]:
        """Yield an empty family for every descriptor in the catalog.

        The set does not depend on the snapshot, so it is identical from
        one scrape to the next.
        """
        for descriptor in self.catalog.descriptors():
            yield descriptor.family()

    def samples(self) -> Iterator[Sample]:
        """Yield one sample per catalogued statistic of this subsystem.

        Statistics of other subsystems and unknown short names are skipped.

        Raises:
            LabelMismatchError: If a catalog entry carries the wrong number
                of label values for its descriptor.
        """
        for statistic in self.statistics.values():
            if statistic.subsystem != self.subsystem:
                continue
            entry = self.catalog.get(statistic.name)
            if entry is None:
                continue
            entry.descriptor.check_labels(entry.label_values)
            yield Sample(entry.descriptor, statistic.value, entry.label_values)

    def collect(self) -> Iterator[MetricFamily]:
        """Yield one populated family per descriptor that has samples."""
        families: Dict[MetricDescriptor, MetricFamily] = {}
        for sample in self.samples():
            family = families.get(sample.descriptor)
            if family is None:
                family = families[sample.descriptor] = sample.descriptor.family()
            family.add_metric(list(sample.label_values), sample.value)
        yield from families.values()

    def __repr__(self) -> str:
        return f"Processor(subsystem={self.subsystem!r}, statistics={len(self.statistics)})"
