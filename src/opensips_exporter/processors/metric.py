"""Metric descriptors and samples.

A descriptor is the stable identity of one exported metric: its fully
qualified name, help text, ordered label names and value kind. A sample
is one observation of a descriptor during a single scrape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Sequence, Tuple, Union

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from opensips_exporter.exceptions import LabelMismatchError

DEFAULT_NAMESPACE = "opensips"

COUNTER_SUFFIX = "_total"


class ValueKind(str, Enum):
    """Prometheus value type of a metric."""

    COUNTER = "counter"
    GAUGE = "gauge"


MetricFamily = Union[CounterMetricFamily, GaugeMetricFamily]


@dataclass(frozen=True)
class MetricDescriptor:
    """Immutable description of an exported metric.

    Example:
        >>> desc = MetricDescriptor("opensips", "core", "requests",
        ...     "Number of requests by OpenSIPS.", ("kind",))
        >>> desc.fq_name
        'opensips_core_requests'
        >>> desc.exposed_name
        'opensips_core_requests_total'
    """

    namespace: str
    subsystem: str
    name: str
    help: str
    label_names: Tuple[str, ...] = ()
    kind: ValueKind = ValueKind.COUNTER

    @property
    def fq_name(self) -> str:
        """Fully qualified name, ``<namespace>_<subsystem>_<name>``."""
        return "_".join(part for part in (self.namespace, self.subsystem, self.name) if part)

    @property
    def exposed_name(self) -> str:
        """Sample name as it appears in the text exposition.

        The Prometheus client writes every counter sample with a ``_total``
        suffix, whether or not the descriptor name already carries one.
        """
        if self.kind is ValueKind.COUNTER:
            base = self.fq_name
            if base.endswith(COUNTER_SUFFIX):
                base = base[: -len(COUNTER_SUFFIX)]
            return base + COUNTER_SUFFIX
        return self.fq_name

    def check_labels(self, label_values: Sequence[str]) -> None:
        """Fail if ``label_values`` does not match the declared label names.

        Raises:
            LabelMismatchError: If the counts differ.
        """
        if len(label_values) != len(self.label_names):
            raise LabelMismatchError(self.fq_name, self.label_names, label_values)

    def family(self) -> MetricFamily:
        """Create an empty metric family for this descriptor."""
        if self.kind is ValueKind.COUNTER:
            return CounterMetricFamily(self.fq_name, self.help, labels=list(self.label_names))
        return GaugeMetricFamily(self.fq_name, self.help, labels=list(self.label_names))


class Sample(NamedTuple):
    """One observation of a descriptor."""

    descriptor: MetricDescriptor
    value: float
    label_values: Tuple[str, ...] = ()
