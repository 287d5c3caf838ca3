"""Per-subsystem metric catalogs.

A catalog maps the short names OpenSIPS reports for one subsystem to the
descriptor they are exported under. Several short names may share a
descriptor as long as each one attaches a different set of literal label
values, which is how ``fwd_requests``, ``drop_requests`` and
``err_requests`` all become ``requests{kind=...}``.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple

from opensips_exporter.exceptions import CatalogError
from opensips_exporter.processors.metric import DEFAULT_NAMESPACE, MetricDescriptor, ValueKind
from opensips_exporter.processors.processor import Processor
from opensips_exporter.statistics import Snapshot


@dataclass(frozen=True)
class CatalogEntry:
    """Descriptor and literal label values for one statistic short name."""

    descriptor: MetricDescriptor
    label_values: Tuple[str, ...] = ()


class Catalog:
    """Mapping of statistic short names to metric descriptors for a subsystem.

    Entries are validated as they are added, so a catalog that was built
    without raising is consistent.

    Example:
        >>> catalog = Catalog("shmem")
        >>> catalog.gauge("used_size", "used_size", "Used shared memory.")
        >>> catalog.get("used_size").descriptor.fq_name
        'opensips_shmem_used_size'
    """

    def __init__(self, subsystem: str, namespace: str = DEFAULT_NAMESPACE) -> None:
        if not subsystem:
            raise CatalogError(subsystem, "subsystem name must not be empty")
        self.subsystem = subsystem
        self.namespace = namespace
        self._entries: Dict[str, CatalogEntry] = {}
        self._descriptors: Dict[str, MetricDescriptor] = {}
        self._exposed: Dict[str, str] = {}
        self._label_sets: Set[Tuple[str, Tuple[str, ...]]] = set()

    @property
    def sentinel(self) -> str:
        """Registry key that resolves to this subsystem's processor."""
        return f"{self.subsystem}:"

    def add(
        self,
        short_name: str,
        name: str,
        help: str,
        kind: ValueKind,
        labels: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Add a statistic to the catalog.

        Args:
            short_name: Statistic name as reported by OpenSIPS.
            name: Metric name within the subsystem.
            help: Help text of the metric.
            kind: Counter or gauge.
            labels: Ordered label names mapped to the literal values this
                statistic is exported with.

        Raises:
            CatalogError: If the short name is already catalogued, the
                descriptor conflicts with an earlier one of the same name,
                or the label values are already taken.
        """
        labels = dict(labels or {})
        if short_name in self._entries:
            raise CatalogError(self.subsystem, f"statistic '{short_name}' is already catalogued")

        descriptor = MetricDescriptor(
            namespace=self.namespace,
            subsystem=self.subsystem,
            name=name,
            help=help,
            label_names=tuple(labels.keys()),
            kind=kind,
        )
        existing = self._descriptors.get(name)
        if existing is None:
            owner = self._exposed.get(descriptor.exposed_name)
            if owner is not None:
                raise CatalogError(
                    self.subsystem,
                    f"metric '{descriptor.fq_name}' is exposed as "
                    f"'{descriptor.exposed_name}', already used by '{owner}'",
                )
            self._descriptors[name] = descriptor
            self._exposed[descriptor.exposed_name] = descriptor.fq_name
        elif existing != descriptor:
            raise CatalogError(
                self.subsystem,
                f"statistic '{short_name}' redefines metric '{existing.fq_name}'",
            )
        else:
            descriptor = existing

        label_values = tuple(labels.values())
        if (name, label_values) in self._label_sets:
            raise CatalogError(
                self.subsystem,
                f"statistic '{short_name}' duplicates labels {label_values} "
                f"of metric '{descriptor.fq_name}'",
            )
        self._label_sets.add((name, label_values))
        self._entries[short_name] = CatalogEntry(descriptor, label_values)

    def counter(
        self, short_name: str, name: str, help: str, labels: Optional[Mapping[str, str]] = None
    ) -> None:
        self.add(short_name, name, help, ValueKind.COUNTER, labels)

    def gauge(
        self, short_name: str, name: str, help: str, labels: Optional[Mapping[str, str]] = None
    ) -> None:
        self.add(short_name, name, help, ValueKind.GAUGE, labels)

    def get(self, short_name: str) -> Optional[CatalogEntry]:
        return self._entries.get(short_name)

    def descriptors(self) -> List[MetricDescriptor]:
        """Distinct descriptors in the order they were first added."""
        return list(self._descriptors.values())

    def processor(self, snapshot: Snapshot) -> Processor:
        """Build a processor for ``snapshot``; registered as the constructor."""
        return Processor(self, snapshot)

    def __contains__(self, short_name: object) -> bool:
        return short_name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Catalog(subsystem={self.subsystem!r}, statistics={len(self)})"
