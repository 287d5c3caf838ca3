"""Statistic processors for OpenSIPS subsystems.

Each subsystem declares a :class:`Catalog` of the statistics it exports.
The :class:`ProcessorRegistry` maps statistic names and subsystem sentinel
keys to the processor built from that catalog.

Example:
    >>> from opensips_exporter.processors import default_registry
    >>> from opensips_exporter.statistics import snapshot_from_values
    >>>
    >>> registry = default_registry()
    >>> snapshot = snapshot_from_values({"shmem:total_size": 1024})
    >>> for processor in registry.resolve(snapshot):
    ...     for family in processor.collect():
    ...         print(family.name, family.samples[0].value)
    opensips_shmem_total_size 1024.0
"""

from typing import Callable, List

from opensips_exporter.processors.catalog import Catalog, CatalogEntry
from opensips_exporter.processors.core import build_core_catalog
from opensips_exporter.processors.metric import (
    DEFAULT_NAMESPACE,
    MetricDescriptor,
    Sample,
    ValueKind,
)
from opensips_exporter.processors.processor import Processor
from opensips_exporter.processors.registry import ProcessorRegistry, build_registry
from opensips_exporter.processors.shmem import build_shmem_catalog

CATALOG_BUILDERS: List[Callable[[str], Catalog]] = [
    build_core_catalog,
    build_shmem_catalog,
]


def build_catalogs(namespace: str = DEFAULT_NAMESPACE) -> List[Catalog]:
    """Build every known subsystem catalog under ``namespace``."""
    return [builder(namespace) for builder in CATALOG_BUILDERS]


def default_registry(namespace: str = DEFAULT_NAMESPACE) -> ProcessorRegistry:
    """Build a sealed registry holding every known subsystem."""
    return build_registry(build_catalogs(namespace))


__all__ = [
    "CATALOG_BUILDERS",
    "Catalog",
    "CatalogEntry",
    "DEFAULT_NAMESPACE",
    "MetricDescriptor",
    "Processor",
    "ProcessorRegistry",
    "Sample",
    "ValueKind",
    "build_catalogs",
    "build_core_catalog",
    "build_registry",
    "build_shmem_catalog",
    "default_registry",
]
