"""Shared memory statistics.

doc: http://www.opensips.org/Documentation/Interface-CoreStatistics-1-11#toc21
src: https://github.com/OpenSIPS/opensips/blob/1.11/mem/shm_mem.c#L52
"""

from opensips_exporter.processors.catalog import Catalog
from opensips_exporter.processors.metric import DEFAULT_NAMESPACE

SUBSYSTEM = "shmem"

GAUGES = (
    ("total_size", "Total size of shared memory available to OpenSIPS processes."),
    ("used_size", "Amount of shared memory requested and used by OpenSIPS processes."),
    (
        "real_used_size",
        "Amount of shared memory requested by OpenSIPS processes + malloc overhead",
    ),
    ("max_used_size", "Maximum amount of shared memory ever used by OpenSIPS processes."),
    ("free_size", "Free memory available. Computed as total_size - real_used_size"),
    ("fragments", "Total number of fragments in the shared memory."),
)


def build_shmem_catalog(namespace: str = DEFAULT_NAMESPACE) -> Catalog:
    """Build the catalog of shared memory statistics."""
    catalog = Catalog(SUBSYSTEM, namespace)
    for name, help in GAUGES:
        catalog.gauge(name, name, help)
    return catalog
