"""Pytest fixtures for exporter tests.

Provides catalogs, processor registries and statistics snapshots, plus an
isolated Prometheus registry per test.
"""

import pytest
from prometheus_client import CollectorRegistry

from opensips_exporter.processors import (
    ProcessorRegistry,
    build_core_catalog,
    build_shmem_catalog,
    default_registry,
)
from opensips_exporter.processors.catalog import Catalog
from opensips_exporter.statistics import Statistic, snapshot_from_values


# =============================================================================
# Catalog and Registry Fixtures
# =============================================================================


@pytest.fixture
def core_catalog() -> Catalog:
    return build_core_catalog()


@pytest.fixture
def shmem_catalog() -> Catalog:
    return build_shmem_catalog()


@pytest.fixture
def processor_registry() -> ProcessorRegistry:
    """Sealed registry with every known subsystem."""
    return default_registry()


@pytest.fixture
def isolated_registry() -> CollectorRegistry:
    """Fresh Prometheus registry that shares no state with other tests."""
    return CollectorRegistry()


# =============================================================================
# Snapshot Fixtures
# =============================================================================


@pytest.fixture
def scrape_snapshot():
    """Snapshot with one plain counter, one grouped counter and one gauge."""
    return snapshot_from_values(
        {
            "core:rcv_requests": 10,
            "core:fwd_requests": 3,
            "shmem:total_size": 1024,
        }
    )


@pytest.fixture
def full_snapshot(core_catalog, shmem_catalog):
    """Snapshot holding a value for every catalogued statistic."""
    snapshot = {}
    for catalog in (core_catalog, shmem_catalog):
        for index, short_name in enumerate(catalog):
            statistic = Statistic(catalog.subsystem, short_name, float(index + 1))
            snapshot[statistic.full_name] = statistic
    return snapshot
