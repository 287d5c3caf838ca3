"""Unit tests for the generic statistics Processor.

Tests describe/collect behaviour, filtering and label validation.
"""

import pytest

from opensips_exporter.exceptions import LabelMismatchError
from opensips_exporter.processors.catalog import Catalog, CatalogEntry
from opensips_exporter.processors.metric import MetricDescriptor
from opensips_exporter.statistics import snapshot_from_values


def sample_tuples(processor):
    return [(s.descriptor.name, s.value, s.label_values) for s in processor.samples()]


class TestDescribe:
    """Tests for Processor.describe."""

    def test_describes_whole_catalog_without_data(self, core_catalog):
        processor = core_catalog.processor({})
        names = [family.name for family in processor.describe()]

        assert len(names) == len(core_catalog.descriptors())
        assert "opensips_core_requests" in names
        assert "opensips_core_received_requests" in names

    def test_describe_has_no_samples(self, shmem_catalog, scrape_snapshot):
        processor = shmem_catalog.processor(scrape_snapshot)
        assert all(family.samples == [] for family in processor.describe())

    def test_unknown_statistic_does_not_change_describe(self, core_catalog):
        empty = list(core_catalog.processor({}).describe())
        snapshot = snapshot_from_values({"core:unknown_stat": 5})
        with_unknown = list(core_catalog.processor(snapshot).describe())

        assert len(with_unknown) == len(empty)

    def test_describe_is_superset_of_collect(self, core_catalog, shmem_catalog, full_snapshot):
        for catalog in (core_catalog, shmem_catalog):
            processor = catalog.processor(full_snapshot)
            described = {family.name for family in processor.describe()}
            collected = {family.name for family in processor.collect()}

            assert collected
            assert collected <= described


class TestSamples:
    """Tests for Processor.samples."""

    def test_scrape_scenario(self, core_catalog, shmem_catalog, scrape_snapshot):
        core = core_catalog.processor(scrape_snapshot)
        shmem = shmem_catalog.processor(scrape_snapshot)

        assert sample_tuples(core) == [
            ("received_requests_total", 10.0, ()),
            ("requests", 3.0, ("forwarded",)),
        ]
        assert sample_tuples(shmem) == [("total_size", 1024.0, ())]

    def test_unknown_statistic_skipped(self, core_catalog):
        snapshot = snapshot_from_values({"core:unknown_stat": 5})
        assert sample_tuples(core_catalog.processor(snapshot)) == []

    def test_other_subsystem_skipped(self, core_catalog):
        # shmem statistic with a name unknown to core and one that is
        snapshot = snapshot_from_values({"shmem:total_size": 1, "shmem:rcv_requests": 2})
        assert sample_tuples(core_catalog.processor(snapshot)) == []

    def test_grouped_statistics_have_distinct_labels(self, core_catalog, full_snapshot):
        samples = list(core_catalog.processor(full_snapshot).samples())

        seen = set()
        for sample in samples:
            key = (sample.descriptor.fq_name, sample.label_values)
            assert key not in seen
            seen.add(key)

        requests = [s for s in samples if s.descriptor.name == "requests"]
        assert sorted(s.label_values for s in requests) == [
            ("dropped",),
            ("error",),
            ("forwarded",),
        ]

    def test_processor_holds_snapshot_reference(self, core_catalog, scrape_snapshot):
        processor = core_catalog.processor(scrape_snapshot)
        assert processor.statistics is scrape_snapshot


class TestCollect:
    """Tests for Processor.collect."""

    def test_grouped_samples_share_family(self, core_catalog):
        snapshot = snapshot_from_values(
            {"core:fwd_requests": 3, "core:drop_requests": 1, "core:err_requests": 2}
        )
        families = list(core_catalog.processor(snapshot).collect())

        assert len(families) == 1
        family = families[0]
        assert family.name == "opensips_core_requests"
        assert family.type == "counter"
        values = {s.labels["kind"]: s.value for s in family.samples}
        assert values == {"forwarded": 3.0, "dropped": 1.0, "error": 2.0}
        assert {s.name for s in family.samples} == {"opensips_core_requests_total"}

    def test_gauge_family(self, shmem_catalog):
        snapshot = snapshot_from_values({"shmem:used_size": 2048})
        (family,) = list(shmem_catalog.processor(snapshot).collect())

        assert family.name == "opensips_shmem_used_size"
        assert family.type == "gauge"
        assert family.samples[0].value == 2048.0
        assert family.samples[0].labels == {}

    def test_missing_statistics_are_absent(self, shmem_catalog):
        snapshot = snapshot_from_values({"shmem:fragments": 12})
        names = [family.name for family in shmem_catalog.processor(snapshot).collect()]
        assert names == ["opensips_shmem_fragments"]

    def test_empty_snapshot(self, core_catalog):
        assert list(core_catalog.processor({}).collect()) == []

    def test_idempotent(self, core_catalog, full_snapshot):
        processor = core_catalog.processor(full_snapshot)

        assert list(processor.describe()) == list(processor.describe())
        assert list(processor.collect()) == list(processor.collect())

    def test_label_mismatch_fails(self):
        catalog = Catalog("core")
        descriptor = MetricDescriptor("opensips", "core", "requests", "Requests.", ("kind",))
        # Bypass Catalog.add to simulate a broken entry
        catalog._entries["fwd_requests"] = CatalogEntry(descriptor, ())
        catalog._descriptors["requests"] = descriptor

        processor = catalog.processor(snapshot_from_values({"core:fwd_requests": 1}))
        with pytest.raises(LabelMismatchError) as exc_info:
            list(processor.collect())

        assert exc_info.value.metric_name == "opensips_core_requests"
        assert exc_info.value.label_names == ("kind",)
        assert exc_info.value.label_values == ()
