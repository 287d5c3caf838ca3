"""Tests for OpenSIPSCollector.

Registers the collector on an isolated Prometheus registry and checks
the exposed samples and text output.
"""

import logging

import pytest
from prometheus_client import generate_latest

from opensips_exporter import ExporterConfig, create_collector
from opensips_exporter.collector import OpenSIPSCollector
from opensips_exporter.exceptions import ConfigurationError
from opensips_exporter.statistics import snapshot_from_values


@pytest.fixture
def snapshots():
    """Mutable holder for the snapshot served on the next scrape."""
    return {"current": {}}


@pytest.fixture
def collector(processor_registry, snapshots):
    return OpenSIPSCollector(processor_registry, lambda: snapshots["current"])


class TestRegistration:
    """Tests for registering the collector with Prometheus."""

    def test_register(self, isolated_registry, collector):
        isolated_registry.register(collector)
        assert list(isolated_registry.collect()) == []

    def test_describe_lists_every_metric(self, collector, processor_registry):
        names = [family.name for family in collector.describe()]

        # 8 core descriptors + 6 shmem gauges
        assert len(names) == 14
        assert len(set(names)) == len(names)

    def test_double_registration_rejected(self, isolated_registry, processor_registry):
        isolated_registry.register(OpenSIPSCollector(processor_registry, dict))
        with pytest.raises(ValueError):
            isolated_registry.register(OpenSIPSCollector(processor_registry, dict))


class TestScrape:
    """Tests for scraping through the Prometheus registry."""

    def test_scrape_scenario(self, isolated_registry, collector, snapshots, scrape_snapshot):
        isolated_registry.register(collector)
        snapshots["current"] = scrape_snapshot

        get = isolated_registry.get_sample_value
        assert get("opensips_core_received_requests_total") == 10.0
        assert get("opensips_core_requests_total", {"kind": "forwarded"}) == 3.0
        assert get("opensips_core_requests_total", {"kind": "dropped"}) is None
        assert get("opensips_shmem_total_size") == 1024.0

    def test_each_scrape_uses_fresh_snapshot(self, isolated_registry, collector, snapshots):
        isolated_registry.register(collector)

        snapshots["current"] = snapshot_from_values({"shmem:used_size": 1})
        assert isolated_registry.get_sample_value("opensips_shmem_used_size") == 1.0

        snapshots["current"] = snapshot_from_values({"shmem:used_size": 2})
        assert isolated_registry.get_sample_value("opensips_shmem_used_size") == 2.0

    def test_unknown_statistics_dropped(self, isolated_registry, collector, snapshots):
        isolated_registry.register(collector)
        snapshots["current"] = snapshot_from_values(
            {"core:unknown_stat": 5, "pkmem:total_size": 7}
        )
        assert list(isolated_registry.collect()) == []

    def test_text_exposition(self, isolated_registry, collector, snapshots, full_snapshot):
        isolated_registry.register(collector)
        snapshots["current"] = full_snapshot

        output = generate_latest(isolated_registry).decode("utf-8")

        assert "# TYPE opensips_core_requests_total counter" in output
        assert "# HELP opensips_core_requests_total Number of requests by OpenSIPS." in output
        assert 'opensips_core_requests_total{kind="forwarded"}' in output
        assert 'opensips_core_replies_total{kind="error"}' in output
        assert "# TYPE opensips_core_uptime_seconds_total counter" in output
        assert "# TYPE opensips_shmem_free_size gauge" in output
        assert "opensips_core_received_replies_total " in output

    def test_source_errors_propagate(self, isolated_registry, processor_registry):
        def failing_source():
            raise ConnectionError("OpenSIPS unreachable")

        isolated_registry.register(OpenSIPSCollector(processor_registry, failing_source))
        with pytest.raises(ConnectionError):
            generate_latest(isolated_registry)


class TestUnknownStatisticLogging:
    """Tests for optional logging of unknown statistics."""

    def test_silent_by_default(self, caplog, collector, snapshots):
        caplog.set_level(logging.DEBUG, logger="opensips_exporter.collector")
        snapshots["current"] = snapshot_from_values({"core:unknown_stat": 5})

        list(collector.collect())

        assert "unknown_stat" not in caplog.text

    def test_logged_when_enabled(self, caplog, processor_registry):
        caplog.set_level(logging.DEBUG, logger="opensips_exporter.collector")
        snapshot = snapshot_from_values({"core:unknown_stat": 5, "core:rcv_requests": 1})
        collector = OpenSIPSCollector(
            processor_registry, lambda: snapshot, log_unknown_statistics=True
        )

        list(collector.collect())

        assert "Ignoring unknown statistic core:unknown_stat" in caplog.text
        assert "core:rcv_requests" not in caplog.text


class TestCreateCollector:
    """Tests for the create_collector bootstrap helper."""

    def test_uses_config_namespace(self, isolated_registry):
        snapshot = snapshot_from_values({"core:timestamp": 120})
        config = ExporterConfig(namespace="sip")

        isolated_registry.register(create_collector(config, lambda: snapshot))

        assert isolated_registry.get_sample_value("sip_core_uptime_seconds_total") == 120.0

    def test_invalid_config(self):
        with pytest.raises(ConfigurationError):
            create_collector(ExporterConfig(namespace="not-valid"), dict)

    def test_log_unknown_flag(self):
        collector = create_collector(ExporterConfig(log_unknown_statistics=True), dict)
        assert collector.log_unknown_statistics is True
        assert collector.processors.is_sealed
