"""
Unit tests for MetricSink.
"""

import pytest
from prometheus_client import CollectorRegistry as PrometheusRegistry
from prometheus_client import generate_latest

from mikrotik_exporter.collector.base import description
from mikrotik_exporter.collector.schemas import MetricKind
from mikrotik_exporter.collector.sink import MetricSink

GAUGE = description("test", "value", "a test gauge", ["name", "address"])
COUNTER = description("test", "bytes", "a test counter", ["name"], kind=MetricKind.COUNTER)


class TestMetricSink:
    """Test sample recording and rendering."""

    def test_emit_groups_by_descriptor(self):
        sink = MetricSink()

        sink.emit(GAUGE, 1, "a", "10.0.0.1")
        sink.emit(GAUGE, 2.5, "b", "10.0.0.2")

        assert sink.samples(GAUGE) == [(("a", "10.0.0.1"), 1.0), (("b", "10.0.0.2"), 2.5)]
        assert sink.descriptors() == [GAUGE]
        assert len(sink) == 2

    def test_label_arity_checked(self):
        sink = MetricSink()

        with pytest.raises(ValueError, match="expected 2 label values"):
            sink.emit(GAUGE, 1, "only-one")

    def test_samples_of_unknown_descriptor(self):
        assert MetricSink().samples(GAUGE) == []

    def test_renders_through_prometheus_client(self):
        sink = MetricSink()
        sink.emit(GAUGE, 3, "core1", "10.0.0.1")
        sink.emit(COUNTER, 42, "core1")

        registry = PrometheusRegistry(auto_describe=False)
        registry.register(sink)
        text = generate_latest(registry).decode()

        assert "# TYPE mikrotik_test_value gauge" in text
        assert 'mikrotik_test_value{address="10.0.0.1",name="core1"} 3.0' in text
        assert "# TYPE mikrotik_test_bytes counter" in text
        assert 'mikrotik_test_bytes_total{name="core1"} 42.0' in text
