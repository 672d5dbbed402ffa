"""
Metric sink for one scrape pass.

Collectors emit samples against their descriptors; the sink groups them into
prometheus_client metric families so the pass can be rendered with
``generate_latest``.
"""

import logging
from typing import Dict, Iterator, List, Tuple

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

from mikrotik_exporter.collector.schemas import MetricDescriptor, MetricKind

logger = logging.getLogger(__name__)


class MetricSink:
    """
    Collects samples emitted during one pass.

    Implements the prometheus_client custom-collector interface (``collect``)
    so it can be registered on a throwaway registry for rendering.
    """

    def __init__(self) -> None:
        self._families: Dict[MetricDescriptor, Metric] = {}

    def emit(self, descriptor: MetricDescriptor, value: float, *label_values: str) -> None:
        """
        Record one sample.

        Raises:
            ValueError: if the label count does not match the descriptor
        """
        if len(label_values) != len(descriptor.label_names):
            raise ValueError(
                f"{descriptor.fq_name}: expected {len(descriptor.label_names)} label values, "
                f"got {len(label_values)}"
            )

        family = self._families.get(descriptor)
        if family is None:
            family = self._new_family(descriptor)
            self._families[descriptor] = family

        family.add_metric([str(v) for v in label_values], float(value))

    @staticmethod
    def _new_family(descriptor: MetricDescriptor) -> Metric:
        labels = list(descriptor.label_names)
        if descriptor.kind == MetricKind.COUNTER:
            return CounterMetricFamily(descriptor.fq_name, descriptor.help, labels=labels)
        return GaugeMetricFamily(descriptor.fq_name, descriptor.help, labels=labels)

    def samples(self, descriptor: MetricDescriptor) -> List[Tuple[Tuple[str, ...], float]]:
        """Label values and value of every sample recorded for a descriptor."""
        family = self._families.get(descriptor)
        if family is None:
            return []
        return [
            (tuple(s.labels[name] for name in descriptor.label_names), s.value)
            for s in family.samples
        ]

    def descriptors(self) -> List[MetricDescriptor]:
        """Descriptors that received at least one sample."""
        return list(self._families)

    def collect(self) -> Iterator[Metric]:
        """prometheus_client collector hook."""
        yield from self._families.values()

    def __len__(self) -> int:
        return sum(len(f.samples) for f in self._families.values())
