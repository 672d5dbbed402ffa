"""
Registry mapping feature names to collector factories.
"""

import logging
from typing import Callable, Dict, Iterable, List, Tuple

from mikrotik_exporter.collector.protocols import MetricCollector
from mikrotik_exporter.errors import UnknownCollectorError

logger = logging.getLogger(__name__)

CollectorFactory = Callable[[], MetricCollector]


class CollectorRegistry:
    """
    Feature name -> collector factory table.

    Built once at startup from a fixed list of registrations and only read
    afterwards.
    """

    def __init__(self, entries: Iterable[Tuple[str, CollectorFactory]] = ()):
        self._factories: Dict[str, CollectorFactory] = {}
        for name, factory in entries:
            self.register(name, factory)

    def register(self, name: str, factory: CollectorFactory) -> None:
        """
        Register a factory under a feature name.

        Raises:
            ValueError: if the name is already registered
        """
        if name in self._factories:
            raise ValueError(f"Collector {name} already registered")
        self._factories[name] = factory

    def resolve(self, names: Iterable[str]) -> List[MetricCollector]:
        """
        Instantiate the collectors for ``names``, in order.

        All or nothing: no collector is built unless every name is known.

        Raises:
            UnknownCollectorError: on the first unrecognized name
        """
        wanted = [n.strip() for n in names if n.strip()]
        for name in wanted:
            if name not in self._factories:
                raise UnknownCollectorError(name)

        collectors = [self._factories[name]() for name in wanted]
        logger.info(f"Enabled collectors: {', '.join(wanted) or 'none'}")
        return collectors

    def names(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)
