"""
Scrape orchestrator that fans a pull out across every device.

One task per device per pass. Within a device the collectors run in their
configured order and the first failure stops that device's pass; other
devices are unaffected. Every device always gets its duration and success
meta-metrics.
"""

import asyncio
import logging
import time
from typing import List, Sequence

from mikrotik_exporter.collector.base import CollectContext, description
from mikrotik_exporter.collector.protocols import MetricCollector
from mikrotik_exporter.collector.schemas import Device, MetricDescriptor, ScrapeResult
from mikrotik_exporter.collector.session import SessionManager
from mikrotik_exporter.collector.sink import MetricSink
from mikrotik_exporter.errors import ExporterError, TransportError

logger = logging.getLogger(__name__)

SCRAPE_DURATION = description(
    "scrape",
    "collector_duration_seconds",
    "mikrotik_exporter: duration of a collector scrape",
    ["device"],
)
SCRAPE_SUCCESS = description(
    "scrape",
    "collector_success",
    "mikrotik_exporter: whether a collector succeeded",
    ["device"],
)


class ScrapeOrchestrator:
    """
    Runs scrape passes over a resolved device list.

    The device list and the collector set are fixed at construction.
    """

    def __init__(
        self,
        devices: Sequence[Device],
        collectors: Sequence[MetricCollector],
        sessions: SessionManager,
    ):
        """
        Args:
            devices: Concrete devices; discovery templates must already be expanded
            collectors: Collector instances in the order they run for each device
            sessions: Session cache shared by all passes
        """
        templates = [d.name for d in devices if d.is_template]
        if templates:
            raise ValueError(f"Unresolved discovery templates: {', '.join(templates)}")

        self.devices = tuple(devices)
        self.collectors = tuple(collectors)
        self.sessions = sessions

        logger.info(
            f"Set up collector for {len(self.devices)} devices "
            f"with {len(self.collectors)} collectors"
        )

    def describe(self) -> List[MetricDescriptor]:
        descriptors = [SCRAPE_DURATION, SCRAPE_SUCCESS]
        for collector in self.collectors:
            descriptors.extend(collector.describe())
        return descriptors

    async def collect(self, sink: MetricSink) -> List[ScrapeResult]:
        """
        Run one pass over every device and wait for all of them.

        Returns:
            One result per device, in device order
        """
        return list(
            await asyncio.gather(*(self._collect_for_device(d, sink) for d in self.devices))
        )

    async def _collect_for_device(self, device: Device, sink: MetricSink) -> ScrapeResult:
        begin = time.perf_counter()
        error = None

        try:
            await self._connect_and_collect(device, sink)
        except ExporterError as e:
            error = str(e)
        except Exception as e:
            logger.error(
                f"Unexpected error scraping {device.name}: {e}",
                exc_info=True,
                extra={"device": device.name},
            )
            error = str(e)

        duration = time.perf_counter() - begin
        if error is None:
            logger.debug(f"OK: {device.name} collector succeeded after {duration:.3f}s")
        else:
            logger.error(
                f"ERROR: {device.name} collector failed after {duration:.3f}s: {error}",
                extra={"device": device.name},
            )

        sink.emit(SCRAPE_DURATION, duration, device.name)
        sink.emit(SCRAPE_SUCCESS, 1.0 if error is None else 0.0, device.name)

        return ScrapeResult(
            device=device.name,
            duration_seconds=duration,
            success=error is None,
            error=error,
        )

    async def _connect_and_collect(self, device: Device, sink: MetricSink) -> None:
        try:
            session = await self.sessions.connect(device)
        except ExporterError as e:
            logger.error(f"Error dialing device {device.name}: {e}", extra={"device": device.name})
            raise

        ctx = CollectContext(sink=sink, device=device, session=session)
        try:
            for collector in self.collectors:
                await collector.collect(ctx)
        except TransportError:
            await self.sessions.invalidate(device)
            raise
