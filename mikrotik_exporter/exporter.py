"""
Startup sequence of the exporter process.

Configuration -> session cache -> discovery -> collectors -> orchestrator ->
HTTP server. Discovery and serving share one event loop so sessions opened
while probing are reused by the first pull.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import uvicorn

from mikrotik_exporter.api import create_app
from mikrotik_exporter.collector.discovery import DeviceRegistry
from mikrotik_exporter.collector.orchestrator import ScrapeOrchestrator
from mikrotik_exporter.collector.protocols import Dialer, SrvResolver
from mikrotik_exporter.collector.registry import CollectorRegistry
from mikrotik_exporter.collector.schemas import Device
from mikrotik_exporter.collector.session import RouterOSDialer, SessionManager
from mikrotik_exporter.config.settings import ExporterConfig, ExporterSettings
from mikrotik_exporter.errors import ConfigError
from mikrotik_exporter.metrics import default_registry

logger = logging.getLogger(__name__)


def _routeros_pool(workers: int) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=max(workers, 1), thread_name_prefix="routeros")


class Exporter:
    """
    Wires configuration to a running scrape service.

    ``dialer`` and ``resolver`` default to the librouteros and dnspython
    implementations.
    """

    def __init__(
        self,
        config: ExporterConfig,
        settings: ExporterSettings,
        registry: Optional[CollectorRegistry] = None,
        dialer: Optional[Dialer] = None,
        resolver: Optional[SrvResolver] = None,
    ):
        if not config.devices:
            raise ConfigError("no devices configured")

        self.config = config
        self.settings = settings
        self.registry = registry or default_registry()

        # resized to the resolved device list once discovery is done
        self.workers = len(config.devices)
        self.executor = _routeros_pool(self.workers)
        self.sessions = SessionManager(
            dialer
            or RouterOSDialer(timeout=settings.timeout, tls=settings.tls, insecure=settings.insecure),
            self.executor,
        )
        self.resolver = resolver
        self.orchestrator: Optional[ScrapeOrchestrator] = None

    async def prepare(self) -> ScrapeOrchestrator:
        """
        Resolve devices and collectors and build the orchestrator.

        Raises:
            ConfigError: an enabled feature is unknown
            DiscoveryError: SRV expansion failed
        """
        features = self.settings.features_for(self.config)
        collectors = self.registry.resolve(features)

        devices: List[Device] = await DeviceRegistry(
            self.sessions, self.resolver, self.executor
        ).prepare(self.config.devices)
        self._size_pool(len(devices))

        self.orchestrator = ScrapeOrchestrator(devices, collectors, self.sessions)
        return self.orchestrator

    def _size_pool(self, device_count: int) -> None:
        """Give every device its own worker so RPCs never queue across devices."""
        if device_count <= self.workers:
            return

        previous = self.executor
        self.workers = device_count
        self.executor = _routeros_pool(device_count)
        self.sessions.use_executor(self.executor)
        previous.shutdown(wait=False)
        logger.debug(f"Resized RouterOS worker pool to {device_count}")

    async def serve(self) -> None:
        """Prepare, then serve pulls until the server is stopped."""
        try:
            orchestrator = await self.prepare()
            app = create_app(orchestrator, self.settings.metrics_path)

            server = uvicorn.Server(
                uvicorn.Config(
                    app,
                    host=self.settings.host,
                    port=self.settings.port,
                    log_config=None,
                )
            )

            logger.info(
                f"Listening on {self.settings.host}:{self.settings.port}"
                f"{self.settings.metrics_path}"
            )
            await server.serve()
        finally:
            self.close()

    def close(self) -> None:
        self.sessions.close()
        self.executor.shutdown(wait=False)
