"""
HTTP routes: the metrics pull endpoint, a health check and a landing page.
"""

import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_client import CollectorRegistry as PrometheusRegistry

from mikrotik_exporter import __version__
from mikrotik_exporter.collector.base import description
from mikrotik_exporter.collector.orchestrator import ScrapeOrchestrator
from mikrotik_exporter.collector.sink import MetricSink

logger = logging.getLogger(__name__)

BUILD_INFO = description(
    "exporter", "build_info", "mikrotik_exporter build information", ["version"]
)


def render(sink: MetricSink) -> bytes:
    """Text exposition of one pass."""
    registry = PrometheusRegistry(auto_describe=False)
    registry.register(sink)
    return generate_latest(registry)


def create_routes(orchestrator: ScrapeOrchestrator, metrics_path: str = "/metrics") -> APIRouter:
    """
    Create the exporter routes.

    Args:
        orchestrator: Orchestrator run once per pull
        metrics_path: Path serving the Prometheus exposition

    Returns:
        APIRouter with all routes configured
    """
    router = APIRouter()

    # one scrape pass at a time
    pull_lock = asyncio.Lock()

    @router.get(metrics_path)
    async def metrics() -> Response:
        """Run a scrape pass over every device and render it."""
        async with pull_lock:
            sink = MetricSink()
            sink.emit(BUILD_INFO, 1.0, __version__)
            results = await orchestrator.collect(sink)

        failed = [r.device for r in results if not r.success]
        if failed:
            logger.debug(f"Pull finished with {len(failed)} failed devices: {', '.join(failed)}")

        return Response(content=render(sink), media_type=CONTENT_TYPE_LATEST)

    @router.get("/healthz")
    async def healthz() -> PlainTextResponse:
        """Liveness check."""
        return PlainTextResponse(content="ok")

    @router.get("/")
    async def index() -> HTMLResponse:
        html_content = f"""<html>
<head><title>Mikrotik Exporter</title></head>
<body>
<h1>Mikrotik Exporter</h1>
<p><a href="{metrics_path}">Metrics</a></p>
<p>version {__version__}</p>
</body>
</html>"""
        return HTMLResponse(content=html_content)

    return router
