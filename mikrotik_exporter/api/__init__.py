"""
HTTP surface of the exporter.
"""

from fastapi import FastAPI

from mikrotik_exporter import __version__
from mikrotik_exporter.api.routes import create_routes
from mikrotik_exporter.collector.orchestrator import ScrapeOrchestrator


def create_app(orchestrator: ScrapeOrchestrator, metrics_path: str = "/metrics") -> FastAPI:
    """FastAPI application serving ``orchestrator`` at ``metrics_path``."""
    app = FastAPI(
        title="mikrotik_exporter",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(create_routes(orchestrator, metrics_path))
    return app


__all__ = ["create_app"]
