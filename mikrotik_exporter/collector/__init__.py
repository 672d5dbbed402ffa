"""
Scrape core: sessions, discovery, collector registry and orchestration.
"""

from mikrotik_exporter.collector.base import BaseCollector, CollectContext
from mikrotik_exporter.collector.discovery import DeviceRegistry, DnsSrvResolver
from mikrotik_exporter.collector.orchestrator import ScrapeOrchestrator
from mikrotik_exporter.collector.registry import CollectorRegistry
from mikrotik_exporter.collector.schemas import (
    Device,
    DnsServer,
    MetricDescriptor,
    MetricKind,
    Reply,
    ScrapeResult,
    SrvRecord,
)
from mikrotik_exporter.collector.session import RouterOSDialer, SessionManager
from mikrotik_exporter.collector.sink import MetricSink

__all__ = [
    "BaseCollector",
    "CollectContext",
    "CollectorRegistry",
    "Device",
    "DeviceRegistry",
    "DnsServer",
    "DnsSrvResolver",
    "MetricDescriptor",
    "MetricKind",
    "MetricSink",
    "Reply",
    "RouterOSDialer",
    "ScrapeOrchestrator",
    "ScrapeResult",
    "SessionManager",
    "SrvRecord",
]
