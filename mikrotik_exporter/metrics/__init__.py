"""
RouterOS collector plug-ins and the registry of every built-in feature.
"""

from typing import List, Tuple

from mikrotik_exporter.collector.registry import CollectorFactory, CollectorRegistry
from mikrotik_exporter.metrics.dhcp import (
    DHCPCollector,
    DHCPLeaseCollector,
    DHCPv6Collector,
    PoolCollector,
)
from mikrotik_exporter.metrics.firewall import ConntrackCollector, IpsecCollector
from mikrotik_exporter.metrics.interface import InterfaceCollector, OpticsCollector
from mikrotik_exporter.metrics.netwatch import NetwatchCollector
from mikrotik_exporter.metrics.routing import BGPCollector, RoutesCollector
from mikrotik_exporter.metrics.system import FirmwareCollector, HealthCollector, ResourceCollector
from mikrotik_exporter.metrics.wireless import (
    LteCollector,
    W60GInterfaceCollector,
    WlanIFCollector,
    WlanSTACollector,
)

BUILTIN_COLLECTORS: List[Tuple[str, CollectorFactory]] = [
    ("interface", InterfaceCollector),
    ("resource", ResourceCollector),
    ("health", HealthCollector),
    ("bgp", BGPCollector),
    ("routes", RoutesCollector),
    ("dhcp", DHCPCollector),
    ("dhcp_lease", DHCPLeaseCollector),
    ("dhcpv6", DHCPv6Collector),
    ("pools", PoolCollector),
    ("optics", OpticsCollector),
    ("w60g", W60GInterfaceCollector),
    ("wlansta", WlanSTACollector),
    ("wlanif", WlanIFCollector),
    ("ipsec", IpsecCollector),
    ("conntrack", ConntrackCollector),
    ("firmware", FirmwareCollector),
    ("lte", LteCollector),
    ("netwatch", NetwatchCollector),
]


def default_registry() -> CollectorRegistry:
    """A fresh registry holding every built-in collector."""
    return CollectorRegistry(BUILTIN_COLLECTORS)


__all__ = ["BUILTIN_COLLECTORS", "default_registry"]
