"""
Routing collectors: BGP peers and routing table sizes.
"""

from typing import Dict

from mikrotik_exporter.collector.base import (
    BaseCollector,
    CollectContext,
    description,
    description_for_property,
    proplist,
)


class BGPCollector(BaseCollector):
    """Per-peer session state and counters from ``/routing/bgp/peer``."""

    name = "bgp"

    props = [
        "name",
        "remote-as",
        "state",
        "prefix-count",
        "updates-sent",
        "updates-received",
        "withdrawn-sent",
        "withdrawn-received",
    ]
    metric_props = props[2:]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "session", "asn"]
        self.descriptions["state"] = description(
            "bgp", "up", "BGP session is established (up = 1)", labels
        )
        for p in self.props[3:]:
            self.descriptions[p] = description_for_property("bgp", p, labels)

    async def collect(self, ctx: CollectContext) -> None:
        for re in await self.fetch(ctx, "/routing/bgp/peer/print", proplist(self.props)):
            self._collect_for_stat(ctx, re)

    def _collect_for_stat(self, ctx: CollectContext, re: Dict[str, str]) -> None:
        session = re.get("name", "")
        asn = re.get("remote-as", "")

        for p in self.metric_props:
            value = re.get(p, "")
            if p == "state":
                v = 1.0 if value == "established" else 0.0
            elif value == "":
                v = 0.0
            else:
                v = self.parse_value(ctx, p, value)
                if v is None:
                    continue

            ctx.emit(self.descriptions[p], v, ctx.device.name, ctx.device.address, session, asn)


class RoutesCollector(BaseCollector):
    """Active route counts, total and per protocol, for IPv4 and IPv6."""

    name = "routes"

    protocols = ["bgp", "static", "ospf", "dynamic", "connect"]
    topics = [("4", "ip"), ("6", "ipv6")]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "ip_version"]
        self.descriptions["total"] = description(
            "routes", "total_count", "number of routes in RIB", labels
        )
        self.descriptions["protocol"] = description(
            "routes", "protocol_count", "number of routes per protocol in RIB", labels + ["protocol"]
        )

    async def collect(self, ctx: CollectContext) -> None:
        for ip_version, topic in self.topics:
            await self._collect_for_ip_version(ctx, ip_version, topic)

    async def _collect_for_ip_version(self, ctx: CollectContext, ip_version: str, topic: str) -> None:
        command = f"/{topic}/route/print"

        total = await self.count(ctx, command, "?disabled=false")
        if total is not None:
            ctx.emit(
                self.descriptions["total"], total, ctx.device.name, ctx.device.address, ip_version
            )

        for protocol in self.protocols:
            v = await self.count(ctx, command, "?disabled=false", f"?{protocol}")
            if v is not None:
                ctx.emit(
                    self.descriptions["protocol"],
                    v,
                    ctx.device.name,
                    ctx.device.address,
                    ip_version,
                    protocol,
                )
