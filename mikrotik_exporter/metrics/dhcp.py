"""
Address management collectors: DHCP servers, leases, DHCPv6 bindings and IP pools.
"""

from mikrotik_exporter.collector.base import (
    BaseCollector,
    CollectContext,
    description,
    proplist,
)
from mikrotik_exporter.utils.parse import parse_duration


class DHCPCollector(BaseCollector):
    """Active lease count per DHCP server."""

    name = "dhcp"

    def __init__(self) -> None:
        super().__init__()
        self.descriptions["leases_active"] = description(
            "dhcp",
            "leases_active_count",
            "number of active leases per DHCP server",
            ["name", "address", "server"],
        )

    async def collect(self, ctx: CollectContext) -> None:
        for server in await self.fetch_names(ctx, "/ip/dhcp-server/print"):
            v = await self.count(
                ctx, "/ip/dhcp-server/lease/print", f"?server={server}", "=active="
            )
            if v is not None:
                ctx.emit(
                    self.descriptions["leases_active"],
                    v,
                    ctx.device.name,
                    ctx.device.address,
                    server,
                )


class DHCPLeaseCollector(BaseCollector):
    """One sample per bound lease, labelled with the client details."""

    name = "dhcp_lease"

    props = [
        "active-mac-address",
        "server",
        "status",
        "expires-after",
        "active-address",
        "host-name",
    ]

    def __init__(self) -> None:
        super().__init__()
        self.descriptions["lease"] = description(
            "dhcp",
            "leases_metrics",
            "bound DHCP leases",
            [
                "name",
                "address",
                "activemacaddress",
                "server",
                "status",
                "expiresafter",
                "activeaddress",
                "hostname",
            ],
        )

    async def collect(self, ctx: CollectContext) -> None:
        leases = await self.fetch(
            ctx, "/ip/dhcp-server/lease/print", "?status=bound", proplist(self.props)
        )
        for re in leases:
            expires = self.parse_value(
                ctx, "expires-after", re.get("expires-after", ""), parse_duration
            )
            if expires is None:
                continue

            ctx.emit(
                self.descriptions["lease"],
                1.0,
                ctx.device.name,
                ctx.device.address,
                re.get("active-mac-address", ""),
                re.get("server", ""),
                re.get("status", ""),
                f"{expires:.0f}",
                re.get("active-address", ""),
                re.get("host-name", ""),
            )


class DHCPv6Collector(BaseCollector):
    """Binding count per DHCPv6 server."""

    name = "dhcpv6"

    def __init__(self) -> None:
        super().__init__()
        self.descriptions["bindings"] = description(
            "dhcpv6",
            "binding_count",
            "number of active bindings per DHCPv6 server",
            ["name", "address", "server"],
        )

    async def collect(self, ctx: CollectContext) -> None:
        for server in await self.fetch_names(ctx, "/ipv6/dhcp-server/print"):
            v = await self.count(ctx, "/ipv6/dhcp-server/binding/print", f"?server={server}")
            if v is not None:
                ctx.emit(
                    self.descriptions["bindings"], v, ctx.device.name, ctx.device.address, server
                )


class PoolCollector(BaseCollector):
    """Used address count per IPv4 pool."""

    name = "pools"

    def __init__(self) -> None:
        super().__init__()
        self.descriptions["used"] = description(
            "ip_pool",
            "pool_used_count",
            "number of used IP/prefixes in a pool",
            ["name", "address", "ip_version", "pool"],
        )

    async def collect(self, ctx: CollectContext) -> None:
        await self._collect_for_ip_version(ctx, "4", "ip")

    async def _collect_for_ip_version(self, ctx: CollectContext, ip_version: str, topic: str) -> None:
        for pool in await self.fetch_names(ctx, f"/{topic}/pool/print"):
            v = await self.count(ctx, f"/{topic}/pool/used/print", f"?pool={pool}")
            if v is not None:
                ctx.emit(
                    self.descriptions["used"],
                    v,
                    ctx.device.name,
                    ctx.device.address,
                    ip_version,
                    pool,
                )
