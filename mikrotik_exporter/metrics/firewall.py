"""
Firewall collectors: IPsec policies and connection tracking.
"""

from typing import Dict

from mikrotik_exporter.collector.base import (
    BaseCollector,
    CollectContext,
    description,
    description_for_property,
    proplist,
)


class IpsecCollector(BaseCollector):
    """State of static, enabled IPsec policies."""

    name = "ipsec"

    props = ["src-address", "dst-address", "ph2-state", "invalid", "active", "comment"]
    metric_props = ["ph2-state", "invalid", "active"]

    def __init__(self) -> None:
        super().__init__()
        labels = ["devicename", "srcdst", "comment"]
        for p in self.metric_props:
            self.descriptions[p] = description_for_property("ipsec", p, labels)

    async def collect(self, ctx: CollectContext) -> None:
        policies = await self.fetch(
            ctx, "/ip/ipsec/policy/print", "?disabled=false", "?dynamic=false", proplist(self.props)
        )
        for re in policies:
            self._collect_for_stat(ctx, re)

    def _collect_for_stat(self, ctx: CollectContext, re: Dict[str, str]) -> None:
        srcdst = f"{re.get('src-address', '')}-{re.get('dst-address', '')}"
        comment = re.get("comment", "")

        for p in self.metric_props:
            value = re.get(p, "")
            if value == "":
                continue
            if p == "ph2-state":
                v = 1.0 if value == "established" else 0.0
            else:
                v = 1.0 if value == "true" else 0.0
            ctx.emit(self.descriptions[p], v, ctx.device.name, srcdst, comment)


class ConntrackCollector(BaseCollector):
    """Connection tracking table usage."""

    name = "conntrack"

    # property -> (metric name, help)
    metrics = {
        "total-entries": ("entries", "Number of tracked connections"),
        "max-entries": ("max_entries", "Conntrack table capacity"),
    }

    def __init__(self) -> None:
        super().__init__()
        for prop, (metric, help_text) in self.metrics.items():
            self.descriptions[prop] = description("conntrack", metric, help_text, ["name", "address"])

    async def collect(self, ctx: CollectContext) -> None:
        records = await self.fetch(
            ctx, "/ip/firewall/connection/tracking/print", proplist(list(self.metrics))
        )
        for re in records:
            for prop in self.metrics:
                value = re.get(prop, "")
                if value == "":
                    continue
                v = self.parse_value(ctx, prop, value)
                if v is not None:
                    ctx.emit(self.descriptions[prop], v, ctx.device.name, ctx.device.address)
