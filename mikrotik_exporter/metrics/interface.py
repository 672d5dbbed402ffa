"""
Interface collectors: generic interface counters and SFP optical diagnostics.
"""

from typing import Dict, List

from mikrotik_exporter.collector.base import (
    BaseCollector,
    CollectContext,
    description,
    description_for_property,
    proplist,
)
from mikrotik_exporter.collector.schemas import MetricKind
from mikrotik_exporter.utils.parse import parse_bool


class InterfaceCollector(BaseCollector):
    """Traffic counters and link state from ``/interface/print``."""

    name = "interface"

    label_props = ["name", "type", "disabled", "comment", "slave"]
    gauge_props = ["actual-mtu", "running"]
    counter_props = [
        "rx-byte",
        "tx-byte",
        "rx-packet",
        "tx-packet",
        "rx-error",
        "tx-error",
        "rx-drop",
        "tx-drop",
    ]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "interface", "type", "disabled", "comment", "running", "slave"]
        for p in self.gauge_props:
            self.descriptions[p] = description_for_property("interface", p, labels)
        for p in self.counter_props:
            self.descriptions[p] = description_for_property(
                "interface", p, labels, kind=MetricKind.COUNTER
            )

    @property
    def props(self) -> List[str]:
        return self.label_props + self.gauge_props + self.counter_props

    async def collect(self, ctx: CollectContext) -> None:
        for re in await self.fetch(ctx, "/interface/print", proplist(self.props)):
            self._collect_for_stat(ctx, re)

    def _collect_for_stat(self, ctx: CollectContext, re: Dict[str, str]) -> None:
        labels = (
            ctx.device.name,
            ctx.device.address,
            re.get("name", ""),
            re.get("type", ""),
            re.get("disabled", ""),
            re.get("comment", ""),
            re.get("running", ""),
            re.get("slave", ""),
        )

        for p in self.gauge_props + self.counter_props:
            value = re.get(p, "")
            if value == "":
                continue
            if p == "running":
                v = parse_bool(value)
            else:
                v = self.parse_value(ctx, p, value)
            if v is not None:
                ctx.emit(self.descriptions[p], v, *labels)


class OpticsCollector(BaseCollector):
    """SFP diagnostics from ``/interface/ethernet/monitor`` on ``sfp*`` ports."""

    name = "optics"

    # property -> (metric name, help)
    metrics = {
        "sfp-rx-loss": ("rx_status", "RX status (1 = no loss)"),
        "sfp-tx-fault": ("tx_status", "TX status (1 = no faults)"),
        "sfp-temperature": ("temperature_celsius", "temperature in degree celsius"),
        "sfp-supply-voltage": ("voltage_volt", "voltage in volt"),
        "sfp-tx-bias-current": ("tx_bias_ma", "bias in milliamps"),
        "sfp-tx-power": ("tx_power_dbm", "TX power in dBm"),
        "sfp-rx-power": ("rx_power_dbm", "RX power in dBm"),
    }

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "interface"]
        for prop, (metric, help_text) in self.metrics.items():
            self.descriptions[prop] = description("optics", metric, help_text, labels)

    async def collect(self, ctx: CollectContext) -> None:
        names = await self.fetch_names(ctx, "/interface/ethernet/print")
        ifaces = [n for n in names if n.startswith("sfp")]
        if not ifaces:
            return

        records = await self.fetch(
            ctx,
            "/interface/ethernet/monitor",
            "=numbers=" + ",".join(ifaces),
            "=once=",
            proplist(["name"] + list(self.metrics)),
        )
        for re in records:
            if "name" in re:
                self._collect_for_interface(ctx, re["name"], re)

    def _collect_for_interface(self, ctx: CollectContext, iface: str, re: Dict[str, str]) -> None:
        for prop in self.metrics:
            if prop not in re:
                continue

            if prop in ("sfp-rx-loss", "sfp-tx-fault"):
                v = 0.0 if re[prop] == "true" else 1.0
            else:
                v = self.parse_value(ctx, prop, re[prop])
                if v is None:
                    # skips the remaining fields of this interface
                    return

            ctx.emit(self.descriptions[prop], v, ctx.device.name, ctx.device.address, iface)
