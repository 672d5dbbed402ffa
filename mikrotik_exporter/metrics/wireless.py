"""
Radio collectors: WLAN stations and interfaces, 60 GHz links and LTE modems.
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
from mikrotik_exporter.errors import ParseError
from mikrotik_exporter.utils.parse import split_string_to_floats


class WlanSTACollector(BaseCollector):
    """Per-station signal and traffic from the wireless registration table."""

    name = "wlansta"

    gauge_props = ["signal-to-noise", "signal-strength"]
    pair_props = ["packets", "bytes", "frames"]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "interface", "mac_address"]
        for p in self.gauge_props:
            self.descriptions[p] = description_for_property("wlan_station", p, labels)
        for p in self.pair_props:
            for direction in ("tx", "rx"):
                self.descriptions[f"{direction}_{p}"] = description_for_property(
                    "wlan_station", f"{direction}_{p}", labels, kind=MetricKind.COUNTER
                )

    @property
    def props(self) -> List[str]:
        return ["interface", "mac-address"] + self.gauge_props + self.pair_props

    async def collect(self, ctx: CollectContext) -> None:
        stations = await self.fetch(
            ctx, "/interface/wireless/registration-table/print", proplist(self.props)
        )
        for re in stations:
            self._collect_for_stat(ctx, re)

    def _collect_for_stat(self, ctx: CollectContext, re: Dict[str, str]) -> None:
        labels = (ctx.device.name, ctx.device.address, re.get("interface", ""), re.get("mac-address", ""))

        for p in self.gauge_props:
            value = re.get(p, "")
            if value == "":
                continue
            # signal-strength carries the rate it was measured at, e.g. -63@6Mbps
            v = self.parse_value(ctx, p, value.split("@", 1)[0])
            if v is not None:
                ctx.emit(self.descriptions[p], v, *labels)

        for p in self.pair_props:
            value = re.get(p, "")
            try:
                tx, rx = split_string_to_floats(value)
            except ParseError as e:
                self.log_parse_error(ctx, p, value, e)
                continue
            ctx.emit(self.descriptions[f"tx_{p}"], tx, *labels)
            ctx.emit(self.descriptions[f"rx_{p}"], rx, *labels)


class WlanIFCollector(BaseCollector):
    """Client count, noise floor and CCQ per enabled wireless interface."""

    name = "wlanif"

    props = ["channel", "registered-clients", "noise-floor", "overall-tx-ccq"]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "interface", "channel"]
        for p in self.props[1:]:
            self.descriptions[p] = description_for_property("wlan_interface", p, labels)

    async def collect(self, ctx: CollectContext) -> None:
        for iface in await self.fetch_names(ctx, "/interface/wireless/print", "?disabled=false"):
            await self._collect_for_interface(ctx, iface)

    async def _collect_for_interface(self, ctx: CollectContext, iface: str) -> None:
        records = await self.fetch(
            ctx,
            "/interface/wireless/monitor",
            f"=numbers={iface}",
            "=once=",
            proplist(self.props),
        )
        if not records:
            return

        # monitoring a single interface yields a single record
        re = records[0]
        channel = re.get("channel", "")
        for p in self.props[1:]:
            value = re.get(p, "")
            if value == "":
                continue
            v = self.parse_value(ctx, p, value)
            if v is not None:
                ctx.emit(self.descriptions[p], v, ctx.device.name, ctx.device.address, iface, channel)


class W60GInterfaceCollector(BaseCollector):
    """Link quality of 60 GHz interfaces from ``/interface/w60g/monitor``."""

    name = "w60g"

    # property -> (metric name, help)
    metrics = {
        "signal": ("signal", "Signal quality in %"),
        "rssi": ("rssi", "Signal RSSI in dB"),
        "tx-mcs": ("txMCS", "TX MCS"),
        "frequency": ("frequency", "frequency of tx in MHz"),
        "tx-phy-rate": ("txPHYRate", "PHY Rate in bps"),
        "tx-sector": ("txSector", "TX Sector"),
        "distance": ("txDistance", "Distance to remote"),
        "tx-packet-error-rate": ("txPacketErrorRate", "TX Packet Error Rate"),
    }

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "interface"]
        for prop, (metric, help_text) in self.metrics.items():
            self.descriptions[prop] = description("w60ginterface", metric, help_text, labels)

    async def collect(self, ctx: CollectContext) -> None:
        ifaces = await self.fetch_names(ctx, "/interface/w60g/print")
        if not ifaces:
            return

        records = await self.fetch(
            ctx,
            "/interface/w60g/monitor",
            "=numbers=" + ",".join(ifaces),
            "=once=",
            proplist(["name"] + list(self.metrics)),
        )
        for re in records:
            if "name" in re:
                self._collect_for_interface(ctx, re["name"], re)

    def _collect_for_interface(self, ctx: CollectContext, iface: str, re: Dict[str, str]) -> None:
        for prop in self.metrics:
            value = re.get(prop, "")
            if value == "":
                continue
            v = self.parse_value(ctx, prop, value)
            if v is None:
                return
            ctx.emit(self.descriptions[prop], v, ctx.device.name, ctx.device.address, iface)


class LteCollector(BaseCollector):
    """Radio quality of enabled LTE interfaces from ``/interface/lte/info``."""

    name = "lte"

    label_props = ["current-cellid", "primary-band", "ca-band"]
    metric_props = ["rssi", "rsrp", "rsrq", "sinr"]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "interface", "cellid", "primaryband", "caband"]
        for p in self.metric_props:
            self.descriptions[p] = description_for_property("lte_interface", p, labels)

    async def collect(self, ctx: CollectContext) -> None:
        for iface in await self.fetch_names(ctx, "/interface/lte/print", "?disabled=false"):
            await self._collect_for_interface(ctx, iface)

    async def _collect_for_interface(self, ctx: CollectContext, iface: str) -> None:
        records = await self.fetch(
            ctx,
            "/interface/lte/info",
            f"=number={iface}",
            "=once=",
            proplist(self.label_props + self.metric_props),
        )
        if not records:
            return

        re = records[0]
        labels = (
            ctx.device.name,
            ctx.device.address,
            iface,
            re.get("current-cellid", ""),
            _band(re.get("primary-band", "")),
            _band(re.get("ca-band", "")),
        )
        for p in self.metric_props:
            value = re.get(p, "")
            if value == "":
                continue
            v = self.parse_value(ctx, p, value)
            if v is not None:
                ctx.emit(self.descriptions[p], v, *labels)


def _band(value: str) -> str:
    """Band and width only, e.g. ``B3@20Mhz`` from ``B3@20Mhz earfcn: 1300 phy-cellid: 12``."""
    parts = value.split()
    return parts[0] if parts else ""
