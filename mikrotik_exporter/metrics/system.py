"""
System collectors: resources, board health and installed packages.
"""

import logging
from typing import Dict

from mikrotik_exporter.collector.base import (
    BaseCollector,
    CollectContext,
    description,
    description_for_property,
    proplist,
)
from mikrotik_exporter.utils.parse import parse_duration, parse_float

logger = logging.getLogger(__name__)


class ResourceCollector(BaseCollector):
    """Memory, CPU, storage and uptime from ``/system/resource``."""

    name = "resource"

    props = [
        "free-memory",
        "total-memory",
        "cpu-load",
        "free-hdd-space",
        "total-hdd-space",
        "uptime",
        "board-name",
        "version",
    ]
    metric_props = props[:6]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address", "boardname", "version"]
        for p in self.metric_props:
            self.descriptions[p] = description_for_property("system", p, labels)

    async def collect(self, ctx: CollectContext) -> None:
        for re in await self.fetch(ctx, "/system/resource/print", proplist(self.props)):
            self._collect_for_stat(ctx, re)

    def _collect_for_stat(self, ctx: CollectContext, re: Dict[str, str]) -> None:
        boardname = re.get("board-name", "")
        version = re.get("version", "")

        for p in self.metric_props:
            value = re.get(p, "")
            if p == "uptime":
                v = self.parse_value(ctx, p, value, parse_duration)
            elif value == "":
                continue
            else:
                v = self.parse_value(ctx, p, value)
            if v is None:
                continue

            ctx.emit(self.descriptions[p], v, ctx.device.name, ctx.device.address, boardname, version)


class HealthCollector(BaseCollector):
    """Board voltage and temperatures from ``/system/health``."""

    name = "health"

    props = ["voltage", "temperature", "cpu-temperature"]
    help_texts = [
        "Input voltage to the RouterOS board, in volts",
        "Temperature of RouterOS board, in degrees Celsius",
        "Temperature of RouterOS CPU, in degrees Celsius",
    ]

    def __init__(self) -> None:
        super().__init__()
        labels = ["name", "address"]
        for p, help_text in zip(self.props, self.help_texts):
            self.descriptions[p] = description_for_property("health", p, labels, help_text)

    async def collect(self, ctx: CollectContext) -> None:
        for re in await self.fetch(ctx, "/system/health/print", proplist(self.props)):
            for p in self.props:
                value = re.get(p, "")
                if value == "":
                    continue
                v = self.parse_value(ctx, p, value, parse_float)
                if v is not None:
                    ctx.emit(self.descriptions[p], v, ctx.device.name, ctx.device.address)


class FirmwareCollector(BaseCollector):
    """One sample per installed package: 1 when enabled, 0 when disabled."""

    name = "firmware"

    def __init__(self) -> None:
        super().__init__()
        self.descriptions["package"] = description(
            "system",
            "package",
            "system packages version",
            ["devicename", "name", "disabled", "version", "build_time"],
        )

    async def collect(self, ctx: CollectContext) -> None:
        for pkg in await self.fetch(ctx, "/system/package/getall"):
            disabled = pkg.get("disabled", "")
            v = 0.0 if disabled.lower() == "true" else 1.0
            ctx.emit(
                self.descriptions["package"],
                v,
                ctx.device.name,
                pkg.get("name", ""),
                disabled,
                pkg.get("version", ""),
                pkg.get("build-time", ""),
            )
