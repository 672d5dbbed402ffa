"""
Netwatch collector: reachability of hosts probed by the router itself.
"""

import logging
from typing import Dict

from mikrotik_exporter.collector.base import (
    BaseCollector,
    CollectContext,
    description_for_property,
    proplist,
)
from mikrotik_exporter.utils.log_sanitizer import sanitize_for_log

logger = logging.getLogger(__name__)

STATUS_VALUES: Dict[str, float] = {"up": 1.0, "unknown": 0.0, "down": -1.0}


class NetwatchCollector(BaseCollector):
    """Status of enabled netwatch entries: up = 1, unknown = 0, down = -1."""

    name = "netwatch"

    props = ["host", "comment", "status"]

    def __init__(self) -> None:
        super().__init__()
        self.descriptions["status"] = description_for_property(
            "netwatch", "status", ["name", "address", "host", "comment"]
        )

    async def collect(self, ctx: CollectContext) -> None:
        entries = await self.fetch(ctx, "/tool/netwatch/print", "?disabled=false", proplist(self.props))
        for re in entries:
            status = re.get("status", "")
            if status == "":
                continue

            host = re.get("host", "")
            v = STATUS_VALUES.get(status)
            if v is None:
                logger.error(
                    f"netwatch: unexpected status {sanitize_for_log(status)!r} "
                    f"for {host} on {ctx.device.name}",
                    extra={
                        "device": ctx.device.name,
                        "collector": self.name,
                        "property": "status",
                        "value": sanitize_for_log(status),
                    },
                )
                v = 0.0

            ctx.emit(
                self.descriptions["status"],
                v,
                ctx.device.name,
                ctx.device.address,
                host,
                re.get("comment", ""),
            )
