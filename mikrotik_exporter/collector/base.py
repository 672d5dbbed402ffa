"""
Base class and helpers for collector plug-ins.

Every plug-in performs the same fetch -> parse -> emit sequence against one
device session. The helpers here carry the shared error policy: a failed RPC
aborts the collector, a single unparsable value is logged and dropped.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from mikrotik_exporter.collector.protocols import Session
from mikrotik_exporter.collector.schemas import Device, MetricDescriptor, MetricKind, Reply
from mikrotik_exporter.collector.sink import MetricSink
from mikrotik_exporter.errors import CollectError, ParseError
from mikrotik_exporter.utils.log_sanitizer import sanitize_for_log
from mikrotik_exporter.utils.parse import parse_float

logger = logging.getLogger(__name__)


def metric_name(property_name: str) -> str:
    """RouterOS property names use dashes; metric names use underscores."""
    return property_name.replace("-", "_")


def description(
    subsystem: str,
    name: str,
    help_text: str,
    label_names: Sequence[str],
    kind: MetricKind = MetricKind.GAUGE,
) -> MetricDescriptor:
    """Build a descriptor under the ``mikrotik`` namespace."""
    return MetricDescriptor(
        subsystem=subsystem,
        name=name,
        help=help_text,
        label_names=tuple(label_names),
        kind=kind,
    )


def description_for_property(
    subsystem: str,
    property_name: str,
    label_names: Sequence[str],
    help_text: Optional[str] = None,
    kind: MetricKind = MetricKind.GAUGE,
) -> MetricDescriptor:
    """Descriptor named after a RouterOS property; help defaults to the property."""
    return description(
        subsystem, metric_name(property_name), help_text or property_name, label_names, kind
    )


def proplist(props: Sequence[str]) -> str:
    """The ``=.proplist=`` API word restricting a reply to ``props``."""
    return "=.proplist=" + ",".join(props)


@dataclass
class CollectContext:
    """Everything a collector may touch during one ``collect`` call."""

    sink: MetricSink
    device: Device
    session: Session

    def emit(self, descriptor: MetricDescriptor, value: float, *label_values: str) -> None:
        self.sink.emit(descriptor, value, *label_values)


class BaseCollector(ABC):
    """
    Base class for RouterOS collector plug-ins.

    Subclasses set ``name``, build their descriptors in ``__init__`` (never
    touching a device) and implement ``collect``.
    """

    name: str = ""

    def __init__(self) -> None:
        self.descriptions: Dict[str, MetricDescriptor] = {}

    def describe(self) -> List[MetricDescriptor]:
        return list(self.descriptions.values())

    @abstractmethod
    async def collect(self, ctx: CollectContext) -> None:
        """Fetch from ``ctx.session``, parse and emit into ``ctx.sink``."""

    async def run(self, ctx: CollectContext, command: str, *words: str) -> Reply:
        """Run one command, logging failures with the device they came from."""
        try:
            return await ctx.session.run(command, *words)
        except CollectError as e:
            logger.error(
                f"{self.name}: error running {command} on {ctx.device.name}: {e}",
                extra={"device": ctx.device.name, "collector": self.name},
            )
            raise

    async def fetch(self, ctx: CollectContext, command: str, *words: str) -> List[Dict[str, str]]:
        """Data records of a command's reply."""
        reply = await self.run(ctx, command, *words)
        return reply.re

    async def fetch_names(self, ctx: CollectContext, command: str, *words: str) -> List[str]:
        """The ``name`` field of every record returned by a print command."""
        records = await self.fetch(ctx, command, *words, proplist(["name"]))
        return [re.get("name", "") for re in records]

    async def count(self, ctx: CollectContext, command: str, *words: str) -> Optional[float]:
        """
        Run a ``=count-only=`` query.

        Returns None when the device reports no count. A count that is not a
        number fails the collector.
        """
        reply = await self.run(ctx, command, *words, "=count-only=")
        ret = reply.done.get("ret", "")
        if ret == "":
            return None
        try:
            return parse_float(ret)
        except ParseError as e:
            logger.error(
                f"{self.name}: error parsing count from {command} on {ctx.device.name}: {e}",
                extra={"device": ctx.device.name, "collector": self.name},
            )
            raise CollectError(f"{command}: {e}") from e

    def parse_value(
        self,
        ctx: CollectContext,
        property_name: str,
        value: str,
        parser: Callable[[str], float] = parse_float,
    ) -> Optional[float]:
        """
        Convert one field value; None (and a log line) when it does not parse.
        """
        try:
            return parser(value)
        except ParseError as e:
            self.log_parse_error(ctx, property_name, value, e)
            return None

    def log_parse_error(
        self, ctx: CollectContext, property_name: str, value: str, error: Exception
    ) -> None:
        logger.error(
            f"{self.name}: error parsing {property_name}={sanitize_for_log(value)!r} "
            f"on {ctx.device.name}: {error}",
            extra={
                "device": ctx.device.name,
                "collector": self.name,
                "property": property_name,
                "value": sanitize_for_log(value),
            },
        )
