"""
Protocols defining the contracts between scrape components.

These protocols define what each collaborator promises to provide, so the
session layer, discovery and collectors can be substituted with fakes in
tests.
"""

from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

from mikrotik_exporter.collector.schemas import DnsServer, MetricDescriptor, Reply

if TYPE_CHECKING:
    from mikrotik_exporter.collector.base import CollectContext


# ============================================================================
# DEVICE SESSIONS
# ============================================================================


@runtime_checkable
class Session(Protocol):
    """An authenticated, open connection to one device."""

    async def run(self, command: str, *words: str) -> Reply:
        """
        Issue one command and return the full reply.

        Promises:
        - Raises TransportError when the underlying connection is broken
        - Raises CollectError when the device answers with an error
        """
        ...

    def close(self) -> None:
        """Close the connection. Never raises."""
        ...


@runtime_checkable
class DeviceClient(Protocol):
    """Blocking RouterOS client owned by one session."""

    def run(self, command: str, *words: str) -> Reply: ...

    def close(self) -> None: ...


@runtime_checkable
class Dialer(Protocol):
    """Opens authenticated clients. Blocking; called from an executor."""

    default_port: int

    def open(self, address: str, port: int, user: str, password: str) -> DeviceClient:
        """
        Dial and log in.

        Promises:
        - Raises DialError when the TCP/TLS connection cannot be made
        - Raises AuthError when the login is refused
        """
        ...


# ============================================================================
# DISCOVERY
# ============================================================================


@runtime_checkable
class SrvResolver(Protocol):
    """Resolves DNS SRV records. Blocking; called from an executor."""

    def resolve_srv(self, record: str, nameserver: Optional[DnsServer] = None) -> List[str]:
        """
        Return the target host names of every SRV answer, without trailing dot.

        Promises:
        - Uses ``nameserver`` when given, else the host's default resolver
        - Raises DiscoveryError on any DNS failure
        """
        ...


# ============================================================================
# COLLECTOR PLUG-INS
# ============================================================================


@runtime_checkable
class MetricCollector(Protocol):
    """A named feature that publishes metrics read from one device session."""

    def describe(self) -> List[MetricDescriptor]:
        """Descriptors published by this instance; stable across collect calls."""
        ...

    async def collect(self, ctx: "CollectContext") -> None:
        """
        Read from ``ctx.session`` and emit samples into ``ctx.sink``.

        Promises:
        - Raises CollectError (or TransportError) when a device RPC fails
        - Drops and logs single unparsable values instead of raising
        - Does not keep ``ctx.session`` beyond the call
        """
        ...
