"""
Pytest configuration and fixtures for mikrotik_exporter tests.

Fakes stand in for the RouterOS API and DNS: sessions and clients answer
from a table of canned replies keyed by command, or by command plus words.
"""

from typing import Dict, List, Optional, Tuple, Union

import pytest

from mikrotik_exporter.collector.base import CollectContext
from mikrotik_exporter.collector.schemas import Device, DnsServer, Reply
from mikrotik_exporter.collector.sink import MetricSink

Response = Union[Reply, Exception]


def _lookup(responses: Dict, command: str, words: Tuple[str, ...]) -> Reply:
    key = (command,) + tuple(words)
    if key in responses:
        response = responses[key]
    else:
        response = responses.get(command, Reply())
    if isinstance(response, Exception):
        raise response
    return response


class FakeSession:
    """Async session answering from canned replies."""

    def __init__(self, responses: Optional[Dict] = None):
        self.responses = responses or {}
        self.calls: List[Tuple[str, ...]] = []
        self.closed = False

    async def run(self, command: str, *words: str) -> Reply:
        self.calls.append((command,) + words)
        return _lookup(self.responses, command, words)

    def close(self) -> None:
        self.closed = True


class FakeClient:
    """Blocking device client answering from canned replies."""

    def __init__(self, responses: Optional[Dict] = None):
        self.responses = responses or {}
        self.calls: List[Tuple[str, ...]] = []
        self.closed = False

    def run(self, command: str, *words: str) -> Reply:
        self.calls.append((command,) + words)
        return _lookup(self.responses, command, words)

    def close(self) -> None:
        self.closed = True


class FakeDialer:
    """
    Dialer handing out FakeClients per address.

    ``failures`` maps an address to the exception its dial raises.
    """

    default_port = 8728

    def __init__(self) -> None:
        self.clients: Dict[str, FakeClient] = {}
        self.failures: Dict[str, Exception] = {}
        self.opened: List[Tuple[str, int, str, str]] = []

    def open(self, address: str, port: int, user: str, password: str) -> FakeClient:
        self.opened.append((address, port, user, password))
        if address in self.failures:
            raise self.failures[address]
        return self.clients.setdefault(address, FakeClient())


class FakeResolver:
    """SRV resolver returning fixed targets per record."""

    def __init__(self, records: Optional[Dict[str, Response]] = None):
        self.records = records or {}
        self.queries: List[Tuple[str, Optional[DnsServer]]] = []

    def resolve_srv(self, record: str, nameserver: Optional[DnsServer] = None) -> List[str]:
        self.queries.append((record, nameserver))
        targets = self.records.get(record, [])
        if isinstance(targets, Exception):
            raise targets
        return list(targets)


@pytest.fixture
def device():
    """A static device."""
    return Device(name="core1", address="10.0.0.1", user="prometheus", password="secret")


@pytest.fixture
def dialer():
    return FakeDialer()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def make_context(device):
    """Build a CollectContext over a FakeSession with the given replies."""

    def _make(responses: Optional[Dict] = None) -> CollectContext:
        return CollectContext(sink=MetricSink(), device=device, session=FakeSession(responses))

    return _make


def samples_by_name(sink: MetricSink) -> Dict[str, List[Tuple[Tuple[str, ...], float]]]:
    """Every sample in a sink, keyed by the descriptor's short name."""
    return {d.name: sink.samples(d) for d in sink.descriptors()}


@pytest.fixture
def by_name():
    return samples_by_name


@pytest.fixture
def fake_session():
    """The FakeSession class, for tests building several sessions."""
    return FakeSession


@pytest.fixture
def fake_client():
    """The FakeClient class, for tests preloading dialer clients."""
    return FakeClient
