"""
Device discovery.

Expands SRV discovery templates into concrete devices before any scrape pass
starts. Preparation is fail-fast: a DNS or identity lookup failure aborts it
and no partial device list is ever returned.
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor
from typing import List, Optional

import dns.exception
import dns.resolver

from mikrotik_exporter.collector.protocols import SrvResolver
from mikrotik_exporter.collector.schemas import Device, DnsServer
from mikrotik_exporter.collector.session import SessionManager
from mikrotik_exporter.errors import CollectError, ConnectError, DiscoveryError

logger = logging.getLogger(__name__)

IDENTITY_COMMAND = "/system/identity/print"


class DnsSrvResolver:
    """SRV lookups with dnspython."""

    def __init__(self, lifetime: float = 5.0):
        self.lifetime = lifetime

    def resolve_srv(self, record: str, nameserver: Optional[DnsServer] = None) -> List[str]:
        resolver = dns.resolver.Resolver(configure=nameserver is None)
        resolver.lifetime = self.lifetime

        try:
            if nameserver is not None:
                # dnspython only accepts IP addresses here
                resolver.nameservers = [nameserver.address]
                resolver.port = nameserver.port
                logger.info(f"Using custom DNS server {nameserver.address}:{nameserver.port}")
            answer = resolver.resolve(record, "SRV")
        except ValueError as e:
            raise DiscoveryError(f"invalid DNS server {nameserver.address}: {e}") from e
        except dns.exception.DNSException as e:
            raise DiscoveryError(f"SRV lookup for {record} failed: {e}") from e

        return [str(rdata.target).rstrip(".") for rdata in answer]


class DeviceRegistry:
    """
    Resolves the configured device list into addressable devices.

    Static devices pass through; their session is opened early as a
    reachability probe. Template devices are replaced by one device per SRV
    target, named after the identity each target reports.
    """

    def __init__(
        self,
        sessions: SessionManager,
        resolver: Optional[SrvResolver] = None,
        executor: Optional[Executor] = None,
    ):
        self.sessions = sessions
        self.resolver = resolver or DnsSrvResolver()
        self._executor = executor

    async def prepare(self, devices: List[Device]) -> List[Device]:
        """
        Expand templates, in input order, one device at a time.

        Raises:
            DiscoveryError: any SRV lookup or identity lookup failed
        """
        resolved: List[Device] = []

        for device in devices:
            if not device.is_template:
                await self._probe(device)
                resolved.append(device)
                continue

            resolved.extend(await self._expand(device))

        logger.info(f"Prepared {len(resolved)} devices from {len(devices)} configured")
        return resolved

    async def _probe(self, device: Device) -> None:
        try:
            await self.sessions.connect(device)
        except ConnectError as e:
            logger.warning(
                f"Device {device.name} is not reachable yet: {e}",
                extra={"device": device.name},
            )

    async def _expand(self, template: Device) -> List[Device]:
        srv = template.srv
        logger.info(f"SRV configuration detected: {srv.record}", extra={"device": template.name})

        loop = asyncio.get_event_loop()
        targets = await loop.run_in_executor(
            self._executor, functools.partial(self.resolver.resolve_srv, srv.record, srv.dns)
        )

        devices = []
        for target in targets:
            device = Device(
                name=target,
                address=target,
                user=template.user,
                password=template.password,
                port=template.port,
            )
            device.name = await self._identity(device)
            devices.append(device)

        logger.info(f"SRV record {srv.record} resolved to {len(devices)} devices")
        return devices

    async def _identity(self, device: Device) -> str:
        """The name the device reports for itself, falling back to its address."""
        try:
            session = await self.sessions.connect(device)
            reply = await session.run(IDENTITY_COMMAND)
        except (ConnectError, CollectError) as e:
            logger.error(
                f"Error fetching identity of {device.address}: {e}",
                extra={"device": device.name},
            )
            raise DiscoveryError(f"identity lookup for {device.address} failed: {e}") from e

        name = device.name
        for record in reply.re:
            name = record.get("name") or name
        return name
