"""
Per-device RouterOS session management.

The SessionManager keeps at most one authenticated session per device in an
explicit cache. Each cache entry carries its own lock; the lock guards the
cache decision and the dial, never an in-flight RPC.
"""

import asyncio
import functools
import logging
import ssl
from concurrent.futures import Executor
from typing import Any, Dict, Iterable, Optional

import librouteros
from librouteros.api import Api
from librouteros.exceptions import (
    ConnectionClosed,
    FatalError,
    LibRouterosError,
    MultiTrapError,
    TrapError,
)

from mikrotik_exporter.collector.protocols import DeviceClient, Dialer, Session
from mikrotik_exporter.collector.schemas import Device, Reply
from mikrotik_exporter.errors import AuthError, CollectError, DialError, TransportError

logger = logging.getLogger(__name__)

API_PORT = 8728
API_SSL_PORT = 8729

# RouterOS 7 sends names and comments as UTF-8
API_ENCODING = "utf-8"


def parse_attributes(words: Iterable[str]) -> Dict[str, str]:
    """
    Split ``=key=value`` attribute words, keeping values as sent.

    Words without a leading ``=`` (``.tag=`` and the like) are skipped.
    """
    attrs: Dict[str, str] = {}
    for word in words:
        if not word.startswith("="):
            continue
        _, key, value = word.split("=", 2)
        attrs[key] = value
    return attrs


class RouterOSClient:
    """Blocking RouterOS API client over a librouteros connection."""

    def __init__(self, api: Api):
        self._api = api

    def run(self, command: str, *words: str) -> Reply:
        """
        Send one sentence and read until ``!done``.

        Raises:
            TransportError: the connection is broken
            CollectError: the device answered with ``!trap``
        """
        records = []
        done: Dict[str, str] = {}
        traps = []

        try:
            self._api.protocol.writeSentence(command, *words)
            while True:
                reply_word, reply_words = self._api.protocol.readSentence()
                attrs = parse_attributes(reply_words)
                if reply_word == "!re":
                    records.append(attrs)
                elif reply_word == "!trap":
                    traps.append(attrs.get("message", "unknown error"))
                elif reply_word == "!done":
                    done = attrs
                    break
        except (OSError, ConnectionClosed, FatalError) as e:
            raise TransportError(f"{command}: {e}") from e
        except LibRouterosError as e:
            raise CollectError(f"{command}: {e}") from e

        if traps:
            raise CollectError(f"{command}: {'; '.join(traps)}")

        return Reply(re=records, done=done)

    def close(self) -> None:
        self._api.close()


class RouterOSDialer:
    """Dials and logs in to RouterOS devices with librouteros."""

    def __init__(self, timeout: float = 5.0, tls: bool = False, insecure: bool = False):
        """
        Args:
            timeout: Connect timeout in seconds, also applied to socket reads
            tls: Use the API-SSL service
            insecure: Skip certificate verification when using TLS
        """
        self.timeout = timeout
        self.tls = tls
        self.insecure = insecure
        self.default_port = API_SSL_PORT if tls else API_PORT

    def _ssl_context(self) -> ssl.SSLContext:
        ctx = ssl.create_default_context()
        if self.insecure:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        return ctx

    def open(self, address: str, port: int, user: str, password: str) -> DeviceClient:
        kwargs: Dict[str, Any] = {
            "port": port,
            "timeout": self.timeout,
            "encoding": API_ENCODING,
        }
        if self.tls:
            kwargs["ssl_wrapper"] = functools.partial(
                self._ssl_context().wrap_socket, server_hostname=address
            )

        try:
            api = librouteros.connect(host=address, username=user, password=password, **kwargs)
        except (TrapError, MultiTrapError, FatalError) as e:
            raise AuthError(f"login to {address}:{port} failed: {e}") from e
        except (OSError, LibRouterosError) as e:
            raise DialError(f"dial {address}:{port} failed: {e}") from e

        return RouterOSClient(api)


class DeviceSession:
    """Async view of one device client; blocking calls run on an executor."""

    def __init__(self, client: DeviceClient, executor: Optional[Executor] = None):
        self.client = client
        self.executor = executor

    async def run(self, command: str, *words: str) -> Reply:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            self.executor, functools.partial(self.client.run, command, *words)
        )

    def close(self) -> None:
        try:
            self.client.close()
        except Exception as e:
            logger.debug(f"Error closing session: {e}")


class _SessionEntry:
    """Cache slot for one device."""

    __slots__ = ("lock", "session")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.session: Optional[Session] = None


class SessionManager:
    """
    Owns at most one live session per device.

    Sessions are created lazily on ``connect`` and dropped by ``invalidate``
    when a caller saw the transport break. No retries happen here; the next
    scrape pass simply connects again.
    """

    def __init__(self, dialer: Dialer, executor: Optional[Executor] = None):
        self.dialer = dialer
        self._executor = executor
        self._entries: Dict[str, _SessionEntry] = {}

    def _entry(self, device: Device) -> _SessionEntry:
        entry = self._entries.get(device.key)
        if entry is None:
            entry = _SessionEntry()
            self._entries[device.key] = entry
        return entry

    async def connect(self, device: Device) -> Session:
        """
        Return the device's session, dialing and logging in if needed.

        Raises:
            DialError: the device could not be reached
            AuthError: the login was refused
        """
        entry = self._entry(device)
        async with entry.lock:
            if entry.session is not None:
                return entry.session

            port = device.port or self.dialer.default_port
            logger.debug(f"Dialing {device.name} at {device.address}:{port}")

            loop = asyncio.get_event_loop()
            client = await loop.run_in_executor(
                self._executor,
                functools.partial(
                    self.dialer.open, device.address, port, device.user, device.password
                ),
            )

            entry.session = DeviceSession(client, self._executor)
            logger.debug(f"Logged in to {device.name}")
            return entry.session

    async def invalidate(self, device: Device) -> None:
        """Drop the cached session so the next connect redials."""
        entry = self._entry(device)
        async with entry.lock:
            if entry.session is None:
                return
            entry.session.close()
            entry.session = None
            logger.info(f"Invalidated session for {device.name}")

    def use_executor(self, executor: Optional[Executor]) -> None:
        """Run future dials and every cached session's calls on ``executor``."""
        self._executor = executor
        for entry in self._entries.values():
            if isinstance(entry.session, DeviceSession):
                entry.session.executor = executor

    def cached(self, device: Device) -> Optional[Session]:
        """The cached session, without connecting."""
        entry = self._entries.get(device.key)
        return entry.session if entry else None

    def close(self) -> None:
        """Close every cached session."""
        for entry in self._entries.values():
            if entry.session is not None:
                entry.session.close()
                entry.session = None
        logger.debug("Closed all device sessions")
