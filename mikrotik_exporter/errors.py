"""
Exception hierarchy for the exporter.

Startup errors (configuration, discovery) are fatal. Connect and collect
errors are scoped to one device and one scrape pass. Parse errors are scoped
to a single metric point.
"""

import math
from typing import Optional, Tuple


class ExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigError(ExporterError):
    """Malformed device list, missing single-device parameters or bad flags."""


class UnknownCollectorError(ConfigError):
    """A requested feature name has no registered collector."""

    def __init__(self, name: str):
        super().__init__(f"no collector for {name}")
        self.name = name


class DiscoveryError(ExporterError):
    """DNS SRV expansion or identity lookup failed while preparing devices."""


class ConnectError(ExporterError):
    """Could not obtain an authenticated session for a device."""


class DialError(ConnectError):
    """TCP/TLS dial to the device failed or timed out."""


class AuthError(ConnectError):
    """The device rejected the login."""


class CollectError(ExporterError):
    """A collector's RPC or parse step failed."""


class TransportError(CollectError):
    """The session transport broke while in use (broken pipe, reset, closed)."""


class ParseError(ExporterError, ValueError):
    """A single field value could not be converted to a number."""

    def __init__(
        self,
        message: str,
        value: Optional[str] = None,
        placeholders: Tuple[float, ...] = (),
    ):
        super().__init__(message)
        self.value = value
        self.placeholders = placeholders

    @classmethod
    def for_pair(cls, message: str, value: str) -> "ParseError":
        """Parse error for a two-value field, carrying NaN placeholders."""
        return cls(message, value=value, placeholders=(math.nan, math.nan))
