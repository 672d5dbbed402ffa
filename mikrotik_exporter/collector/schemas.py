"""
Type-safe data model for the scrape core.

Devices, metric descriptors, RouterOS replies and per-device scrape results.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

NAMESPACE = "mikrotik"


# ============================================================================
# DEVICES
# ============================================================================


class DnsServer(BaseModel):
    """Custom resolver used for an SRV lookup."""

    address: str = Field(min_length=1)
    port: int = Field(default=53, gt=0, lt=65536)


class SrvRecord(BaseModel):
    """Discovery template: a DNS SRV record naming the devices to monitor."""

    record: str = Field(min_length=1)
    dns: Optional[DnsServer] = None


class Device(BaseModel):
    """
    One monitored RouterOS endpoint.

    A device either has a fixed address or an SRV discovery template, never
    both. Template devices are expanded by discovery before any scrape.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    address: Optional[str] = None
    srv: Optional[SrvRecord] = None
    user: str = ""
    password: str = ""
    port: Optional[int] = Field(default=None, gt=0, lt=65536)

    @model_validator(mode="after")
    def _check_target(self) -> "Device":
        if self.srv is not None and self.address:
            raise ValueError(f"device {self.name}: 'address' and 'srv' are mutually exclusive")
        if self.srv is None and not self.address:
            raise ValueError(f"device {self.name}: one of 'address' or 'srv' is required")
        return self

    @property
    def is_template(self) -> bool:
        return self.srv is not None

    @property
    def key(self) -> str:
        """Stable identity used to key the session cache (survives renames)."""
        return f"{self.address}:{self.port or ''}"


# ============================================================================
# METRICS
# ============================================================================


class MetricKind(str, Enum):
    """Prometheus value type of a published series."""

    GAUGE = "gauge"
    COUNTER = "counter"


class MetricDescriptor(BaseModel):
    """Identity of a published time series."""

    model_config = ConfigDict(frozen=True)

    subsystem: str
    name: str
    help: str
    label_names: Tuple[str, ...] = ()
    kind: MetricKind = MetricKind.GAUGE
    namespace: str = NAMESPACE

    @property
    def fq_name(self) -> str:
        return "_".join(part for part in (self.namespace, self.subsystem, self.name) if part)


# ============================================================================
# DEVICE REPLIES AND RESULTS
# ============================================================================


class Reply(BaseModel):
    """
    A RouterOS API reply.

    ``re`` holds the data records in order; ``done`` is the terminal record,
    which carries ``ret`` for count-only queries.
    """

    re: List[Dict[str, str]] = Field(default_factory=list)
    done: Dict[str, str] = Field(default_factory=dict)


class ScrapeResult(BaseModel):
    """Outcome of one device within one scrape pass."""

    device: str
    duration_seconds: float = Field(ge=0)
    success: bool
    error: Optional[str] = None
