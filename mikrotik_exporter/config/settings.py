"""
Configuration for the exporter.

Two sources feed the same models: a YAML device file (``--config-file``) or
the single-device command line flags.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mikrotik_exporter.collector.schemas import Device
from mikrotik_exporter.errors import ConfigError, ParseError
from mikrotik_exporter.utils.parse import parse_duration

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = "interface,resource"
DEFAULT_LISTEN = ":9436"
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_TIMEOUT = 5.0

USER_ENV = "MIKROTIK_USER"
PASSWORD_ENV = "MIKROTIK_PASSWORD"


class ExporterConfig(BaseModel):
    """Device list and optional feature toggles."""

    devices: List[Device] = Field(default_factory=list)
    features: Dict[str, bool] = Field(default_factory=dict)

    @field_validator("devices")
    @classmethod
    def _unique_names(cls, devices: List[Device]) -> List[Device]:
        seen = set()
        for device in devices:
            if device.name in seen:
                raise ValueError(f"duplicate device name: {device.name}")
            seen.add(device.name)
        return devices

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ExporterConfig":
        """
        Load and validate a YAML configuration file.

        Raises:
            ConfigError: if the file cannot be read, is not YAML or does not validate
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"could not read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"could not parse config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"config file {path}: expected a mapping at the top level")

        try:
            config = cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"invalid config file {path}: {e}") from e

        logger.info(f"Loaded {len(config.devices)} devices from {path}")
        return config

    @classmethod
    def from_flags(
        cls,
        device: Optional[str],
        address: Optional[str],
        user: Optional[str],
        password: Optional[str],
        port: Optional[int] = None,
    ) -> "ExporterConfig":
        """
        Single-device configuration from command line flags.

        User and password fall back to ``MIKROTIK_USER`` / ``MIKROTIK_PASSWORD``.

        Raises:
            ConfigError: if a required parameter is missing
        """
        user = user or os.environ.get(USER_ENV, "")
        password = password or os.environ.get(PASSWORD_ENV, "")

        missing = [
            flag
            for flag, value in (
                ("--device", device),
                ("--address", address),
                ("--user", user),
                ("--password", password),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"missing required parameters: {', '.join(missing)}")

        try:
            return cls(
                devices=[
                    Device(name=device, address=address, user=user, password=password, port=port)
                ]
            )
        except ValidationError as e:
            raise ConfigError(f"invalid device parameters: {e}") from e

    def enabled_features(self) -> List[str]:
        """Feature names switched on in the ``features`` map, in file order."""
        return [name for name, enabled in self.features.items() if enabled]


class ExporterSettings(BaseModel):
    """Process settings derived from command line flags."""

    host: str = "0.0.0.0"
    port: int = Field(default=9436, gt=0, lt=65536)
    metrics_path: str = DEFAULT_METRICS_PATH
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    tls: bool = False
    insecure: bool = False
    features: Optional[List[str]] = None

    @field_validator("metrics_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("metrics path must start with '/'")
        return value

    def features_for(self, config: ExporterConfig) -> List[str]:
        """
        The ordered feature list to enable.

        An explicit ``--features`` flag wins; otherwise the config file's
        ``features`` map, and finally the default set.
        """
        if self.features is not None:
            return self.features
        return config.enabled_features() or split_features(DEFAULT_FEATURES)


def split_features(value: str) -> List[str]:
    """Comma separated feature list; blanks are dropped."""
    return [name.strip() for name in value.split(",") if name.strip()]


def parse_listen_address(value: str) -> Tuple[str, int]:
    """
    Split ``host:port`` (or ``:port``) into its parts.

    Raises:
        ConfigError: if the port is missing or not a number
    """
    host, sep, port = value.rpartition(":")
    if not sep:
        raise ConfigError(f"invalid listen address {value!r}: expected host:port")
    try:
        return host.strip("[]") or "0.0.0.0", int(port)
    except ValueError as e:
        raise ConfigError(f"invalid listen port in {value!r}") from e


def parse_timeout(value: str) -> float:
    """
    A timeout given as plain seconds (``2.5``) or a duration (``1m30s``).

    Raises:
        ConfigError: if the value is neither
    """
    try:
        seconds = float(value)
    except ValueError:
        try:
            seconds = parse_duration(value)
        except ParseError as e:
            raise ConfigError(f"invalid timeout {value!r}") from e

    if seconds <= 0:
        raise ConfigError(f"timeout must be positive, got {value!r}")
    return seconds
