"""
mikrotik_exporter CLI entry point.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from mikrotik_exporter import __version__
from mikrotik_exporter.config.settings import (
    DEFAULT_LISTEN,
    DEFAULT_METRICS_PATH,
    ExporterConfig,
    ExporterSettings,
    parse_listen_address,
    parse_timeout,
    split_features,
)
from mikrotik_exporter.errors import ConfigError, DiscoveryError
from mikrotik_exporter.exporter import Exporter
from mikrotik_exporter.logging_config import setup_logging
from mikrotik_exporter.metrics import default_registry

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mikrotik-exporter",
        description="Prometheus exporter for MikroTik RouterOS devices",
    )

    parser.add_argument(
        "--config-file", type=str, help="Path to a YAML device configuration file"
    )
    parser.add_argument("--device", type=str, help="Single device name")
    parser.add_argument("--address", type=str, help="Single device address")
    parser.add_argument("--deviceport", type=int, help="Single device API port")
    parser.add_argument("--user", type=str, help="Single device user (env MIKROTIK_USER)")
    parser.add_argument(
        "--password", type=str, help="Single device password (env MIKROTIK_PASSWORD)"
    )

    parser.add_argument(
        "--port", type=str, default=DEFAULT_LISTEN, help="Listen address (default %(default)s)"
    )
    parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_METRICS_PATH,
        help="Path serving metrics (default %(default)s)",
    )
    parser.add_argument(
        "--timeout", type=str, default="5s", help="Device timeout, seconds or duration"
    )
    parser.add_argument("--tls", action="store_true", help="Use the API-SSL service")
    parser.add_argument(
        "--insecure", action="store_true", help="Skip TLS certificate verification"
    )
    parser.add_argument(
        "--features",
        type=str,
        help=f"Comma separated collectors to enable ({', '.join(default_registry().names())})",
    )

    parser.add_argument("--log-format", choices=["json", "text"], default="json")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        type=str.upper,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> ExporterConfig:
    if args.config_file:
        return ExporterConfig.from_file(args.config_file)
    return ExporterConfig.from_flags(
        args.device, args.address, args.user, args.password, args.deviceport
    )


def load_settings(args: argparse.Namespace) -> ExporterSettings:
    host, port = parse_listen_address(args.port)
    try:
        return ExporterSettings(
            host=host,
            port=port,
            metrics_path=args.path,
            timeout=parse_timeout(args.timeout),
            tls=args.tls,
            insecure=args.insecure,
            features=split_features(args.features) if args.features is not None else None,
        )
    except ValueError as e:
        raise ConfigError(f"invalid settings: {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level, args.log_format)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args)
        settings = load_settings(args)
        exporter = Exporter(config, settings)
        asyncio.run(exporter.serve())
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except DiscoveryError as e:
        logger.error(f"Discovery failed: {e}")
        print(f"Discovery failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_OK
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"Error running mikrotik_exporter: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
