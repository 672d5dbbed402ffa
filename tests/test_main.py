"""
Tests for the command line entry point.
"""

from unittest.mock import patch

import pytest

from mikrotik_exporter.__main__ import (
    EXIT_CONFIG,
    EXIT_FAILURE,
    EXIT_OK,
    build_parser,
    load_settings,
    main,
)
from mikrotik_exporter.errors import ConfigError, DiscoveryError


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("mikrotik_exporter.__main__.setup_logging"):
        yield


class TestMain:
    """Test startup and exit codes."""

    def test_missing_single_device_parameters(self, monkeypatch):
        monkeypatch.delenv("MIKROTIK_USER", raising=False)
        monkeypatch.delenv("MIKROTIK_PASSWORD", raising=False)

        assert main(["--device", "core1"]) == EXIT_CONFIG

    def test_unknown_feature(self):
        argv = ["--device", "r1", "--address", "10.0.0.1", "--user", "u", "--password", "p"]

        assert main(argv + ["--features", "bgp,does-not-exist"]) == EXIT_CONFIG

    def test_invalid_config_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("devices:\n  - name: r1\n")

        assert main(["--config-file", str(path)]) == EXIT_CONFIG

    def test_discovery_failure(self):
        argv = ["--device", "r1", "--address", "10.0.0.1", "--user", "u", "--password", "p"]
        with patch(
            "mikrotik_exporter.__main__.Exporter.serve", side_effect=DiscoveryError("NXDOMAIN")
        ):
            assert main(argv) == EXIT_FAILURE

    def test_clean_shutdown(self):
        argv = ["--device", "r1", "--address", "10.0.0.1", "--user", "u", "--password", "p"]
        with patch("mikrotik_exporter.__main__.Exporter.serve", return_value=None) as serve:
            assert main(argv) == EXIT_OK

        serve.assert_awaited_once()


class TestLoadSettings:
    """Test flag conversion."""

    def test_defaults(self):
        settings = load_settings(build_parser().parse_args([]))

        assert settings.host == "0.0.0.0"
        assert settings.port == 9436
        assert settings.metrics_path == "/metrics"
        assert settings.timeout == 5.0
        assert settings.features is None

    def test_flags(self):
        args = build_parser().parse_args(
            ["--port", "127.0.0.1:9000", "--timeout", "2s", "--tls", "--features", "bgp, routes"]
        )

        settings = load_settings(args)

        assert (settings.host, settings.port) == ("127.0.0.1", 9000)
        assert settings.timeout == 2.0
        assert settings.tls
        assert settings.features == ["bgp", "routes"]

    def test_bad_path(self):
        with pytest.raises(ConfigError):
            load_settings(build_parser().parse_args(["--path", "metrics"]))
