"""
Tests for the interface and optics collectors.
"""

import pytest

from mikrotik_exporter.collector.schemas import MetricKind, Reply
from mikrotik_exporter.metrics.interface import InterfaceCollector, OpticsCollector


class TestInterfaceCollector:
    """Test /interface/print parsing."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/print": Reply(
                    re=[
                        {
                            "name": "ether1",
                            "type": "ether",
                            "disabled": "false",
                            "comment": "uplink",
                            "running": "true",
                            "actual-mtu": "1500",
                            "rx-byte": "1000",
                            "tx-byte": "2000",
                            "rx-error": "bad",
                        }
                    ]
                )
            }
        )

        await InterfaceCollector().collect(ctx)

        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "ether1", "ether", "false", "uplink", "true", "")
        assert samples["actual_mtu"] == [(labels, 1500.0)]
        assert samples["running"] == [(labels, 1.0)]
        assert samples["rx_byte"] == [(labels, 1000.0)]
        assert samples["tx_byte"] == [(labels, 2000.0)]
        assert "rx_error" not in samples

    def test_traffic_counters_are_counters(self):
        kinds = {d.name: d.kind for d in InterfaceCollector().describe()}

        assert kinds["rx_byte"] == MetricKind.COUNTER
        assert kinds["actual_mtu"] == MetricKind.GAUGE


class TestOpticsCollector:
    """Test SFP monitoring."""

    @pytest.mark.asyncio
    async def test_monitors_only_sfp_ports(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/ethernet/print": Reply(
                    re=[{"name": "ether1"}, {"name": "sfp1"}, {"name": "sfp-sfpplus2"}]
                ),
                "/interface/ethernet/monitor": Reply(
                    re=[
                        {
                            "name": "sfp1",
                            "sfp-rx-loss": "false",
                            "sfp-tx-fault": "true",
                            "sfp-temperature": "35",
                            "sfp-rx-power": "-5.2",
                        }
                    ]
                ),
            }
        )

        await OpticsCollector().collect(ctx)

        monitor_call = ctx.session.calls[1]
        assert monitor_call[1] == "=numbers=sfp1,sfp-sfpplus2"
        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "sfp1")
        assert samples["rx_status"] == [(labels, 1.0)]
        assert samples["tx_status"] == [(labels, 0.0)]
        assert samples["temperature_celsius"] == [(labels, 35.0)]
        assert samples["rx_power_dbm"] == [(labels, -5.2)]

    @pytest.mark.asyncio
    async def test_no_sfp_ports_skips_monitor(self, make_context):
        ctx = make_context({"/interface/ethernet/print": Reply(re=[{"name": "ether1"}])})

        await OpticsCollector().collect(ctx)

        assert len(ctx.session.calls) == 1

    @pytest.mark.asyncio
    async def test_parse_failure_skips_rest_of_interface(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/ethernet/print": Reply(re=[{"name": "sfp1"}]),
                "/interface/ethernet/monitor": Reply(
                    re=[{"name": "sfp1", "sfp-temperature": "hot", "sfp-rx-power": "-5.2"}]
                ),
            }
        )

        await OpticsCollector().collect(ctx)

        assert by_name(ctx.sink) == {}
