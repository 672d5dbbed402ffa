"""
Tests for the wireless, w60g and LTE collectors.
"""

import pytest

from mikrotik_exporter.collector.schemas import MetricKind, Reply
from mikrotik_exporter.metrics.wireless import (
    LteCollector,
    W60GInterfaceCollector,
    WlanIFCollector,
    WlanSTACollector,
)


class TestWlanSTACollector:
    """Test the registration table."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/wireless/registration-table/print": Reply(
                    re=[
                        {
                            "interface": "wlan1",
                            "mac-address": "AA:BB:CC:DD:EE:FF",
                            "signal-to-noise": "38",
                            "signal-strength": "-63@6Mbps",
                            "packets": "100,200",
                            "bytes": "1000,2000",
                            "frames": "oops,5",
                        }
                    ]
                )
            }
        )

        await WlanSTACollector().collect(ctx)

        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "wlan1", "AA:BB:CC:DD:EE:FF")
        assert samples["signal_to_noise"] == [(labels, 38.0)]
        assert samples["signal_strength"] == [(labels, -63.0)]
        assert samples["tx_packets"] == [(labels, 100.0)]
        assert samples["rx_packets"] == [(labels, 200.0)]
        assert samples["rx_bytes"] == [(labels, 2000.0)]
        assert "tx_frames" not in samples
        assert "rx_frames" not in samples

    def test_traffic_pairs_are_counters(self):
        kinds = {d.name: d.kind for d in WlanSTACollector().describe()}

        assert kinds["tx_bytes"] == MetricKind.COUNTER
        assert kinds["signal_strength"] == MetricKind.GAUGE


class TestWlanIFCollector:
    """Test wireless interface monitoring."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/wireless/print": Reply(re=[{"name": "wlan1"}]),
                "/interface/wireless/monitor": Reply(
                    re=[
                        {
                            "channel": "2412/20-Ce/gn",
                            "registered-clients": "4",
                            "noise-floor": "-110",
                            "overall-tx-ccq": "",
                        }
                    ]
                ),
            }
        )

        await WlanIFCollector().collect(ctx)

        assert ctx.session.calls[0][1] == "?disabled=false"
        assert ctx.session.calls[1][1] == "=numbers=wlan1"
        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "wlan1", "2412/20-Ce/gn")
        assert samples == {
            "registered_clients": [(labels, 4.0)],
            "noise_floor": [(labels, -110.0)],
        }

    @pytest.mark.asyncio
    async def test_empty_monitor_reply(self, make_context, by_name):
        ctx = make_context({"/interface/wireless/print": Reply(re=[{"name": "wlan1"}])})

        await WlanIFCollector().collect(ctx)

        assert by_name(ctx.sink) == {}


class TestW60GInterfaceCollector:
    """Test 60 GHz monitoring."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/w60g/print": Reply(re=[{"name": "wlan60-1"}]),
                "/interface/w60g/monitor": Reply(
                    re=[
                        {
                            "name": "wlan60-1",
                            "signal": "80",
                            "rssi": "-55",
                            "frequency": "60480",
                            "distance": "120",
                        }
                    ]
                ),
            }
        )

        await W60GInterfaceCollector().collect(ctx)

        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "wlan60-1")
        assert samples["signal"] == [(labels, 80.0)]
        assert samples["rssi"] == [(labels, -55.0)]
        assert samples["frequency"] == [(labels, 60480.0)]
        assert samples["txDistance"] == [(labels, 120.0)]

    def test_metric_names(self):
        names = {d.fq_name for d in W60GInterfaceCollector().describe()}

        assert "mikrotik_w60ginterface_txPHYRate" in names
        assert len(names) == 8


class TestLteCollector:
    """Test LTE interface info."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/interface/lte/print": Reply(re=[{"name": "lte1"}]),
                "/interface/lte/info": Reply(
                    re=[
                        {
                            "current-cellid": "123456",
                            "primary-band": "B3@20Mhz earfcn: 1300 phy-cellid: 12",
                            "ca-band": "",
                            "rssi": "-70",
                            "rsrp": "-100",
                            "rsrq": "-11",
                            "sinr": "9",
                        }
                    ]
                ),
            }
        )

        await LteCollector().collect(ctx)

        assert ctx.session.calls[1][1] == "=number=lte1"
        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "lte1", "123456", "B3@20Mhz", "")
        assert samples["rssi"] == [(labels, -70.0)]
        assert samples["sinr"] == [(labels, 9.0)]
        assert len(samples) == 4
