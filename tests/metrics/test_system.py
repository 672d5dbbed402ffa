"""
Tests for the resource, health and firmware collectors.
"""

import pytest

from mikrotik_exporter.collector.schemas import Reply
from mikrotik_exporter.errors import CollectError
from mikrotik_exporter.metrics.system import FirmwareCollector, HealthCollector, ResourceCollector


class TestResourceCollector:
    """Test /system/resource parsing."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/system/resource/print": Reply(
                    re=[
                        {
                            "free-memory": "104857600",
                            "total-memory": "268435456",
                            "cpu-load": "7",
                            "free-hdd-space": "8000000",
                            "total-hdd-space": "16777216",
                            "uptime": "1w2d3h4m5s",
                            "board-name": "RB4011iGS+",
                            "version": "7.12 (stable)",
                        }
                    ]
                )
            }
        )

        await ResourceCollector().collect(ctx)

        samples = by_name(ctx.sink)
        labels = ("core1", "10.0.0.1", "RB4011iGS+", "7.12 (stable)")
        assert samples["free_memory"] == [(labels, 104857600.0)]
        assert samples["cpu_load"] == [(labels, 7.0)]
        assert samples["uptime"] == [(labels, 604800 + 2 * 86400 + 3 * 3600 + 4 * 60 + 5)]
        assert len(samples) == 6

    @pytest.mark.asyncio
    async def test_unparsable_value_dropped(self, make_context, by_name):
        ctx = make_context(
            {"/system/resource/print": Reply(re=[{"cpu-load": "n/a", "uptime": "bogus"}])}
        )

        await ResourceCollector().collect(ctx)

        assert by_name(ctx.sink) == {}

    @pytest.mark.asyncio
    async def test_requests_proplist(self, make_context):
        ctx = make_context()

        await ResourceCollector().collect(ctx)

        command, *words = ctx.session.calls[0]
        assert command == "/system/resource/print"
        assert words[0].startswith("=.proplist=free-memory,")

    @pytest.mark.asyncio
    async def test_rpc_error_propagates(self, make_context):
        ctx = make_context({"/system/resource/print": CollectError("timeout")})

        with pytest.raises(CollectError):
            await ResourceCollector().collect(ctx)


class TestHealthCollector:
    """Test /system/health parsing."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {"/system/health/print": Reply(re=[{"voltage": "24.1", "temperature": "41"}])}
        )

        await HealthCollector().collect(ctx)

        samples = by_name(ctx.sink)
        assert samples == {
            "voltage": [(("core1", "10.0.0.1"), 24.1)],
            "temperature": [(("core1", "10.0.0.1"), 41.0)],
        }

    def test_help_texts(self):
        help_by_name = {d.name: d.help for d in HealthCollector().describe()}

        assert help_by_name["cpu_temperature"] == "Temperature of RouterOS CPU, in degrees Celsius"


class TestFirmwareCollector:
    """Test /system/package/getall parsing."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/system/package/getall": Reply(
                    re=[
                        {
                            "name": "routeros",
                            "disabled": "false",
                            "version": "7.12",
                            "build-time": "Nov/17/2023 11:38:45",
                        },
                        {"name": "wireless", "disabled": "true", "version": "7.12"},
                    ]
                )
            }
        )

        await FirmwareCollector().collect(ctx)

        assert by_name(ctx.sink)["package"] == [
            (("core1", "routeros", "false", "7.12", "Nov/17/2023 11:38:45"), 1.0),
            (("core1", "wireless", "true", "7.12", ""), 0.0),
        ]
