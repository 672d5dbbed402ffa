"""
Tests for the BGP and routes collectors.
"""

import pytest

from mikrotik_exporter.collector.schemas import Reply
from mikrotik_exporter.errors import CollectError
from mikrotik_exporter.metrics.routing import BGPCollector, RoutesCollector


class TestBGPCollector:
    """Test BGP peer parsing."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                "/routing/bgp/peer/print": Reply(
                    re=[
                        {
                            "name": "transit",
                            "remote-as": "64500",
                            "state": "established",
                            "prefix-count": "850000",
                            "updates-sent": "",
                        },
                        {"name": "backup", "remote-as": "64501", "state": "idle"},
                    ]
                )
            }
        )

        await BGPCollector().collect(ctx)

        samples = by_name(ctx.sink)
        transit = ("core1", "10.0.0.1", "transit", "64500")
        backup = ("core1", "10.0.0.1", "backup", "64501")
        assert samples["up"] == [(transit, 1.0), (backup, 0.0)]
        assert (transit, 850000.0) in samples["prefix_count"]
        assert (transit, 0.0) in samples["updates_sent"]


class TestRoutesCollector:
    """Test count-only route queries."""

    @pytest.mark.asyncio
    async def test_collect(self, make_context, by_name):
        ctx = make_context(
            {
                ("/ip/route/print", "?disabled=false", "=count-only="): Reply(
                    done={"ret": "120"}
                ),
                ("/ip/route/print", "?disabled=false", "?bgp", "=count-only="): Reply(
                    done={"ret": "100"}
                ),
                ("/ipv6/route/print", "?disabled=false", "=count-only="): Reply(
                    done={"ret": "12"}
                ),
            }
        )

        await RoutesCollector().collect(ctx)

        samples = by_name(ctx.sink)
        assert samples["total_count"] == [
            (("core1", "10.0.0.1", "4"), 120.0),
            (("core1", "10.0.0.1", "6"), 12.0),
        ]
        assert samples["protocol_count"] == [(("core1", "10.0.0.1", "4", "bgp"), 100.0)]

    @pytest.mark.asyncio
    async def test_unparsable_count_fails_collector(self, make_context):
        ctx = make_context({"/ip/route/print": Reply(done={"ret": "many"})})

        with pytest.raises(CollectError):
            await RoutesCollector().collect(ctx)
