"""Tests for the adaptive sample collector."""

import asyncio
import logging
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest
from aiohttp import web

from lambda_memory_bench.collector import SampleCollector, collect_tiers
from lambda_memory_bench.config_module import FamilyConfig, TierConfig
from lambda_memory_bench.models import AggregatedResult


def _tier(**overrides):
    settings = dict(
        endpoint_url="https://api.example.com/prod/basic-128",
        memory_mb=128,
        target_cold=2,
        target_warm=3,
        max_concurrent=5,
        batch_delay_ms=0,
        max_total_requests=20,
        error_backoff_ms=0,
    )
    settings.update(overrides)
    return TierConfig(**settings)


class TestSampleCollector:
    """Test the batching loop."""

    @pytest.mark.asyncio
    async def test_single_batch_meets_targets(self, tier_config, envelope_factory):
        collector = SampleCollector(tier_config)
        bodies = [envelope_factory(duration=300.0, cold_start=True)] * 2 + [
            envelope_factory(duration=10.0)
        ] * 3

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=bodies)):
            result = await collector.collect()

        assert result.cold_stats.count == 2
        assert result.cold_stats.average == pytest.approx(300.0)
        assert result.warm_stats.count == 3
        assert result.requests_attempted == 5
        assert result.errors == 0

    @pytest.mark.asyncio
    async def test_samples_over_target_are_discarded(self, envelope_factory, caplog):
        caplog.set_level(logging.DEBUG, logger="lambda_memory_bench.collector")
        collector = SampleCollector(_tier(target_cold=5, target_warm=20, max_concurrent=20, max_total_requests=100))

        batch = [envelope_factory(duration=250.0, cold_start=True)] * 5 + [
            envelope_factory(duration=15.0)
        ] * 15
        fetch = AsyncMock(side_effect=batch + batch)

        with patch.object(collector, "_fetch", new=fetch):
            result = await collector.collect()

        assert fetch.await_count == 40
        assert len(collector.trial_set.cold_samples) == 5
        assert len(collector.trial_set.warm_samples) == 20
        assert result.cold_stats.count == 5

        discarded_cold = [
            r for r in caplog.records if r.getMessage().startswith("Cold Start (discarded - have enough)")
        ]
        assert len(discarded_cold) == 5

    @pytest.mark.asyncio
    async def test_targets_never_overshoot(self, envelope_factory):
        collector = SampleCollector(_tier(target_cold=1, target_warm=1, max_concurrent=10))
        bodies = [envelope_factory(duration=300.0, cold_start=True)] * 4 + [
            envelope_factory(duration=10.0)
        ] * 6

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=bodies)):
            result = await collector.collect()

        assert len(collector.trial_set.cold_samples) == 1
        assert len(collector.trial_set.warm_samples) == 1
        assert result.cold_stats.count == 1
        assert result.warm_stats.count == 1

    @pytest.mark.asyncio
    async def test_malformed_responses_are_counted_as_errors(self, tier_config, envelope_factory, caplog):
        collector = SampleCollector(tier_config)
        bodies = [
            "not json",
            '{"performance": {}}',
            "[1, 2]",
            envelope_factory(duration=300.0, cold_start=True),
            envelope_factory(duration=10.0),
        ]
        good_batch = [envelope_factory(duration=300.0, cold_start=True)] + [
            envelope_factory(duration=10.0)
        ] * 4

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=bodies + good_batch)):
            result = await collector.collect()

        assert result.errors == 3
        assert result.requests_attempted == 10
        assert result.cold_stats.count == 2
        assert result.warm_stats.count == 3
        assert any("Error response from" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_undecodable_body_is_counted_as_error(self, tier_config, envelope_factory):
        collector = SampleCollector(tier_config)
        bodies = [b"\x80\xff not json"] + [
            envelope_factory(duration=300.0, cold_start=True).encode()
        ] * 2 + [envelope_factory(duration=10.0).encode()] * 2
        second = [envelope_factory(duration=10.0).encode()] * 5

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=bodies + second)):
            result = await collector.collect()

        assert result.errors == 1
        assert result.cold_stats.count == 2
        assert result.warm_stats.count == 3

    @pytest.mark.asyncio
    async def test_partial_batch_failure_keeps_successes(self, tier_config, envelope_factory):
        collector = SampleCollector(tier_config)
        bodies = [
            aiohttp.ClientError("connection reset"),
            asyncio.TimeoutError(),
            envelope_factory(duration=300.0, cold_start=True),
            envelope_factory(duration=300.0, cold_start=True),
            envelope_factory(duration=10.0),
        ]
        second = [envelope_factory(duration=10.0)] * 5

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=bodies + second)):
            result = await collector.collect()

        assert result.errors == 2
        assert result.cold_stats.count == 2
        assert result.warm_stats.count == 3
        assert result.requests_attempted == 10

    @pytest.mark.asyncio
    async def test_failed_batch_backs_off_and_retries(self, tier_config, envelope_factory, caplog):
        collector = SampleCollector(tier_config)
        failures = [aiohttp.ClientError("boom")] * 5
        good = [envelope_factory(duration=300.0, cold_start=True)] * 2 + [
            envelope_factory(duration=10.0)
        ] * 3

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=failures + good)):
            result = await collector.collect()

        batch_errors = [r for r in caplog.records if r.getMessage().startswith("Batch error")]
        assert len(batch_errors) == 1
        assert result.errors == 5
        assert result.requests_attempted == 10
        assert result.cold_stats.count == 2
        assert result.warm_stats.count == 3

    @pytest.mark.asyncio
    async def test_stops_at_request_ceiling(self, tier_config, envelope_factory):
        collector = SampleCollector(tier_config)
        warm_body = envelope_factory(duration=10.0)

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=lambda session: warm_body)):
            result = await collector.collect()

        # 5 requests per batch; the loop exits once more than 20 were attempted
        assert result.requests_attempted == 25
        assert result.cold_stats is None
        assert result.warm_stats.count == 3

    @pytest.mark.asyncio
    async def test_persistent_transport_failure_terminates(self, tier_config):
        collector = SampleCollector(tier_config)

        with patch.object(
            collector, "_fetch", new=AsyncMock(side_effect=aiohttp.ClientError("unreachable"))
        ):
            result = await collector.collect()

        assert result.requests_attempted == 25
        assert result.errors == 25
        assert result.warm_stats is None
        assert result.cold_stats is None

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, tier_config):
        collector = SampleCollector(tier_config)

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=RuntimeError("bug"))):
            with pytest.raises(RuntimeError, match="bug"):
                await collector.collect()

    @pytest.mark.asyncio
    async def test_memory_taken_from_response(self, tier_config, envelope_factory):
        collector = SampleCollector(tier_config)
        bodies = [envelope_factory(duration=300.0, cold_start=True, memory_limit="128")] * 2 + [
            envelope_factory(duration=10.0, request_id=f"req-{i}") for i in range(3)
        ]

        with patch.object(collector, "_fetch", new=AsyncMock(side_effect=bodies)):
            await collector.collect()

        samples = collector.trial_set.cold_samples + collector.trial_set.warm_samples
        assert {s.memory_mb for s in samples} == {128}
        assert sorted(s.request_number for s in samples) == [1, 2, 3, 4, 5]
        assert sorted(s.request_id for s in collector.trial_set.warm_samples) == ["req-0", "req-1", "req-2"]


class TestCollectTiers:
    """Test per-family collection."""

    @pytest.mark.asyncio
    async def test_tiers_collected_in_order(self):
        family = FamilyConfig(function_type="computation", memory_sizes=[128, 1024], target_cold=1)
        seen = []

        async def fake_collect(self):
            seen.append(self.config.endpoint_url)
            return AggregatedResult(memory_mb=self.config.memory_mb)

        with patch.object(SampleCollector, "collect", new=fake_collect):
            results = await collect_tiers(family, "https://api.example.com/prod")

        assert seen == [
            "https://api.example.com/prod/computation-128",
            "https://api.example.com/prod/computation-1024",
        ]
        assert [r.memory_mb for r in results] == [128, 1024]


@asynccontextmanager
async def serve(handler):
    """Run a local endpoint and yield its URL."""
    app = web.Application()
    app.router.add_get("/basic-128", handler)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    try:
        host, port = runner.addresses[0][:2]
        yield f"http://{host}:{port}/basic-128"
    finally:
        await runner.cleanup()


def sequenced_handler(responses):
    """Answer the n-th request with responses[n], repeating the last one."""
    calls = []

    async def handler(request):
        calls.append(request)
        body = responses[min(len(calls), len(responses)) - 1]
        if isinstance(body, bytes):
            return web.Response(body=body, content_type="application/json")
        return web.Response(text=body, content_type="application/json")

    return handler


class TestHttpCollection:
    """Test collection against a local HTTP endpoint."""

    @pytest.mark.asyncio
    async def test_valid_envelopes(self, envelope_factory):
        handler = sequenced_handler(
            [envelope_factory(duration=300.0, cold_start=True), envelope_factory(duration=10.0)]
        )

        async with serve(handler) as url:
            collector = SampleCollector(_tier(endpoint_url=url, target_cold=1, target_warm=2, max_concurrent=3))
            result = await collector.collect()

        assert result.requests_attempted == 3
        assert result.errors == 0
        assert result.cold_stats.count == 1
        assert result.cold_stats.average == pytest.approx(300.0)
        assert result.warm_stats.count == 2

    @pytest.mark.asyncio
    async def test_non_json_body(self, envelope_factory):
        handler = sequenced_handler(
            [
                "<html>Bad Gateway</html>",
                envelope_factory(duration=300.0, cold_start=True),
                envelope_factory(duration=10.0),
            ]
        )

        async with serve(handler) as url:
            collector = SampleCollector(_tier(endpoint_url=url, target_cold=1, target_warm=2, max_concurrent=4))
            result = await collector.collect()

        assert result.requests_attempted == 4
        assert result.errors == 1
        assert result.cold_stats.count == 1
        assert result.warm_stats.count == 2

    @pytest.mark.asyncio
    async def test_non_utf8_body(self, envelope_factory):
        handler = sequenced_handler(
            [
                b"\x80\xff not utf8",
                envelope_factory(duration=300.0, cold_start=True),
                envelope_factory(duration=10.0),
            ]
        )

        async with serve(handler) as url:
            collector = SampleCollector(_tier(endpoint_url=url, target_cold=1, target_warm=2, max_concurrent=4))
            result = await collector.collect()

        assert result.errors == 1
        assert result.cold_stats.count == 1
        assert result.warm_stats.count == 2

    @pytest.mark.asyncio
    async def test_request_timeout_is_a_transport_error(self, caplog):
        async def slow(request):
            await asyncio.sleep(0.5)
            return web.Response(text="{}")

        async with serve(slow) as url:
            collector = SampleCollector(
                _tier(endpoint_url=url, max_concurrent=2, max_total_requests=2, request_timeout_s=0.05)
            )
            result = await collector.collect()

        batch_errors = [r for r in caplog.records if r.getMessage().startswith("Batch error")]
        assert len(batch_errors) == 2
        assert result.requests_attempted == 4
        assert result.errors == 4
        assert result.warm_stats is None
        assert result.cold_stats is None
