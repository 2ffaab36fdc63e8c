"""Unit tests for EnrichmentOrchestrator.

Tests cover:
- Cache-aside flow: miss -> resolve -> write back with namespace TTL
- Idempotence: a second enrichment issues zero resolver calls
- Cache unavailable: resolvers still populate the result
- Malformed cache entries treated as misses and overwritten
- Independent streams: run concurrently, and one failing, timing out or
  raising never affects the other
- Requests without a usable IP skip enrichment

Architecture:
- InMemoryCache and StubResolver doubles (tests/conftest.py)
- Mock logger to assert emitted events
"""

import asyncio
import json

import pytest

from hostdetail.application.services import EnrichmentOrchestrator
from hostdetail.core.enums import ErrorCode
from hostdetail.core.result import Failure, Success
from hostdetail.domain.errors import (
    ResolverApplicationFailure,
    ResolverTransportError,
)
from hostdetail.domain.value_objects import EnrichmentOutcome, GeoRecord
from hostdetail.infrastructure.cache.cache_keys import CacheKeys
from tests.conftest import InMemoryCache, StubResolver

IP = "8.8.8.8"
HOSTNAME = "dns.google"


def _dns_failure() -> Failure:
    return Failure(
        error=ResolverTransportError(
            code=ErrorCode.RESOLVER_TRANSPORT_ERROR,
            message="Reverse DNS lookup failed",
            resolver_name="reverse_dns",
        )
    )


def _geo_failure() -> Failure:
    return Failure(
        error=ResolverApplicationFailure(
            code=ErrorCode.RESOLVER_APPLICATION_FAILURE,
            message="Geolocation API reported failure",
            resolver_name="geolocation",
            backend_message="private range",
        )
    )


def _events(mock_method) -> list[str]:
    return [call.args[0] for call in mock_method.call_args_list]


@pytest.fixture
def dns_resolver() -> StubResolver:
    return StubResolver(Success(value=HOSTNAME))


@pytest.fixture
def geo_resolver(sample_geo) -> StubResolver:
    return StubResolver(Success(value=sample_geo))


@pytest.fixture
def make_orchestrator(memory_cache, dns_resolver, geo_resolver, mock_logger):
    def _make(**overrides) -> EnrichmentOrchestrator:
        kwargs = {
            "cache": memory_cache,
            "dns_resolver": dns_resolver,
            "geo_resolver": geo_resolver,
            "logger": mock_logger,
            "dns_cache_ttl": 3600,
            "geo_cache_ttl": 7200,
        }
        kwargs.update(overrides)
        return EnrichmentOrchestrator(**kwargs)

    return _make


@pytest.mark.unit
class TestCacheAside:
    """Test the miss -> resolve -> write-back path and cache hits."""

    async def test_miss_resolves_both_streams(
        self, make_orchestrator, dns_resolver, geo_resolver, sample_geo
    ):
        result = await make_orchestrator().enrich(IP)

        assert result.ip == IP
        assert result.reverse_name == HOSTNAME
        assert result.geo == sample_geo
        assert result.dns_outcome == EnrichmentOutcome.RESOLVED
        assert result.geo_outcome == EnrichmentOutcome.RESOLVED
        assert dns_resolver.calls == [IP]
        assert geo_resolver.calls == [IP]

    async def test_miss_writes_back_with_namespace_ttls(
        self, make_orchestrator, memory_cache, sample_geo
    ):
        await make_orchestrator().enrich(IP)

        assert json.loads(memory_cache.data[f"dns:{IP}"]) == {"hostname": HOSTNAME}
        assert json.loads(memory_cache.data[f"geo:{IP}"]) == sample_geo.to_dict()
        assert memory_cache.ttls[f"dns:{IP}"] == 3600
        assert memory_cache.ttls[f"geo:{IP}"] == 7200

    async def test_second_enrichment_uses_cache_only(
        self, make_orchestrator, dns_resolver, geo_resolver, sample_geo
    ):
        """Test idempotence: the second call issues zero resolver calls."""
        orchestrator = make_orchestrator()
        first = await orchestrator.enrich(IP)

        second = await orchestrator.enrich(IP)

        assert dns_resolver.calls == [IP]
        assert geo_resolver.calls == [IP]
        assert second.reverse_name == first.reverse_name
        assert second.geo == first.geo == sample_geo
        assert second.dns_outcome == EnrichmentOutcome.CACHE_HIT
        assert second.geo_outcome == EnrichmentOutcome.CACHE_HIT

    async def test_cache_key_prefix_applied(self, make_orchestrator, memory_cache):
        orchestrator = make_orchestrator(cache_keys=CacheKeys(prefix="hd"))

        await orchestrator.enrich(IP)

        assert set(memory_cache.data) == {f"hd:dns:{IP}", f"hd:geo:{IP}"}

    async def test_resolver_success_logged(self, make_orchestrator, mock_logger):
        await make_orchestrator().enrich(IP)

        events = _events(mock_logger.info)
        assert "dns_lookup_success" in events
        assert "geo_lookup_success" in events


@pytest.mark.unit
class TestCacheUnavailable:
    """Test fail-open behaviour when the cache cannot be used."""

    async def test_unready_cache_still_enriches(
        self, make_orchestrator, dns_resolver, geo_resolver, sample_geo, mock_logger
    ):
        cache = InMemoryCache(ready=False)
        orchestrator = make_orchestrator(cache=cache)

        first = await orchestrator.enrich(IP)
        second = await orchestrator.enrich(IP)

        for result in (first, second):
            assert result.reverse_name == HOSTNAME
            assert result.geo == sample_geo
            assert result.dns_outcome == EnrichmentOutcome.RESOLVED
        assert len(dns_resolver.calls) == 2
        assert len(geo_resolver.calls) == 2
        assert cache.data == {}
        # Missing cache is expected, not worth a warning
        assert "cache_read_failed" not in _events(mock_logger.warning)
        assert "cache_read_failed" in _events(mock_logger.debug)

    async def test_write_failure_is_ignored(
        self, make_orchestrator, sample_geo, mock_logger
    ):
        cache = InMemoryCache(fail_writes=True)

        result = await make_orchestrator(cache=cache).enrich(IP)

        assert result.reverse_name == HOSTNAME
        assert result.geo == sample_geo
        assert "cache_write_failed" in _events(mock_logger.warning)


@pytest.mark.unit
class TestMalformedCacheEntries:
    """Test malformed cached values are treated as misses."""

    async def test_undecodable_geo_entry_resolved_and_overwritten(
        self, make_orchestrator, memory_cache, geo_resolver, sample_geo
    ):
        memory_cache.data[f"geo:{IP}"] = "{not json"

        result = await make_orchestrator().enrich(IP)

        assert result.geo == sample_geo
        assert result.geo_outcome == EnrichmentOutcome.RESOLVED
        assert geo_resolver.calls == [IP]
        assert json.loads(memory_cache.data[f"geo:{IP}"]) == sample_geo.to_dict()

    async def test_wrong_shape_geo_entry_resolved_and_overwritten(
        self, make_orchestrator, memory_cache, geo_resolver, sample_geo, mock_logger
    ):
        memory_cache.data[f"geo:{IP}"] = json.dumps({"unexpected": "field"})

        result = await make_orchestrator().enrich(IP)

        assert result.geo == sample_geo
        assert geo_resolver.calls == [IP]
        assert json.loads(memory_cache.data[f"geo:{IP}"]) == sample_geo.to_dict()
        assert "cache_entry_malformed" in _events(mock_logger.warning)

    @pytest.mark.parametrize(
        "cached",
        [{}, {"lat": "x"}, {"country": "Germany", "lon": "13.4"}],
    )
    async def test_degenerate_geo_entry_resolved_and_overwritten(
        self, make_orchestrator, memory_cache, geo_resolver, sample_geo, cached
    ):
        memory_cache.data[f"geo:{IP}"] = json.dumps(cached)

        result = await make_orchestrator().enrich(IP)

        assert result.geo == sample_geo
        assert result.geo_outcome == EnrichmentOutcome.RESOLVED
        assert geo_resolver.calls == [IP]
        assert json.loads(memory_cache.data[f"geo:{IP}"]) == sample_geo.to_dict()

    async def test_wrong_shape_dns_entry_resolved(
        self, make_orchestrator, memory_cache, dns_resolver
    ):
        memory_cache.data[f"dns:{IP}"] = json.dumps({"hostname": ""})

        result = await make_orchestrator().enrich(IP)

        assert result.reverse_name == HOSTNAME
        assert dns_resolver.calls == [IP]

    async def test_valid_cached_values_are_used(
        self, make_orchestrator, memory_cache, dns_resolver, geo_resolver
    ):
        cached_geo = GeoRecord(country="Germany", country_code="DE", city="Berlin")
        memory_cache.data[f"dns:{IP}"] = json.dumps({"hostname": "cached.example"})
        memory_cache.data[f"geo:{IP}"] = json.dumps(cached_geo.to_dict())

        result = await make_orchestrator().enrich(IP)

        assert result.reverse_name == "cached.example"
        assert result.geo == cached_geo
        assert dns_resolver.calls == []
        assert geo_resolver.calls == []


@pytest.mark.unit
class TestIndependentStreams:
    """Test DNS and geolocation failures never affect each other."""

    async def test_dns_failure_keeps_geo(
        self, make_orchestrator, memory_cache, sample_geo, mock_logger
    ):
        orchestrator = make_orchestrator(dns_resolver=StubResolver(_dns_failure()))

        result = await orchestrator.enrich(IP)

        assert result.reverse_name is None
        assert result.dns_outcome == EnrichmentOutcome.FAILED
        assert result.geo == sample_geo
        assert f"dns:{IP}" not in memory_cache.data
        assert "dns_lookup_failure" in _events(mock_logger.warning)

    async def test_geo_failure_keeps_dns(self, make_orchestrator, memory_cache):
        orchestrator = make_orchestrator(geo_resolver=StubResolver(_geo_failure()))

        result = await orchestrator.enrich(IP)

        assert result.reverse_name == HOSTNAME
        assert result.geo is None
        assert result.geo_outcome == EnrichmentOutcome.FAILED
        assert f"geo:{IP}" not in memory_cache.data

    async def test_streams_run_concurrently(self, make_orchestrator, sample_geo):
        """Test added latency is the slower lookup, not the sum of both."""
        orchestrator = make_orchestrator(
            dns_resolver=StubResolver(Success(value=HOSTNAME), delay=0.3),
            geo_resolver=StubResolver(Success(value=sample_geo), delay=0.3),
        )
        loop = asyncio.get_running_loop()

        started = loop.time()
        result = await orchestrator.enrich(IP)
        elapsed = loop.time() - started

        assert result.reverse_name == HOSTNAME
        assert result.geo == sample_geo
        assert elapsed < 0.5

    async def test_both_fail_returns_empty_fields(self, make_orchestrator):
        orchestrator = make_orchestrator(
            dns_resolver=StubResolver(_dns_failure()),
            geo_resolver=StubResolver(_geo_failure()),
        )

        result = await orchestrator.enrich(IP)

        assert result.ip == IP
        assert result.reverse_name is None
        assert result.geo is None

    async def test_slow_geo_times_out_while_dns_populated(
        self, make_orchestrator, sample_geo, mock_logger
    ):
        slow_geo = StubResolver(Success(value=sample_geo), delay=1.0)
        orchestrator = make_orchestrator(geo_resolver=slow_geo, geo_timeout=0.05)

        result = await orchestrator.enrich(IP)

        assert result.geo is None
        assert result.geo_outcome == EnrichmentOutcome.FAILED
        assert result.reverse_name == HOSTNAME
        assert result.timings.geo_ms is not None
        assert result.timings.geo_ms < 1000

        failure_calls = [
            call
            for call in mock_logger.warning.call_args_list
            if call.args[0] == "geo_lookup_failure"
        ]
        assert failure_calls
        assert failure_calls[0].kwargs["error_code"] == "resolver_timeout"

    async def test_slow_dns_times_out_while_geo_populated(
        self, make_orchestrator, sample_geo
    ):
        slow_dns = StubResolver(Success(value=HOSTNAME), delay=1.0)
        orchestrator = make_orchestrator(dns_resolver=slow_dns, dns_timeout=0.05)

        result = await orchestrator.enrich(IP)

        assert result.reverse_name is None
        assert result.geo == sample_geo

    async def test_unexpected_exception_contained(
        self, make_orchestrator, sample_geo, mock_logger
    ):
        broken_dns = StubResolver(exc=RuntimeError("resolver bug"))

        result = await make_orchestrator(dns_resolver=broken_dns).enrich(IP)

        assert result.reverse_name is None
        assert result.dns_outcome == EnrichmentOutcome.FAILED
        assert result.geo == sample_geo
        assert "dns_enrichment_error" in _events(mock_logger.error)


@pytest.mark.unit
class TestSkippedEnrichment:
    """Test requests without a usable IP."""

    @pytest.mark.parametrize("ip", [None, ""])
    async def test_missing_ip_skips_resolvers(
        self, make_orchestrator, dns_resolver, geo_resolver, memory_cache, ip
    ):
        result = await make_orchestrator().enrich(ip)

        assert result.reverse_name is None
        assert result.geo is None
        assert result.dns_outcome == EnrichmentOutcome.SKIPPED
        assert result.geo_outcome == EnrichmentOutcome.SKIPPED
        assert dns_resolver.calls == []
        assert geo_resolver.calls == []
        assert memory_cache.get_calls == []

    async def test_invalid_ip_literal_skips_resolvers(
        self, make_orchestrator, dns_resolver, geo_resolver, mock_logger
    ):
        result = await make_orchestrator().enrich("not-an-ip")

        assert result.ip == "not-an-ip"
        assert result.reverse_name is None
        assert result.geo is None
        assert dns_resolver.calls == []
        assert geo_resolver.calls == []
        assert "enrichment_skipped" in _events(mock_logger.warning)

    async def test_ipv6_literal_is_enriched(self, make_orchestrator, dns_resolver):
        await make_orchestrator().enrich("2001:4860:4860::8888")

        assert dns_resolver.calls == ["2001:4860:4860::8888"]
