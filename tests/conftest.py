"""
Pytest configuration and fixtures for Lambda Memory Bench tests.
"""

import pytest
import json
import tempfile
from pathlib import Path

from lambda_memory_bench.config_module import BenchmarkConfig, FamilyConfig, PricingConfig, TierConfig
from lambda_memory_bench.models import AggregatedResult, BenchmarkResults, Stats


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated unit tests")
    config.addinivalue_line("markers", "integration: tests spanning several components")


def make_stats(average, count=5):
    return Stats(count=count, average=average, min=average, max=average)


def make_envelope(duration=10.0, cold_start=False, memory_limit=128, request_id="req-1"):
    return {
        "performance": {"totalExecutionTime": duration},
        "executionEnvironment": {
            "coldStart": cold_start,
            "memoryLimit": memory_limit,
            "requestId": request_id,
        },
    }


@pytest.fixture
def stats_factory():
    """Build Stats with a fixed average."""
    return make_stats


@pytest.fixture
def result_factory():
    """Build an AggregatedResult from warm/cold averages (None for no samples)."""

    def _make(memory_mb, warm=None, cold=None, requests_attempted=20, errors=0):
        return AggregatedResult(
            memory_mb=memory_mb,
            warm_stats=make_stats(warm) if warm is not None else None,
            cold_stats=make_stats(cold) if cold is not None else None,
            requests_attempted=requests_attempted,
            errors=errors,
        )

    return _make


@pytest.fixture
def payload_factory():
    """Build a decoded function response payload."""
    return make_envelope


@pytest.fixture
def envelope_factory():
    """Build a function response body as a JSON string."""

    def _make(**kwargs):
        return json.dumps(make_envelope(**kwargs))

    return _make


@pytest.fixture
def pricing():
    """Default pricing assumptions."""
    return PricingConfig()


@pytest.fixture
def tier_config():
    """Tier settings with all delays disabled."""
    return TierConfig(
        endpoint_url="https://api.example.com/prod/basic-128",
        memory_mb=128,
        target_cold=2,
        target_warm=3,
        max_concurrent=5,
        batch_delay_ms=0,
        max_total_requests=20,
        error_backoff_ms=0,
    )


@pytest.fixture
def sample_config():
    """Benchmark configuration with two small families and no delays."""
    return BenchmarkConfig(
        base_url="https://api.example.com/prod",
        families=[
            FamilyConfig(function_type="basic", memory_sizes=[128, 512], batch_delay_ms=0, error_backoff_ms=0),
            FamilyConfig(function_type="computation", memory_sizes=[128, 1024], batch_delay_ms=0, error_backoff_ms=0),
        ],
        suite_delay_s=0,
    )


@pytest.fixture
def sample_families(result_factory):
    """Aggregated results for two families."""
    return {
        "basic": [
            result_factory(128, warm=100.0, cold=400.0),
            result_factory(512, warm=30.0, cold=250.0),
            result_factory(1024, warm=20.0, cold=200.0),
        ],
        "computation": [
            result_factory(128, warm=2000.0, cold=2600.0),
            result_factory(1024, warm=300.0, cold=700.0),
        ],
    }


@pytest.fixture
def sample_results(sample_families):
    """Analyzed benchmark results."""
    from lambda_memory_bench.analyzers.coordinator import AnalysisCoordinator

    results = BenchmarkResults(timestamp="2024-01-01T00:00:00+00:00", families=sample_families)
    results.summary = AnalysisCoordinator().summarize(sample_families)
    return results


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test file operations."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
