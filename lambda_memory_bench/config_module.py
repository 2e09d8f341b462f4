"""
Configuration management for Lambda Memory Bench.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Dict, Any, Optional

import yaml

from .exceptions import ConfigurationError
from .utils import build_function_url, load_config_file

logger = logging.getLogger(__name__)

BASE_URL_ENV_VAR = "LAMBDA_BENCH_BASE_URL"

MIN_MEMORY_MB = 128
MAX_MEMORY_MB = 10240


@dataclass
class PricingConfig:
    """Pricing and traffic-mix assumptions used by the cost model."""

    price_per_gb_second: float = 0.0000166667
    default_cold_start_fraction: float = 0.10
    cost_scale: float = 1_000_000
    blended_scenario_fractions: List[float] = field(
        default_factory=lambda: [0.05, 0.10, 0.20, 0.50]
    )

    def __post_init__(self):
        if self.price_per_gb_second <= 0:
            raise ConfigurationError("price_per_gb_second must be positive")
        if self.cost_scale <= 0:
            raise ConfigurationError("cost_scale must be positive")
        if not 0 <= self.default_cold_start_fraction <= 1:
            raise ConfigurationError("default_cold_start_fraction must be between 0 and 1")
        for fraction in self.blended_scenario_fractions:
            if not 0 <= fraction <= 1:
                raise ConfigurationError(
                    f"Invalid blended scenario fraction: {fraction}. Must be between 0 and 1"
                )


@dataclass
class TierConfig:
    """Collection settings for one function endpoint at one memory tier."""

    endpoint_url: str
    memory_mb: int
    target_cold: int = 5
    target_warm: int = 5
    max_concurrent: int = 20
    batch_delay_ms: int = 500
    max_total_requests: int = 100
    error_backoff_ms: int = 1000
    request_timeout_s: float = 30.0

    def __post_init__(self):
        if not self.endpoint_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid endpoint URL: {self.endpoint_url}")
        _validate_collection_settings(self)


@dataclass
class FamilyConfig:
    """A workload family and the memory tiers it is tested at."""

    function_type: str
    memory_sizes: List[int]
    target_cold: int = 5
    target_warm: int = 5
    max_concurrent: int = 20
    batch_delay_ms: int = 500
    max_total_requests: int = 100
    error_backoff_ms: int = 1000
    request_timeout_s: float = 30.0

    def __post_init__(self):
        if not self.function_type:
            raise ConfigurationError("function_type is required")
        if not self.memory_sizes:
            raise ConfigurationError(f"No memory sizes configured for '{self.function_type}'")

        for size in self.memory_sizes:
            if not (MIN_MEMORY_MB <= size <= MAX_MEMORY_MB):
                raise ConfigurationError(
                    f"Invalid memory size: {size}. Must be between "
                    f"{MIN_MEMORY_MB} and {MAX_MEMORY_MB} MB"
                )

        _validate_collection_settings(self)

    def tier_config(self, base_url: str, memory_mb: int) -> TierConfig:
        """Build the collector settings for one of this family's tiers."""
        return TierConfig(
            endpoint_url=build_function_url(base_url, self.function_type, memory_mb),
            memory_mb=memory_mb,
            target_cold=self.target_cold,
            target_warm=self.target_warm,
            max_concurrent=self.max_concurrent,
            batch_delay_ms=self.batch_delay_ms,
            max_total_requests=self.max_total_requests,
            error_backoff_ms=self.error_backoff_ms,
            request_timeout_s=self.request_timeout_s,
        )


def _validate_collection_settings(config):
    if config.target_cold < 0 or config.target_warm < 0:
        raise ConfigurationError("Sample targets cannot be negative")
    if config.max_concurrent < 1:
        raise ConfigurationError("max_concurrent must be at least 1")
    if config.max_total_requests < 1:
        raise ConfigurationError("max_total_requests must be at least 1")
    if config.batch_delay_ms < 0 or config.error_backoff_ms < 0:
        raise ConfigurationError("Delays cannot be negative")
    if config.request_timeout_s <= 0:
        raise ConfigurationError("request_timeout_s must be positive")


def default_families() -> List[FamilyConfig]:
    """Lightweight and compute-heavy families with their stock tiers."""
    return [
        FamilyConfig(
            function_type="basic",
            memory_sizes=[128, 256, 512, 1024, 2048, 3008],
        ),
        FamilyConfig(
            function_type="computation",
            memory_sizes=[128, 512, 1024, 3008],
            max_total_requests=50,
            error_backoff_ms=2000,
        ),
    ]


@dataclass
class BenchmarkConfig:
    """Top-level configuration for a benchmark run."""

    base_url: Optional[str] = None
    families: List[FamilyConfig] = field(default_factory=default_families)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    suite_delay_s: float = 30.0
    output_dir: str = "./results/comprehensive-analysis"

    def __post_init__(self):
        """Coerce nested mappings and fill the base URL from the environment."""
        if isinstance(self.pricing, dict):
            self.pricing = PricingConfig(**self.pricing)

        self.families = [
            FamilyConfig(**family) if isinstance(family, dict) else family
            for family in self.families
        ]

        names = [family.function_type for family in self.families]
        if len(names) != len(set(names)):
            raise ConfigurationError(f"Duplicate workload families: {names}")

        if not self.base_url:
            self.base_url = os.environ.get(BASE_URL_ENV_VAR) or None

        if self.base_url and not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid base URL: {self.base_url}")

        if self.suite_delay_s < 0:
            raise ConfigurationError("suite_delay_s cannot be negative")

    def family(self, function_type: str) -> FamilyConfig:
        for family in self.families:
            if family.function_type == function_type:
                return family
        raise ConfigurationError(f"Unknown workload family: {function_type}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BenchmarkConfig":
        """Create configuration from dictionary."""
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @classmethod
    def from_file(cls, filepath: str) -> "BenchmarkConfig":
        """Load configuration from a JSON or YAML file."""
        try:
            data = load_config_file(filepath)
        except ValueError as e:
            raise ConfigurationError(str(e))
        return cls.from_dict(data)

    def save(self, filepath: str):
        """Save configuration to file (YAML when the suffix says so)."""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w") as f:
            if filepath.endswith((".yaml", ".yml")):
                yaml.safe_dump(self.to_dict(), f, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)


class ConfigManager:
    """Loads configurations, applies overrides and reports questionable settings."""

    def load(self, filepath: Optional[str] = None, **overrides) -> BenchmarkConfig:
        """Load a configuration file (or the defaults) and apply non-None overrides."""
        try:
            data = load_config_file(filepath) if filepath else {}
        except ValueError as e:
            raise ConfigurationError(str(e))

        for key, value in overrides.items():
            if value is not None:
                data[key] = value

        return BenchmarkConfig.from_dict(data)

    def validate_config(self, config: BenchmarkConfig) -> List[str]:
        """Validate configuration and return list of warnings."""
        warnings = []

        for family in config.families:
            name = family.function_type

            if family.target_cold + family.target_warm > family.max_total_requests:
                warnings.append(
                    f"{name}: sample targets exceed max_total_requests; collection will stop early"
                )

            if family.max_concurrent > family.max_total_requests:
                warnings.append(
                    f"{name}: max_concurrent is larger than max_total_requests, "
                    "only one batch will run"
                )

            if family.target_cold == 0:
                warnings.append(f"{name}: cold start collection disabled (target_cold=0)")

            if family.batch_delay_ms < 100 and family.target_cold > 0:
                warnings.append(
                    f"{name}: short batch delay makes additional cold starts unlikely"
                )

            if family.max_concurrent > 50:
                warnings.append(f"{name}: high concurrency may hit account concurrency limits")

        if config.pricing.default_cold_start_fraction > 0.5:
            warnings.append("Default cold start fraction above 50% is unusual for production traffic")

        return warnings
