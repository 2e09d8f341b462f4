"""
Orchestrator module for Lambda Memory Bench.
Runs sample collection for every workload family and hands the results to analysis.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from .analyzers.coordinator import AnalysisCoordinator
from .collector import collect_tiers
from .config_module import BenchmarkConfig, FamilyConfig
from .exceptions import ConfigurationError
from .models import AggregatedResult, BenchmarkResults
from .utils import file_safe_timestamp, format_duration, format_timestamp

logger = logging.getLogger(__name__)


class BenchmarkOrchestrator:
    """Orchestrates the benchmark run across workload families."""

    def __init__(self, config: BenchmarkConfig):
        """
        Initialize the orchestrator.

        Args:
            config: Benchmark configuration
        """
        self.config = config
        self.coordinator = AnalysisCoordinator(config.pricing)

    def _select_families(self, names: Optional[List[str]]) -> List[FamilyConfig]:
        if not names:
            return list(self.config.families)
        return [self.config.family(name) for name in names]

    async def run_benchmark(self, families: Optional[List[str]] = None) -> BenchmarkResults:
        """
        Collect samples for the selected families and analyze them.

        Args:
            families: Family names to run (default: all configured families)

        Returns:
            BenchmarkResults with raw tier results and the derived summary
        """
        if not self.config.base_url:
            raise ConfigurationError(
                "Base URL is required. Set base_url in the configuration or LAMBDA_BENCH_BASE_URL."
            )

        selected = self._select_families(families)
        start_time = time.time()
        results = BenchmarkResults(timestamp=format_timestamp())

        pricing = self.config.pricing
        logger.info(f"Using pricing: ${pricing.price_per_gb_second} per GB-second")
        logger.info(
            f"Default blended cost model: {pricing.default_cold_start_fraction * 100:.0f}% cold starts, "
            f"per {pricing.cost_scale:,.0f} invocations"
        )

        for index, family in enumerate(selected):
            if index > 0 and self.config.suite_delay_s > 0:
                logger.info(
                    f"Waiting {self.config.suite_delay_s:.0f} seconds before {family.function_type} tests..."
                )
                await asyncio.sleep(self.config.suite_delay_s)

            logger.info(f"Starting {family.function_type} function tests: {family.memory_sizes}")
            tier_results = await collect_tiers(family, self.config.base_url)
            results.families[family.function_type] = tier_results
            self._log_family_summary(family.function_type, tier_results)

        results.summary = self.coordinator.summarize(results.families)

        logger.info(f"Benchmark completed in {format_duration((time.time() - start_time) * 1000)}")
        return results

    def _log_family_summary(self, function_type: str, results: List[AggregatedResult]):
        logger.info(f"{function_type} performance summary:")
        for result in results:
            cold = f"{result.cold_stats.average:.2f}ms" if result.cold_stats else "N/A"
            warm = f"{result.warm_stats.average:.2f}ms" if result.warm_stats else "N/A"
            cold_count = result.cold_stats.count if result.cold_stats else 0
            warm_count = result.warm_stats.count if result.warm_stats else 0
            logger.info(
                f"  {result.memory_mb:>5}MB | cold {cold_count} (avg {cold}) | "
                f"warm {warm_count} (avg {warm})"
            )

    def save_results(self, results: BenchmarkResults) -> Dict[str, str]:
        """
        Persist the results document and the plain-text summary report.

        Returns:
            Dictionary with the ``data_file`` and ``summary_file`` paths
        """
        from .report_service import ReportGenerator

        output_dir = Path(self.config.output_dir)
        stamp = file_safe_timestamp(results.timestamp)

        data_file = output_dir / f"comprehensive-test-{stamp}.json"
        summary_file = output_dir / f"summary-report-{stamp}.txt"

        report_gen = ReportGenerator(results, self.config)
        report_gen.save_json(str(data_file))
        report_gen.save_text(str(summary_file))

        return {"data_file": str(data_file), "summary_file": str(summary_file)}


# Convenience functions
async def run_benchmark_session(
    config: BenchmarkConfig, families: Optional[List[str]] = None
) -> BenchmarkResults:
    """Run a complete benchmark session."""
    orchestrator = BenchmarkOrchestrator(config)
    return await orchestrator.run_benchmark(families)
