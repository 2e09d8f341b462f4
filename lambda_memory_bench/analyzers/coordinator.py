"""Analysis coordinator: runs every workload family through the cost model and optimizer."""

import logging
from typing import Any, Dict, List, Optional

from ..config_module import PricingConfig
from ..models import AggregatedResult, BenchmarkResults, CostEfficiencyAnalysis, Summary
from ..utils import percent_change
from .cost_analyzer import CostAnalyzer, blended_scenarios
from .insights import (
    analyze_cold_starts,
    analyze_data_quality,
    generate_performance_insights,
    scenario_optimizations,
)
from .optimizer import DEFAULT_WEIGHTS, ScoringWeights, classify_use_case, select_optimal

logger = logging.getLogger(__name__)


class AnalysisCoordinator:
    """Orchestrates all analysis operations for a benchmark run."""

    def __init__(
        self, pricing: Optional[PricingConfig] = None, weights: ScoringWeights = DEFAULT_WEIGHTS
    ):
        self.pricing = pricing or PricingConfig()
        self.weights = weights
        self.cost_analyzer = CostAnalyzer(self.pricing)

    def summarize(self, families: Dict[str, List[AggregatedResult]]) -> Summary:
        """
        Generate the combined summary for all workload families.

        Each family is analyzed independently; a family without warm samples
        ends up with a ``None`` optimal configuration and no cost table.

        Args:
            families: Aggregated tier results keyed by family name

        Returns:
            Summary with optimal configurations, cost tables and insights
        """
        logger.info("Generating summary analysis...")
        summary = Summary()

        for family, results in families.items():
            summary.total_functions_tested += len(results)

            optimal = select_optimal(results, self.pricing, self.weights)
            summary.optimal_configurations[family] = optimal
            if optimal is None:
                logger.warning(f"No warm start data for {family} functions, no recommendation")

            analysis = self.cost_analyzer.analyze_cost_efficiency(results)
            if analysis is not None:
                summary.cost_efficiency[family] = analysis

        summary.insights = generate_performance_insights(summary)
        return summary

    def function_analysis(self, analysis: CostEfficiencyAnalysis) -> Dict[str, Any]:
        """Warm, cold and blended data points of one family, relative to its smallest tier."""
        configurations = analysis.all_configurations
        warm_baseline = configurations[0]

        warm_start = [
            {
                "memory_mb": config.memory_mb,
                "execution_time": config.avg_execution_time,
                "cost": config.cost_per_1m_warm,
                "performance_gain": -percent_change(
                    warm_baseline.avg_execution_time, config.avg_execution_time
                ),
                "cost_change": percent_change(
                    warm_baseline.cost_per_1m_warm, config.cost_per_1m_warm
                ),
            }
            for config in configurations
        ]

        cold_configs = [c for c in configurations if c.cold_start_time is not None]
        cold_start = []
        if cold_configs:
            cold_baseline = cold_configs[0]
            cold_start = [
                {
                    "memory_mb": config.memory_mb,
                    "execution_time": config.cold_start_time,
                    "cost": config.cost_per_1m_cold,
                    "performance_gain": -percent_change(
                        cold_baseline.cold_start_time, config.cold_start_time
                    ),
                    "cost_change": percent_change(
                        cold_baseline.cost_per_1m_cold, config.cost_per_1m_cold
                    ),
                }
                for config in cold_configs
            ]

        blended = [
            {
                "memory_mb": config.memory_mb,
                "scenarios": blended_scenarios(config, self.pricing.blended_scenario_fractions),
                "use_case": classify_use_case(config, configurations),
            }
            for config in configurations
        ]

        return {
            "warm_start": warm_start,
            "cold_start": cold_start,
            "blended": blended,
            "has_any_cold_start": bool(cold_configs),
        }

    def report_data(self, results: BenchmarkResults) -> Dict[str, Any]:
        """Bundle everything the reporting layer renders."""
        summary = results.summary

        return {
            "overview": {
                "timestamp": results.timestamp,
                "total_functions_tested": summary.total_functions_tested,
                "test_types": {family: len(tiers) for family, tiers in results.families.items()},
            },
            "recommendations": dict(summary.optimal_configurations),
            "analysis": {
                family: self.function_analysis(analysis)
                for family, analysis in summary.cost_efficiency.items()
            },
            "insights": list(summary.insights),
            "scenarios": scenario_optimizations(summary.cost_efficiency),
            "data_quality": analyze_data_quality(results.families),
            "cold_starts": {
                family: analyze_cold_starts(tiers) for family, tiers in results.families.items()
            },
        }
