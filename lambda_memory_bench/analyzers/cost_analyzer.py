"""Cost model: converts per-tier execution times into cost projections."""

import logging
from typing import Dict, List, Optional, Sequence

from ..config_module import PricingConfig
from ..exceptions import CostModelError, InsufficientDataError
from ..models import AggregatedResult, CostEfficiencyAnalysis, CostMetrics

logger = logging.getLogger(__name__)

MB_PER_GB = 1024
MS_PER_SECOND = 1000


def gb_seconds(memory_mb: int, duration_ms: float) -> float:
    """Billable GB-seconds for one invocation."""
    return (memory_mb / MB_PER_GB) * (duration_ms / MS_PER_SECOND)


def cost_per_scale(memory_mb: int, duration_ms: float, pricing: PricingConfig) -> float:
    """Compute cost of ``pricing.cost_scale`` invocations of the given duration."""
    return gb_seconds(memory_mb, duration_ms) * pricing.price_per_gb_second * pricing.cost_scale


def mix_cost(cold_cost: float, warm_cost: float, cold_fraction: float) -> float:
    """Weighted cost under a cold/warm traffic mix."""
    return cold_cost * cold_fraction + warm_cost * (1 - cold_fraction)


def compute_cost(result: AggregatedResult, pricing: PricingConfig) -> CostMetrics:
    """
    Derive cost metrics for one tier.

    Args:
        result: Aggregated samples of the tier; warm stats are required
        pricing: Pricing and traffic-mix assumptions

    Returns:
        CostMetrics at full precision

    Raises:
        InsufficientDataError: If the tier has no warm samples
        CostModelError: If the blended cost is not positive
    """
    if result.warm_stats is None:
        raise InsufficientDataError(f"No warm start data for {result.memory_mb}MB")

    warm_avg = result.warm_stats.average
    cost_warm = cost_per_scale(result.memory_mb, warm_avg, pricing)

    cold_avg = result.cold_stats.average if result.cold_stats else None
    if cold_avg is not None and cold_avg > 0:
        cost_cold = cost_per_scale(result.memory_mb, cold_avg, pricing)
        blended = mix_cost(cost_cold, cost_warm, pricing.default_cold_start_fraction)
    else:
        # No cold data: treat all traffic as warm.
        cost_cold = 0
        blended = cost_warm

    if blended <= 0:
        raise CostModelError(
            f"Blended cost for {result.memory_mb}MB is {blended}; durations must be positive"
        )

    return CostMetrics(
        memory_mb=result.memory_mb,
        avg_execution_time=warm_avg,
        cold_start_time=cold_avg,
        cost_per_1m_warm=cost_warm,
        cost_per_1m_cold=cost_cold,
        blended_cost_per_1m=blended,
        cost_efficiency_score=pricing.cost_scale / blended,
    )


def blended_cost(metrics: CostMetrics, cold_fraction: float) -> float:
    """Blended cost of a tier under an arbitrary cold-start share."""
    if metrics.cost_per_1m_cold > 0:
        return mix_cost(metrics.cost_per_1m_cold, metrics.cost_per_1m_warm, cold_fraction)
    return metrics.cost_per_1m_warm


def blended_scenarios(metrics: CostMetrics, fractions: Sequence[float]) -> Dict[float, float]:
    """One blended cost per configured traffic-mix scenario."""
    return {fraction: blended_cost(metrics, fraction) for fraction in fractions}


class CostAnalyzer:
    """Builds per-family cost tables from aggregated tier results."""

    def __init__(self, pricing: Optional[PricingConfig] = None):
        self.pricing = pricing or PricingConfig()

    def compute_cost(self, result: AggregatedResult) -> CostMetrics:
        return compute_cost(result, self.pricing)

    def cost_table(self, results: List[AggregatedResult]) -> List[CostMetrics]:
        """Cost metrics for every tier with warm data, sorted by memory."""
        table = []
        for result in results:
            if result.warm_stats is None:
                logger.debug(f"Skipping {result.memory_mb}MB in cost table: no warm starts")
                continue
            table.append(self.compute_cost(result))

        table.sort(key=lambda metrics: metrics.memory_mb)
        return table

    def analyze_cost_efficiency(
        self, results: List[AggregatedResult]
    ) -> Optional[CostEfficiencyAnalysis]:
        """
        Analyze cost efficiency across all memory configurations.

        Returns:
            CostEfficiencyAnalysis, or None when no tier has warm data
        """
        table = self.cost_table(results)
        if not table:
            return None

        most = table[0]
        least = table[0]
        for metrics in table[1:]:
            if metrics.cost_efficiency_score > most.cost_efficiency_score:
                most = metrics
            if metrics.cost_efficiency_score < least.cost_efficiency_score:
                least = metrics

        return CostEfficiencyAnalysis(
            most_cost_efficient=most,
            least_cost_efficient=least,
            all_configurations=table,
        )
