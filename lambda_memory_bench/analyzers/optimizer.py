"""Memory tier ranking: picks the recommended tier and labels every tier by use case."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config_module import PricingConfig
from ..models import AggregatedResult, CostMetrics, OptimalConfig
from .cost_analyzer import compute_cost

logger = logging.getLogger(__name__)

BALANCED_RECOMMENDATION = "Balanced performance and cost efficiency"

BEST_WARM_COST = "High frequency (best warm cost)"
FASTEST = "Cold start sensitive (fastest)"
MOST_COST_EFFICIENT = "Most cost efficient (blended)"
BUDGET_FOCUSED = "Budget focused"
BALANCED_WORKLOAD = "Balanced workload"
PERFORMANCE_FOCUSED = "Performance focused"

# Rank boundaries (fractions of the tier count) for the positional labels.
USE_CASE_TERTILES: Tuple[float, float] = (1 / 3, 2 / 3)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the balanced tier score.

    These are policy choices, not derived quantities; callers can supply
    their own to bias the recommendation toward latency or cost.
    """

    performance: float = 0.5
    cost_efficiency: float = 0.3
    cold_start: float = 0.2
    cost_normalizer: float = 10000
    latency_scale: float = 1000


DEFAULT_WEIGHTS = ScoringWeights()


def score_tier(
    result: AggregatedResult, metrics: CostMetrics, weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """Balanced score of one tier; higher is better."""
    performance_score = weights.latency_scale / result.warm_stats.average
    cost_efficiency_score = metrics.cost_efficiency_score / weights.cost_normalizer
    cold_bonus = weights.latency_scale / result.cold_stats.average if result.cold_stats else 0

    return (
        performance_score * weights.performance
        + cost_efficiency_score * weights.cost_efficiency
        + cold_bonus * weights.cold_start
    )


def select_optimal(
    results: Sequence[AggregatedResult],
    pricing: PricingConfig,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[OptimalConfig]:
    """
    Select the tier with the best balanced score.

    Only tiers with warm samples are scored. Tiers are visited in ascending
    memory order and a later tier must score strictly higher to win.

    Returns:
        OptimalConfig, or None if no tier produced warm samples
    """
    eligible = sorted(
        (result for result in results if result.warm_stats is not None),
        key=lambda result: result.memory_mb,
    )

    best: Optional[OptimalConfig] = None
    best_score = 0.0

    for result in eligible:
        metrics = compute_cost(result, pricing)
        score = score_tier(result, metrics, weights)
        logger.debug(f"{result.memory_mb}MB balanced score: {score:.4f}")

        if best is None or score > best_score:
            best_score = score
            best = OptimalConfig(
                memory_mb=result.memory_mb,
                warm_start_avg=result.warm_stats.average,
                cold_start_avg=result.cold_stats.average if result.cold_stats else None,
                blended_cost=metrics.blended_cost_per_1m,
                recommendation=BALANCED_RECOMMENDATION,
            )

    return best


def classify_use_case(
    metrics: CostMetrics,
    all_metrics: Sequence[CostMetrics],
    tertiles: Tuple[float, float] = USE_CASE_TERTILES,
) -> str:
    """
    Label a tier by where it sits on the cost/performance axes.

    Args:
        metrics: The tier to label
        all_metrics: Every tier of the same family (including this one)
        tertiles: Lower and upper rank boundaries as fractions of the tier count

    Returns:
        str: A descriptive use-case label
    """
    ordered: List[CostMetrics] = sorted(all_metrics, key=lambda m: m.memory_mb)
    if not ordered:
        raise ValueError("Cannot classify a tier without comparator tiers")

    warm_optimal = min(ordered, key=lambda m: m.cost_per_1m_warm)
    fastest = min(ordered, key=lambda m: m.avg_execution_time)
    most_efficient = max(ordered, key=lambda m: m.cost_efficiency_score)

    if metrics.memory_mb == warm_optimal.memory_mb:
        return BEST_WARM_COST
    if metrics.memory_mb == fastest.memory_mb:
        return FASTEST
    if metrics.memory_mb == most_efficient.memory_mb:
        return MOST_COST_EFFICIENT

    rank = next((i for i, m in enumerate(ordered) if m.memory_mb == metrics.memory_mb), None)
    if rank is None:
        raise ValueError(f"{metrics.memory_mb}MB is not among the comparator tiers")

    total = len(ordered)
    lower, upper = tertiles

    if rank < total * lower:
        return BUDGET_FOCUSED
    elif rank > total * upper:
        return PERFORMANCE_FOCUSED
    return BALANCED_WORKLOAD
