"""Descriptive insights derived from per-family cost tables and collection results."""

import logging
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..models import AggregatedResult, CostEfficiencyAnalysis, Summary
from ..utils import safe_divide

logger = logging.getLogger(__name__)


def generate_performance_insights(summary: Summary) -> List[str]:
    """
    Generate performance insights from summary data.

    Families whose optimal configuration is missing are left out of the
    cross-family comparison.
    """
    insights = []

    available = [
        (family, config)
        for family, config in summary.optimal_configurations.items()
        if config is not None
    ]
    for (family_a, optimal_a), (family_b, optimal_b) in combinations(available, 2):
        if optimal_a.memory_mb != optimal_b.memory_mb:
            insights.append(
                f"Different workloads require different memory configurations: "
                f"{family_a} functions perform best at {optimal_a.memory_mb}MB, while "
                f"{family_b} functions perform best at {optimal_b.memory_mb}MB"
            )
        else:
            insights.append(
                f"Both {family_a} and {family_b} functions perform optimally at "
                f"{optimal_a.memory_mb}MB"
            )

    for family, analysis in summary.cost_efficiency.items():
        insights.extend(_family_insights(family, analysis))

    return insights


def _family_insights(family: str, analysis: CostEfficiencyAnalysis) -> List[str]:
    insights = []
    configurations = analysis.all_configurations
    if not configurations:
        return insights

    baseline = configurations[0]
    fastest = min(configurations, key=lambda c: c.avg_execution_time)
    most_efficient = analysis.most_cost_efficient

    if fastest.memory_mb != baseline.memory_mb:
        speedup = safe_divide(
            baseline.avg_execution_time - fastest.avg_execution_time, baseline.avg_execution_time
        ) * 100
        cost_increase = safe_divide(
            fastest.blended_cost_per_1m - baseline.blended_cost_per_1m,
            baseline.blended_cost_per_1m,
        ) * 100
        insights.append(
            f"For {family} functions: {fastest.memory_mb}MB is {speedup:.1f}% faster than "
            f"{baseline.memory_mb}MB but costs {cost_increase:.1f}% more (blended cost)"
        )

    if most_efficient.memory_mb != baseline.memory_mb:
        savings = safe_divide(
            baseline.blended_cost_per_1m - most_efficient.blended_cost_per_1m,
            baseline.blended_cost_per_1m,
        ) * 100
        if savings > 0:
            insights.append(
                f"Most cost-efficient {family} config: {most_efficient.memory_mb}MB saves "
                f"{savings:.1f}% blended cost vs {baseline.memory_mb}MB baseline"
            )

    return insights


def scenario_optimizations(
    cost_efficiency: Dict[str, CostEfficiencyAnalysis]
) -> Dict[str, Dict[str, Any]]:
    """Cheapest warm tier and fastest tier per family."""
    scenarios = {}
    for family, analysis in cost_efficiency.items():
        configurations = analysis.all_configurations
        scenarios[family] = {
            "warm_optimal": min(configurations, key=lambda c: c.cost_per_1m_warm),
            "perf_optimal": min(configurations, key=lambda c: c.avg_execution_time),
        }
    return scenarios


def analyze_data_quality(families: Dict[str, List[AggregatedResult]]) -> Dict[str, Dict[str, Any]]:
    """Per-family collection completeness."""
    quality = {}
    for family, results in families.items():
        quality[family] = {
            "total_configurations": len(results),
            "configurations": [
                {
                    "memory_mb": result.memory_mb,
                    "cold_count": result.cold_stats.count if result.cold_stats else 0,
                    "warm_count": result.warm_stats.count if result.warm_stats else 0,
                    "requests_attempted": result.requests_attempted,
                    "errors": result.errors,
                }
                for result in results
            ],
        }
    return quality


def analyze_cold_starts(results: Sequence[AggregatedResult]) -> Optional[Dict[str, Any]]:
    """
    Analyze cold start overhead across the tiers of one family.

    A tier whose cold average is not above its warm average is flagged as
    ``classification_suspect``: the endpoint reports the cold flag itself and
    this is the only latency-based cross-check applied to it.

    Returns:
        Dict with per-tier overheads and the memory/cold-start correlation,
        or None when no tier has cold start data
    """
    cold_tiers = sorted(
        (r for r in results if r.cold_stats is not None), key=lambda r: r.memory_mb
    )
    if not cold_tiers:
        return None

    tiers = []
    for result in cold_tiers:
        entry = {
            "memory_mb": result.memory_mb,
            "cold_avg": result.cold_stats.average,
            "warm_avg": None,
            "overhead_ms": None,
            "overhead_ratio": None,
            "classification_suspect": False,
        }
        if result.warm_stats is not None:
            warm_avg = result.warm_stats.average
            overhead = result.cold_stats.average - warm_avg
            entry.update(
                warm_avg=warm_avg,
                overhead_ms=overhead,
                overhead_ratio=safe_divide(result.cold_stats.average, warm_avg, default=None),
                classification_suspect=overhead <= 0,
            )
            if overhead <= 0:
                logger.warning(
                    f"{result.memory_mb}MB: reported cold starts are not slower than warm starts"
                )
        tiers.append(entry)

    correlation = None
    if len(cold_tiers) >= 2:
        memory = np.array([r.memory_mb for r in cold_tiers], dtype=float)
        cold = np.array([r.cold_stats.average for r in cold_tiers], dtype=float)
        if np.std(memory) > 0 and np.std(cold) > 0:
            correlation = float(np.corrcoef(memory, cold)[0, 1])

    return {"tiers": tiers, "memory_cold_start_correlation": correlation}
