"""
Report generation service for Lambda Memory Bench.
Writes the results document and renders the plain-text summary report.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from tabulate import tabulate

from .analyzers.coordinator import AnalysisCoordinator
from .config_module import BenchmarkConfig, PricingConfig
from .exceptions import ReportGenerationError
from .models import BenchmarkResults, OptimalConfig
from .utils import save_json_file

logger = logging.getLogger(__name__)

RULE = "=" * 80
SUBRULE = "-" * 60


class ReportGenerator:
    """Generates reports from benchmark results."""

    def __init__(self, results: BenchmarkResults, config: Optional[BenchmarkConfig] = None):
        """
        Initialize report generator.

        Args:
            results: Benchmark results
            config: Optional benchmark configuration (pricing defaults otherwise)
        """
        self.results = results
        self.config = config
        pricing = config.pricing if config else PricingConfig()
        self.coordinator = AnalysisCoordinator(pricing)

    def get_report_data(self) -> Dict[str, Any]:
        return self.coordinator.report_data(self.results)

    def get_summary(self) -> List[Dict[str, Any]]:
        """One row per family: the recommended tier and its headline numbers."""
        rows = []
        for family, optimal in self.results.summary.optimal_configurations.items():
            rows.append(
                {
                    "family": family,
                    "memory_mb": optimal.memory_mb if optimal else None,
                    "warm_start_avg": optimal.warm_start_avg if optimal else None,
                    "cold_start_avg": optimal.cold_start_avg if optimal else None,
                    "blended_cost": optimal.blended_cost if optimal else None,
                }
            )
        return rows

    def save_json(self, filepath: str):
        """Save the full results document as JSON."""
        try:
            save_json_file(self.results.to_dict(), filepath)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save JSON results: {e}")
        logger.info(f"Comprehensive results saved to {filepath}")

    def save_text(self, filepath: str):
        """Save the plain-text summary report."""
        content = "Comprehensive Performance Report\n" + RULE + "\n" + self.generate_text()
        try:
            Path(filepath).parent.mkdir(parents=True, exist_ok=True)
            with open(filepath, "w") as f:
                f.write(content)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save summary report: {e}")
        logger.info(f"Summary report saved to {filepath}")

    def generate_text(self) -> str:
        """Render the summary report as plain text."""
        data = self.get_report_data()
        sections = [
            self._render_overview(data["overview"]),
            self._render_recommendations(data["recommendations"]),
            self._render_analysis(data["analysis"]),
            self._render_insights(data["insights"]),
            self._render_scenarios(data["scenarios"]),
            self._render_data_quality(data["data_quality"]),
            self._render_cold_starts(data["cold_starts"]),
        ]
        return "\n\n".join(section for section in sections if section) + "\n"

    def _render_overview(self, overview: Dict[str, Any]) -> str:
        lines = [
            "Test Overview:",
            f"  - Test Timestamp: {overview['timestamp']}",
            f"  - Total Functions Tested: {overview['total_functions_tested']}",
        ]
        for family, count in overview["test_types"].items():
            lines.append(f"  - {family.title()} Functions: {count} configurations")
        return "\n".join(lines)

    def _render_recommendations(self, recommendations: Dict[str, Optional[OptimalConfig]]) -> str:
        lines = ["Recommended Memory Configurations (Balanced):", SUBRULE]
        for family, optimal in recommendations.items():
            if optimal is None:
                lines.append(f"  {family.title()} Functions: no recommendation (no warm start data)")
                continue

            lines.append(f"  {family.title()} Functions: {optimal.memory_mb}MB")
            lines.append(f"    - Warm Start Avg: {optimal.warm_start_avg:.2f}ms")
            if optimal.cold_start_avg is not None:
                lines.append(f"    - Cold Start Avg: {optimal.cold_start_avg:.2f}ms")
            else:
                lines.append("    - Cold Start Avg: N/A (no cold starts collected)")
            lines.append(f"    - Blended Cost: ${optimal.blended_cost:.4f} per 1M invocations")
            lines.append(f"    - Recommendation: {optimal.recommendation}")
        return "\n".join(lines)

    def _render_analysis(self, analysis: Dict[str, Dict[str, Any]]) -> str:
        blocks = []
        for family, data in analysis.items():
            block = [f"{family.title()} Functions - Cost vs Performance:", SUBRULE, "Warm starts:"]
            block.append(self._performance_table(data["warm_start"]))

            if data["has_any_cold_start"]:
                block.append("Cold starts:")
                block.append(self._performance_table(data["cold_start"]))
            else:
                block.append("Cold starts: none collected")

            fractions = self.coordinator.pricing.blended_scenario_fractions
            headers = ["Memory"] + [f"{f * 100:g}% cold" for f in fractions] + ["Best use case"]
            rows = [
                [f"{row['memory_mb']}MB"]
                + [f"${row['scenarios'][f]:.4f}" for f in fractions]
                + [row["use_case"]]
                for row in data["blended"]
            ]
            block.append("Blended cost per 1M invocations:")
            block.append(tabulate(rows, headers=headers, tablefmt="simple"))
            blocks.append("\n".join(block))
        return "\n\n".join(blocks)

    @staticmethod
    def _performance_table(points: List[Dict[str, Any]]) -> str:
        rows = [
            [
                f"{p['memory_mb']}MB",
                f"{p['execution_time']:.2f}ms",
                f"${p['cost']:.4f}",
                f"{p['performance_gain']:+.1f}%",
                f"{p['cost_change']:+.1f}%",
            ]
            for p in points
        ]
        headers = ["Memory", "Exec time", "Cost/1M", "Perf gain", "Cost change"]
        return tabulate(rows, headers=headers, tablefmt="simple")

    def _render_insights(self, insights: List[str]) -> str:
        if not insights:
            return ""
        return "\n".join(["Performance Insights:"] + [f"  - {insight}" for insight in insights])

    def _render_scenarios(self, scenarios: Dict[str, Dict[str, Any]]) -> str:
        if not scenarios:
            return ""
        lines = ["Scenario Optimizations:"]
        for family, scenario in scenarios.items():
            warm = scenario["warm_optimal"]
            perf = scenario["perf_optimal"]
            lines.append(
                f"  {family.title()}: high-frequency traffic -> {warm.memory_mb}MB "
                f"(${warm.cost_per_1m_warm:.4f} per 1M warm), latency-sensitive -> "
                f"{perf.memory_mb}MB ({perf.avg_execution_time:.2f}ms warm)"
            )
        return "\n".join(lines)

    def _render_data_quality(self, quality: Dict[str, Dict[str, Any]]) -> str:
        blocks = ["Data Quality:"]
        for family, data in quality.items():
            rows = [
                [
                    f"{c['memory_mb']}MB",
                    c["cold_count"],
                    c["warm_count"],
                    c["requests_attempted"],
                    c["errors"],
                ]
                for c in data["configurations"]
            ]
            blocks.append(f"  {family.title()} ({data['total_configurations']} configurations)")
            blocks.append(
                tabulate(
                    rows,
                    headers=["Memory", "Cold", "Warm", "Attempted", "Errors"],
                    tablefmt="simple",
                )
            )
        return "\n".join(blocks)

    def _render_cold_starts(self, cold_starts: Dict[str, Optional[Dict[str, Any]]]) -> str:
        lines = ["Cold Start Analysis:"]
        for family, analysis in cold_starts.items():
            if analysis is None:
                lines.append(f"  {family.title()}: no cold start data")
                continue

            correlation = analysis["memory_cold_start_correlation"]
            corr_text = f"{correlation:+.2f}" if correlation is not None else "n/a"
            lines.append(f"  {family.title()} (memory vs cold start correlation: {corr_text})")
            for tier in analysis["tiers"]:
                if tier["overhead_ms"] is None:
                    lines.append(
                        f"    {tier['memory_mb']}MB: {tier['cold_avg']:.2f}ms (no warm baseline)"
                    )
                    continue
                flag = " [suspect classification]" if tier["classification_suspect"] else ""
                lines.append(
                    f"    {tier['memory_mb']}MB: {tier['overhead_ms']:+.2f}ms over warm "
                    f"(x{tier['overhead_ratio']:.2f}){flag}"
                )
        return "\n".join(lines)


# Convenience functions
def generate_summary_report(results: BenchmarkResults, config: Optional[BenchmarkConfig] = None) -> str:
    """Generate the plain-text summary report."""
    return ReportGenerator(results, config).generate_text()


def export_to_json(results: BenchmarkResults, filepath: str):
    """Export results to JSON file."""
    ReportGenerator(results).save_json(filepath)
