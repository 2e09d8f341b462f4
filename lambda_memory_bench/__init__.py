"""
Lambda Memory Bench

Cold and warm start benchmarking for serverless functions across memory tiers,
with cost modelling and memory configuration recommendations.
"""

__version__ = "1.0.0"
__author__ = "Lambda Memory Bench Contributors"

# Import main components
from .config_module import BenchmarkConfig, ConfigManager, FamilyConfig, PricingConfig, TierConfig
from .collector import SampleCollector, collect_tiers
from .orchestrator_module import BenchmarkOrchestrator, run_benchmark_session
from .report_service import ReportGenerator, generate_summary_report, export_to_json
from .analyzers import AnalysisCoordinator, CostAnalyzer, ScoringWeights, select_optimal
from .models import (
    Sample,
    TrialSet,
    Stats,
    AggregatedResult,
    CostMetrics,
    CostEfficiencyAnalysis,
    OptimalConfig,
    Summary,
    BenchmarkResults,
)
from .exceptions import (
    BenchmarkError,
    ConfigurationError,
    MalformedResponseError,
    BatchTransportError,
    InsufficientDataError,
    CostModelError,
    ReportGenerationError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Main classes
    "BenchmarkConfig",
    "ConfigManager",
    "FamilyConfig",
    "PricingConfig",
    "TierConfig",
    "SampleCollector",
    "BenchmarkOrchestrator",
    "ReportGenerator",
    "AnalysisCoordinator",
    "CostAnalyzer",
    "ScoringWeights",
    # Models
    "Sample",
    "TrialSet",
    "Stats",
    "AggregatedResult",
    "CostMetrics",
    "CostEfficiencyAnalysis",
    "OptimalConfig",
    "Summary",
    "BenchmarkResults",
    # Exceptions
    "BenchmarkError",
    "ConfigurationError",
    "MalformedResponseError",
    "BatchTransportError",
    "InsufficientDataError",
    "CostModelError",
    "ReportGenerationError",
    # Convenience functions
    "collect_tiers",
    "run_benchmark_session",
    "select_optimal",
    "generate_summary_report",
    "export_to_json",
]
