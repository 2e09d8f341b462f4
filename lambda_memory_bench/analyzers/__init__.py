"""Analysis modules for benchmark data."""

from .cost_analyzer import CostAnalyzer, compute_cost, blended_cost, blended_scenarios
from .optimizer import ScoringWeights, select_optimal, classify_use_case
from .coordinator import AnalysisCoordinator

__all__ = [
    'CostAnalyzer',
    'compute_cost',
    'blended_cost',
    'blended_scenarios',
    'ScoringWeights',
    'select_optimal',
    'classify_use_case',
    'AnalysisCoordinator'
]
