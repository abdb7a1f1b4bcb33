"""
Sensitivity analysis: which uncertain inputs move the expected result the most.

- full.py: bidirectional one-at-a-time runs
- optimized.py: single-direction runs with progress, status and offline suggestion
- offline.py: elasticity-table approximation, no engine runs
- charts.py: tornado and spider datasets
- session.py: timeout, cancellation and offline substitution around a run
"""

from .common import AnalysisMode, AnalysisOutcome, AnalysisProgress, VariableStatus
from .full import FullSensitivityAnalysis, analyze
from .offline import calculate_offline_analysis, get_recommendations
from .optimized import OptimizedSensitivityAnalysis, analyze_optimized
from .session import SensitivitySession, run_sensitivity_analysis

__all__ = [
    "AnalysisMode",
    "AnalysisOutcome",
    "AnalysisProgress",
    "VariableStatus",
    "FullSensitivityAnalysis",
    "OptimizedSensitivityAnalysis",
    "SensitivitySession",
    "analyze",
    "analyze_optimized",
    "calculate_offline_analysis",
    "get_recommendations",
    "run_sensitivity_analysis",
]
