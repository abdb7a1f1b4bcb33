"""
Monte Carlo engine for idea financial scenarios.

SRP/DRY CHECK:
    Each submodule has a single responsibility:
    - distributions.py: Sampling from uncertainty distributions only
    - variables.py: Default variables and parameter validation only
    - revenue_models.py: One month of one revenue model only
    - statistics.py: Aggregation of per-trial outcomes only
    - simulation.py: Trial execution and result assembly only
    - outputs.py: Result formatting, export and recommendations only
"""

from .outputs import (
    OutputFormatter,
    ScenarioSummary,
    calculate_payback_period,
    calculate_roi,
    get_confidence_interval,
    results_to_csv,
    results_to_json,
)
from .simulation import MonteCarloSimulation, make_run_one, run_simulation
from .variables import create_default_variables, validate_simulation_params

__all__ = [
    "MonteCarloSimulation",
    "run_simulation",
    "make_run_one",
    "create_default_variables",
    "validate_simulation_params",
    "OutputFormatter",
    "ScenarioSummary",
    "calculate_roi",
    "calculate_payback_period",
    "get_confidence_interval",
    "results_to_csv",
    "results_to_json",
]
