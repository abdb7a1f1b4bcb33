"""
Scenario simulator for startup ideas.

PURPOSE:
    Estimate how an idea's finances evolve month by month under optimistic,
    realistic and pessimistic scenarios, using Monte Carlo trials over
    uncertain inputs, and rank which inputs move the outcome the most.

RESPONSIBILITIES:
    - models.py / scenarios.py: data model and scenario configuration
    - financial_data.py: parsing and clamping of baseline financials
    - monte_carlo/: sampling, revenue models, statistics, engine, outputs
    - sensitivity/: full, optimized and offline sensitivity strategies, charts, session
    - persistence.py: JSON file store for saved simulations
"""

from .models import (
    IdeaFinancialData,
    ScenarioType,
    SensitivityResult,
    SimulationParams,
    SimulationResults,
    SimulationVariable,
)
from .scenarios import ScenarioConfig, default_scenario_configs, get_scenario_info

__version__ = "0.1.0"

__all__ = [
    "IdeaFinancialData",
    "ScenarioType",
    "SensitivityResult",
    "SimulationParams",
    "SimulationResults",
    "SimulationVariable",
    "ScenarioConfig",
    "default_scenario_configs",
    "get_scenario_info",
]
