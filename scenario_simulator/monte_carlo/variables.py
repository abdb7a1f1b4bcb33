"""
PURPOSE: Default uncertain inputs for an idea, distribution metadata and parameter validation.

RESPONSIBILITIES:
- Build the default SimulationVariable set for an idea
- Describe each distribution type and the parameters it requires
- Validate SimulationParams into user-facing error messages (never raises)
"""

from typing import Optional

from scenario_simulator.config import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_TIME_HORIZON,
    MAX_CONFIDENCE_LEVEL,
    MAX_ITERATIONS,
    MAX_TIME_HORIZON,
    MIN_CONFIDENCE_LEVEL,
    MIN_ITERATIONS,
    MIN_TIME_HORIZON,
    NUM_RUNS,
)
from scenario_simulator.models import (
    DistributionType,
    IdeaFinancialData,
    ImpactCategory,
    SimulationParams,
    SimulationVariable,
    VariableParameters,
)

VARIABLE_TYPE_INFO = {
    DistributionType.NORMAL: {
        "name": "Normal",
        "description": "Normal distribution (bell curve)",
        "parameters": ["mean", "std_dev"],
        "icon": "📊",
    },
    DistributionType.UNIFORM: {
        "name": "Uniform",
        "description": "Uniform distribution (every value equally likely)",
        "parameters": ["min", "max"],
        "icon": "📏",
    },
    DistributionType.TRIANGULAR: {
        "name": "Triangular",
        "description": "Triangular distribution (most likely value in the middle)",
        "parameters": ["min", "max", "mode"],
        "icon": "🔺",
    },
    DistributionType.LOGNORMAL: {
        "name": "Log-Normal",
        "description": "Log-normal distribution (always positive values)",
        "parameters": ["mean", "std_dev"],
        "icon": "📈",
    },
}


def get_variable_type_info(dist_type: DistributionType) -> dict:
    return dict(VARIABLE_TYPE_INFO[DistributionType(dist_type)])


def create_default_variables(idea: Optional[IdeaFinancialData] = None) -> list[SimulationVariable]:
    """
    Default uncertain inputs: demand, acquisition cost, competition,
    operational efficiency and market growth. Ideas with a known churn rate
    also get a churn variation variable.
    """
    variables = [
        SimulationVariable(
            name="market_demand",
            type=DistributionType.NORMAL,
            parameters=VariableParameters(mean=1.0, std_dev=0.2),
            impact=ImpactCategory.REVENUE,
        ),
        SimulationVariable(
            name="customer_acquisition_cost",
            type=DistributionType.TRIANGULAR,
            parameters=VariableParameters(min=0.8, max=1.5, mode=1.0),
            impact=ImpactCategory.COSTS,
        ),
        SimulationVariable(
            name="competition_impact",
            type=DistributionType.UNIFORM,
            parameters=VariableParameters(min=0.7, max=1.3),
            impact=ImpactCategory.MARKET_SHARE,
        ),
        SimulationVariable(
            name="operational_efficiency",
            type=DistributionType.NORMAL,
            parameters=VariableParameters(mean=1.0, std_dev=0.15),
            impact=ImpactCategory.COSTS,
        ),
        SimulationVariable(
            name="market_growth_rate",
            type=DistributionType.TRIANGULAR,
            parameters=VariableParameters(min=0.02, max=0.15, mode=0.05),
            impact=ImpactCategory.GROWTH_RATE,
        ),
    ]
    if idea is not None and idea.churn_rate:
        variables.append(
            SimulationVariable(
                name="churn_rate_variation",
                type=DistributionType.NORMAL,
                parameters=VariableParameters(mean=1.0, std_dev=0.2),
                impact=ImpactCategory.CHURN_RATE,
            )
        )
    return variables


def create_default_params(variables: Optional[list[SimulationVariable]] = None) -> SimulationParams:
    return SimulationParams(
        time_horizon=DEFAULT_TIME_HORIZON,
        iterations=NUM_RUNS,
        confidence_level=DEFAULT_CONFIDENCE_LEVEL,
        variables=list(variables or []),
    )


def validate_simulation_params(params: SimulationParams) -> list[str]:
    """Return user-facing errors for out-of-range parameters. Empty list means valid."""
    errors = []

    if not MIN_TIME_HORIZON <= params.time_horizon <= MAX_TIME_HORIZON:
        errors.append(f"Time horizon must be between {MIN_TIME_HORIZON} and {MAX_TIME_HORIZON} months")

    if not MIN_ITERATIONS <= params.iterations <= MAX_ITERATIONS:
        errors.append(f"Number of iterations must be between {MIN_ITERATIONS} and {MAX_ITERATIONS:,}")

    if not MIN_CONFIDENCE_LEVEL <= params.confidence_level <= MAX_CONFIDENCE_LEVEL:
        errors.append(f"Confidence level must be between {MIN_CONFIDENCE_LEVEL:.0f}% and {MAX_CONFIDENCE_LEVEL:.0f}%")

    for index, variable in enumerate(params.variables, start=1):
        if not variable.name.strip():
            errors.append(f"Variable {index}: name is required")

        for param in VARIABLE_TYPE_INFO[variable.type]["parameters"]:
            if getattr(variable.parameters, param) is None:
                errors.append(f"Variable {variable.name or index}: parameter {param} is required")

    return errors
