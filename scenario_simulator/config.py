"""
PURPOSE: Simulation configuration and threshold parameters for the scenario simulator.

RESPONSIBILITIES:
- Define simulation hyperparameters (number of runs, horizon, random seed)
- Revenue/cost model constants shared by every revenue model
- Sensitivity analysis ranges, timeout and offline classification thresholds
- Ingestion bounds for baseline financial data
- Single responsibility: configuration only, no simulation logic

Values marked "env" can be overridden through SCENARIO_SIM_* environment variables.
"""
import os
from typing import Optional


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return float(value)


# Simulation Parameters
NUM_RUNS = _env_int("SCENARIO_SIM_NUM_RUNS", 1000)  # env
RANDOM_SEED = _env_int("SCENARIO_SIM_RANDOM_SEED", None)  # env; None = entropy-seeded
DEFAULT_TIME_HORIZON = _env_int("SCENARIO_SIM_TIME_HORIZON", 36)  # env; months
DEFAULT_CONFIDENCE_LEVEL = 95.0  # percent

# Parameter validation limits
MIN_TIME_HORIZON = 1
MAX_TIME_HORIZON = 120
MIN_ITERATIONS = 100
MAX_ITERATIONS = 10000
MIN_CONFIDENCE_LEVEL = 80.0
MAX_CONFIDENCE_LEVEL = 99.0

# Revenue and cost model
BASE_ACQUISITION_RATE = 0.01  # share of the market reachable per month
MIN_PENETRATION_MULTIPLIER = 0.1
MONTHLY_INFLATION_RATE = 0.002
VARIABLE_COST_SHARE = 0.1  # share of base costs per 1000 customers
MIN_COST_SHARE = 0.5  # monthly costs never drop below this share of base costs
ANNUAL_DISCOUNT_RATE = 0.10

# Clamp ranges for sampled factors
DEMAND_FACTOR_RANGE = (0.1, 3.0)
COST_FACTOR_RANGE = (0.5, 2.0)
CHURN_FACTOR_RANGE = (0.5, 2.0)
SHARE_FACTOR_RANGE = (0.1, 3.0)
GROWTH_RATE_RANGE = (-0.5, 1.0)

# Risk Analysis
BREAK_EVEN_QUORUM = 0.5  # share of trials that must have broken even

# Sensitivity Analysis (Tornado Chart)
DEFAULT_ANALYSIS_RANGE = 20.0  # +/- percent, full strategy
OPTIMIZED_ANALYSIS_RANGE = 15.0  # +/- percent, single-direction strategy
SENSITIVITY_ITERATIONS = 1000
SENSITIVITY_RANDOM_SEED = 20240601
ANALYSIS_TIMEOUT_SECONDS = _env_float("SCENARIO_SIM_ANALYSIS_TIMEOUT_SECONDS", 30.0)  # env
OFFLINE_SUGGESTION_ERROR_COUNT = 2
SPIDER_ELASTICITY_CAP = 100.0
HIGH_IMPACT_PERCENT = 10.0
MEDIUM_IMPACT_PERCENT = 5.0

# Offline fallback
OFFLINE_DEFAULT_ELASTICITY = 0.5
OFFLINE_HIGH_IMPACT_THRESHOLD = 80.0
OFFLINE_LOW_IMPACT_THRESHOLD = 40.0

# Baseline financial data bounds (ingestion contract)
INITIAL_INVESTMENT_BOUNDS = (1_000.0, 10_000_000.0)
MONTHLY_COSTS_BOUNDS = (100.0, 1_000_000.0)
PRICING_BOUNDS = (1.0, 100_000.0)
TARGET_MARKET_SIZE_BOUNDS = (1_000.0, 1_000_000_000.0)

# Recommendation thresholds on probability of loss
GO_MAX_LOSS_PROBABILITY = 0.20
CAUTION_MAX_LOSS_PROBABILITY = 0.50

# Persistence
STORE_DIR = os.environ.get(
    "SCENARIO_SIM_STORE_DIR",
    os.path.join(os.path.expanduser("~"), ".scenario_simulator", "simulations"),
)  # env

# Output Configuration
ROUND_PROBABILITY = 3
ROUND_CURRENCY = 2


def get_financial_bounds():
    """Return clamp bounds for each baseline financial field."""
    return {
        "initial_investment": INITIAL_INVESTMENT_BOUNDS,
        "monthly_costs": MONTHLY_COSTS_BOUNDS,
        "pricing": PRICING_BOUNDS,
        "target_market_size": TARGET_MARKET_SIZE_BOUNDS,
    }


def get_offline_thresholds():
    """Return elasticity thresholds (percent form) for offline recommendation buckets."""
    return {
        "high": OFFLINE_HIGH_IMPACT_THRESHOLD,
        "low": OFFLINE_LOW_IMPACT_THRESHOLD,
    }


def get_recommendation_thresholds():
    """Return probability-of-loss thresholds for go/caution/no-go recommendations."""
    return {
        "go": GO_MAX_LOSS_PROBABILITY,
        "caution": CAUTION_MAX_LOSS_PROBABILITY,
    }
