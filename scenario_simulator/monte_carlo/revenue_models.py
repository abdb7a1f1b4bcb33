"""
PURPOSE: Revenue-model strategy table for the monthly simulation step.

RESPONSIBILITIES:
- One pure, vectorized step function per RevenueModel
- Shared monthly cost model (fixed + per-customer scaling + inflation)
- Descriptive metadata for each revenue model
- Single responsibility: one month of one model, no looping over months or trials

Every array argument has shape (trials,) so a step advances all trials of a
scenario at once.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict

import numpy as np

from scenario_simulator.config import (
    BASE_ACQUISITION_RATE,
    MIN_COST_SHARE,
    MIN_PENETRATION_MULTIPLIER,
    MONTHLY_INFLATION_RATE,
    VARIABLE_COST_SHARE,
)
from scenario_simulator.models import RevenueModel
from scenario_simulator.scenarios import ScenarioParameters


@dataclass(frozen=True)
class ModelAdjustments:
    """Per-model base rates. Fields a model does not use keep their defaults."""

    growth_rate_base: float
    market_penetration_max: float
    churn_rate_base: float = 0.0
    conversion_rate_base: float = 0.0
    commission_rate_base: float = 0.0
    cpm_base: float = 0.0
    repeat_purchase_rate: float = 0.0


MODEL_ADJUSTMENTS: Dict[RevenueModel, ModelAdjustments] = {
    RevenueModel.SUBSCRIPTION: ModelAdjustments(growth_rate_base=0.15, market_penetration_max=0.10, churn_rate_base=0.05),
    RevenueModel.FREEMIUM: ModelAdjustments(growth_rate_base=0.25, market_penetration_max=0.20, conversion_rate_base=0.02),
    RevenueModel.MARKETPLACE: ModelAdjustments(growth_rate_base=0.20, market_penetration_max=0.15, commission_rate_base=0.05),
    RevenueModel.ADVERTISING: ModelAdjustments(growth_rate_base=0.30, market_penetration_max=0.25, cpm_base=5.0),
    RevenueModel.ONE_TIME: ModelAdjustments(growth_rate_base=0.10, market_penetration_max=0.05, repeat_purchase_rate=0.20),
}

FREEMIUM_MAX_PAID_SHARE = 0.1
MARKETPLACE_ACTIVE_SHARE = 0.6
MARKETPLACE_TRANSACTIONS_PER_USER = 2
ADVERTISING_ACTIVE_SHARE = 0.8
ADVERTISING_IMPRESSIONS_PER_USER = 1000


@dataclass
class CustomerState:
    """Cumulative and currently active customers for every trial."""

    total: np.ndarray
    active: np.ndarray

    @classmethod
    def empty(cls, trials):
        return cls(total=np.zeros(trials), active=np.zeros(trials))


@dataclass
class MonthFactors:
    """Sampled multipliers for one month, one value per trial."""

    demand: np.ndarray
    cost: np.ndarray
    churn: np.ndarray
    share: np.ndarray
    growth: np.ndarray


@dataclass(frozen=True)
class Baseline:
    pricing: float
    monthly_costs: float
    target_market_size: float


@dataclass
class MonthStep:
    revenue: np.ndarray
    costs: np.ndarray
    state: CustomerState = field(repr=False)


def _penetration_multiplier(state, baseline, adjustments):
    penetration = state.total / baseline.target_market_size
    return np.maximum(MIN_PENETRATION_MULTIPLIER, 1.0 - penetration / adjustments.market_penetration_max)


def _new_customers(growth_rate, baseline, factors):
    return np.maximum(
        0.0,
        baseline.target_market_size * BASE_ACQUISITION_RATE * growth_rate * factors.demand * factors.share * factors.growth,
    )


def _growth_rate(state, baseline, scenario, adjustments):
    return (
        adjustments.growth_rate_base
        * scenario.customer_acquisition_multiplier
        * _penetration_multiplier(state, baseline, adjustments)
    )


def monthly_costs(month, customers, baseline, scenario, factors):
    """
    Operating costs for a month.

    Fixed costs scale with the scenario's cost efficiency, variable costs add
    10% of base costs per 1000 customers, and both grow with monthly inflation.
    Never below half the base costs.
    """
    fixed = baseline.monthly_costs * scenario.cost_efficiency_multiplier
    variable = (customers / 1000.0) * baseline.monthly_costs * VARIABLE_COST_SHARE
    inflation = (1.0 + MONTHLY_INFLATION_RATE) ** (month - 1)
    costs = (fixed + variable) * inflation * factors.cost
    return np.maximum(baseline.monthly_costs * MIN_COST_SHARE, costs)


def _finish(month, revenue, state, baseline, scenario, factors):
    state = CustomerState(total=np.maximum(0.0, state.total), active=np.maximum(0.0, state.active))
    costs = monthly_costs(month, state.total, baseline, scenario, factors)
    return MonthStep(revenue=np.maximum(0.0, revenue), costs=costs, state=state)


def subscription_step(month, state, baseline, scenario, factors):
    adj = MODEL_ADJUSTMENTS[RevenueModel.SUBSCRIPTION]
    churn_rate = adj.churn_rate_base * factors.churn / scenario.retention_multiplier
    new = _new_customers(_growth_rate(state, baseline, scenario, adj), baseline, factors)
    active = np.maximum(0.0, state.active - state.active * churn_rate + new)
    total = state.total + new
    revenue = active * baseline.pricing * scenario.pricing_power_multiplier
    return _finish(month, revenue, CustomerState(total=total, active=active), baseline, scenario, factors)


def freemium_step(month, state, baseline, scenario, factors):
    adj = MODEL_ADJUSTMENTS[RevenueModel.FREEMIUM]
    conversion_rate = adj.conversion_rate_base * scenario.retention_multiplier
    new_free = _new_customers(_growth_rate(state, baseline, scenario, adj), baseline, factors)
    total = state.total + new_free
    active = np.minimum(state.active + total * conversion_rate, total * FREEMIUM_MAX_PAID_SHARE)
    revenue = active * baseline.pricing * scenario.pricing_power_multiplier
    return _finish(month, revenue, CustomerState(total=total, active=active), baseline, scenario, factors)


def marketplace_step(month, state, baseline, scenario, factors):
    adj = MODEL_ADJUSTMENTS[RevenueModel.MARKETPLACE]
    new = _new_customers(_growth_rate(state, baseline, scenario, adj), baseline, factors)
    total = state.total + new
    active = total * MARKETPLACE_ACTIVE_SHARE
    volume = active * MARKETPLACE_TRANSACTIONS_PER_USER * baseline.pricing
    revenue = volume * adj.commission_rate_base * scenario.pricing_power_multiplier
    return _finish(month, revenue, CustomerState(total=total, active=active), baseline, scenario, factors)


def advertising_step(month, state, baseline, scenario, factors):
    adj = MODEL_ADJUSTMENTS[RevenueModel.ADVERTISING]
    cpm = adj.cpm_base * scenario.pricing_power_multiplier
    new = _new_customers(_growth_rate(state, baseline, scenario, adj), baseline, factors)
    total = state.total + new
    active = total * ADVERTISING_ACTIVE_SHARE
    revenue = (active * ADVERTISING_IMPRESSIONS_PER_USER / 1000.0) * cpm
    return _finish(month, revenue, CustomerState(total=total, active=active), baseline, scenario, factors)


def one_time_step(month, state, baseline, scenario, factors):
    adj = MODEL_ADJUSTMENTS[RevenueModel.ONE_TIME]
    new = _new_customers(_growth_rate(state, baseline, scenario, adj), baseline, factors)
    # Repeat buyers come from customers acquired before this month.
    repeat = state.total * adj.repeat_purchase_rate
    total = state.total + new
    active = new + repeat
    revenue = active * baseline.pricing * scenario.pricing_power_multiplier
    return _finish(month, revenue, CustomerState(total=total, active=active), baseline, scenario, factors)


StepFunction = Callable[[int, CustomerState, Baseline, ScenarioParameters, MonthFactors], MonthStep]

REVENUE_MODEL_STRATEGIES: Dict[RevenueModel, StepFunction] = {
    RevenueModel.SUBSCRIPTION: subscription_step,
    RevenueModel.FREEMIUM: freemium_step,
    RevenueModel.MARKETPLACE: marketplace_step,
    RevenueModel.ADVERTISING: advertising_step,
    RevenueModel.ONE_TIME: one_time_step,
}


def get_step_function(model: RevenueModel) -> StepFunction:
    try:
        return REVENUE_MODEL_STRATEGIES[RevenueModel(model)]
    except ValueError:
        raise ValueError(f"Unknown revenue model: {model}") from None


REVENUE_MODELS = {
    RevenueModel.SUBSCRIPTION: {
        "name": "Subscription (SaaS)",
        "description": "Recurring monthly revenue with customer churn",
        "key_metrics": ["MRR", "Churn Rate", "LTV", "CAC"],
        "typical_variables": ["churn_rate_variation", "pricing_elasticity", "customer_acquisition_efficiency"],
    },
    RevenueModel.FREEMIUM: {
        "name": "Freemium",
        "description": "Free users with a paid conversion",
        "key_metrics": ["Conversion Rate", "ARPU", "Free Users", "Paid Users"],
        "typical_variables": ["conversion_rate_variation", "user_engagement_rate", "feature_adoption"],
    },
    RevenueModel.MARKETPLACE: {
        "name": "Marketplace",
        "description": "Commission on transactions between users",
        "key_metrics": ["GMV", "Take Rate", "Transaction Volume", "Active Users"],
        "typical_variables": ["transaction_volume_volatility", "commission_rate_changes", "network_effects"],
    },
    RevenueModel.ADVERTISING: {
        "name": "Advertising",
        "description": "Revenue from advertising and impressions",
        "key_metrics": ["CPM", "CTR", "Impressions", "Ad Revenue"],
        "typical_variables": ["cpm_fluctuation", "user_engagement_rate", "ad_blocker_adoption"],
    },
    RevenueModel.ONE_TIME: {
        "name": "One-Time Purchase",
        "description": "Single purchases with possible repeat buyers",
        "key_metrics": ["AOV", "Repeat Rate", "Customer Acquisition", "Seasonality"],
        "typical_variables": ["repeat_purchase_rate", "seasonal_demand", "market_saturation_rate"],
    },
}


def get_revenue_model_info(model: RevenueModel) -> dict:
    return dict(REVENUE_MODELS[RevenueModel(model)])
