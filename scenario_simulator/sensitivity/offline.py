"""
PURPOSE: Offline sensitivity approximation from a fixed elasticity table.

RESPONSIBILITIES:
- Approximate per-variable impact without running the simulation engine
- Bucket the approximations into high / medium / low impact groups
- Templated recommendation text for the buckets
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List

from scenario_simulator.config import OFFLINE_DEFAULT_ELASTICITY, get_offline_thresholds
from scenario_simulator.models import SensitivityResult
from scenario_simulator.sensitivity.common import perturbation_bounds, validate_baseline


def _row(revenue, costs, growth_rate, market_share, churn_rate):
    return MappingProxyType({
        "revenue": revenue,
        "costs": costs,
        "growth_rate": growth_rate,
        "market_share": market_share,
        "churn_rate": churn_rate,
    })


# variable name -> impact category -> elasticity
ELASTICITY_TABLE = MappingProxyType({
    "market_demand": _row(1.2, 0.0, 0.8, 1.0, 0.0),
    "pricing": _row(1.5, 0.0, 0.3, 0.4, 0.2),
    "customer_acquisition_efficiency": _row(0.8, 0.4, 1.1, 0.6, 0.0),
    "operational_costs": _row(0.0, 1.0, 0.0, 0.0, 0.0),
    "competition_intensity": _row(0.6, 0.1, 0.4, 1.2, 0.3),
    "churn_rate_variation": _row(0.7, 0.0, 0.5, 0.0, 1.4),
    "transaction_volume_volatility": _row(1.1, 0.2, 0.6, 0.3, 0.0),
    "cpm_fluctuation": _row(0.4, 0.0, 0.1, 0.1, 0.0),
    "user_engagement_rate": _row(0.5, 0.0, 0.3, 0.2, 0.1),
    "repeat_purchase_rate": _row(0.3, 0.0, 0.2, 0.0, 0.0),
    "market_saturation_rate": _row(0.2, 0.0, 0.4, 0.3, 0.0),
})


def get_variable_elasticity(variable_name: str, impact: str) -> float:
    """
    Table elasticity, OFFLINE_DEFAULT_ELASTICITY for unknown variables or categories.

    A listed 0.0 stays 0.0 instead of falling back to the default: a variable
    known not to move a category reports no impact.
    """
    impact = getattr(impact, "value", impact)
    row = ELASTICITY_TABLE.get(variable_name)
    if row is None or impact not in row:
        return OFFLINE_DEFAULT_ELASTICITY
    return row[impact]


def calculate_offline_analysis(variables, baseline_result, analysis_range) -> List[SensitivityResult]:
    """
    Approximate sensitivity results, sorted by impact descending.

    Raises:
        InvalidBaselineError: if baseline_result is not finite and positive
    """
    baseline_result = validate_baseline(baseline_result)
    change = analysis_range / 100.0

    results = []
    for variable in variables:
        base_value = variable.base_value()
        elasticity = get_variable_elasticity(variable.name, variable.impact)
        impact = abs(baseline_result * elasticity * change)
        low_value, high_value = perturbation_bounds(base_value, analysis_range)
        results.append(SensitivityResult(
            variable=variable.name,
            baseline_value=base_value,
            low_value=low_value,
            high_value=high_value,
            low_result=baseline_result - impact,
            high_result=baseline_result + impact,
            impact=impact,
            sensitivity=elasticity * 100.0,
            elasticity=elasticity * 100.0,
            is_offline_calculation=True,
        ))

    results.sort(key=lambda r: r.impact, reverse=True)
    return results


@dataclass(frozen=True)
class OfflineRecommendations:
    high_impact: List[str]
    medium_impact: List[str]
    low_impact: List[str]
    recommendations: List[str]


def get_recommendations(results: List[SensitivityResult]) -> OfflineRecommendations:
    """Split results into impact buckets. Every variable lands in exactly one bucket."""
    thresholds = get_offline_thresholds()
    high, medium, low = [], [], []
    for result in results:
        if result.elasticity > thresholds["high"]:
            high.append(result.variable)
        elif result.elasticity >= thresholds["low"]:
            medium.append(result.variable)
        else:
            low.append(result.variable)

    return OfflineRecommendations(
        high_impact=high,
        medium_impact=medium,
        low_impact=low,
        recommendations=[
            f"📈 Focus on the {len(high)} high-impact factors",
            f"⚖️ Monitor the {len(medium)} medium-impact factors",
            f"📊 The {len(low)} remaining factors have a low impact on results",
            "⚠️ This analysis is based on estimates. Run a full simulation for more precision.",
        ],
    )
