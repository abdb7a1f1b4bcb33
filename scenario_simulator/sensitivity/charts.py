"""
Tornado and spider chart datasets built from sensitivity results.
"""

from dataclasses import dataclass
from typing import List

from scenario_simulator.config import HIGH_IMPACT_PERCENT, MEDIUM_IMPACT_PERCENT, SPIDER_ELASTICITY_CAP
from scenario_simulator.models import SensitivityResult


@dataclass(frozen=True)
class TornadoBar:
    variable: str
    label: str
    low: float
    high: float
    impact: float


@dataclass(frozen=True)
class SpiderPoint:
    variable: str
    label: str
    sensitivity: float
    impact: float
    elasticity: float


def display_label(variable_name: str) -> str:
    return variable_name.replace("_", " ")


def tornado_data(results: List[SensitivityResult], baseline_result: float) -> List[TornadoBar]:
    """Bars relative to the baseline, largest impact first."""
    bars = [
        TornadoBar(
            variable=r.variable,
            label=display_label(r.variable),
            low=baseline_result - r.low_result,
            high=r.high_result - baseline_result,
            impact=r.impact,
        )
        for r in results
    ]
    bars.sort(key=lambda bar: bar.impact, reverse=True)
    return bars


def _normalize(values):
    top = max(values, default=0.0)
    if top <= 0:
        return [0.0 for _ in values]
    return [v / top * 100.0 for v in values]


def spider_data(results: List[SensitivityResult]) -> List[SpiderPoint]:
    """Each metric scaled to 0-100 by its maximum; elasticity is capped first."""
    sensitivity = _normalize([r.sensitivity for r in results])
    impact = _normalize([r.impact for r in results])
    elasticity = _normalize([min(r.elasticity, SPIDER_ELASTICITY_CAP) for r in results])
    return [
        SpiderPoint(
            variable=r.variable,
            label=display_label(r.variable),
            sensitivity=sensitivity[i],
            impact=impact[i],
            elasticity=elasticity[i],
        )
        for i, r in enumerate(results)
    ]


def impact_level(result: SensitivityResult, baseline_result: float) -> str:
    """"high", "medium" or "low" from the average absolute % change of both results."""
    if not baseline_result:
        return "low"
    high_change = (result.high_result - baseline_result) / baseline_result * 100.0
    low_change = (result.low_result - baseline_result) / baseline_result * 100.0
    average = (abs(high_change) + abs(low_change)) / 2.0
    if average > HIGH_IMPACT_PERCENT:
        return "high"
    elif average > MEDIUM_IMPACT_PERCENT:
        return "medium"
    return "low"
