"""
PURPOSE: Bidirectional one-at-a-time sensitivity analysis.

Each variable is moved down and up by `analysis_range` percent of its base
value while every other variable stays at baseline. Two runs per variable.

Metrics:
    impact      = |high_result - low_result|
    sensitivity = |(high_result - low_result) / (high_value - low_value)|
    elasticity  = |((high_result - low_result) / baseline_result) / ((high_value - low_value) / base_value)|
"""

import logging

from scenario_simulator.config import DEFAULT_ANALYSIS_RANGE
from scenario_simulator.models import SensitivityResult
from scenario_simulator.sensitivity.common import (
    SequentialAnalysis,
    call_run_one,
    is_usable_result,
    override_variable,
    perturbation_bounds,
)

logger = logging.getLogger(__name__)


def full_metrics(base_value, low_value, high_value, low_result, high_result, baseline_result):
    """Return (impact, sensitivity, elasticity) for a bidirectional test."""
    result_delta = high_result - low_result
    value_delta = high_value - low_value
    impact = abs(result_delta)
    if value_delta == 0 or base_value == 0:
        return impact, 0.0, 0.0
    sensitivity = abs(result_delta / value_delta)
    elasticity = abs((result_delta / baseline_result) / (value_delta / base_value))
    return impact, sensitivity, elasticity


class FullSensitivityAnalysis(SequentialAnalysis):
    """Tests every variable at -range% and +range%, low run first."""

    def __init__(self, variables, baseline_result, analysis_range=DEFAULT_ANALYSIS_RANGE, run_one=None, **kwargs):
        super().__init__(variables, baseline_result, analysis_range, run_one, **kwargs)

    async def _analyze_variable(self, index, variable):
        base_value = variable.base_value()
        low_value, high_value = perturbation_bounds(base_value, self.analysis_range)

        low_result = await call_run_one(self.run_one, override_variable(self.variables, index, low_value))
        high_result = await call_run_one(self.run_one, override_variable(self.variables, index, high_value))

        if not (is_usable_result(low_result) and is_usable_result(high_result)):
            logger.warning(
                "Rejecting %s: unusable results low=%r high=%r", variable.name, low_result, high_result,
            )
            return None

        low_result, high_result = float(low_result), float(high_result)
        impact, sensitivity, elasticity = full_metrics(
            base_value, low_value, high_value, low_result, high_result, self.baseline_result,
        )
        return SensitivityResult(
            variable=variable.name,
            baseline_value=base_value,
            low_value=low_value,
            high_value=high_value,
            low_result=low_result,
            high_result=high_result,
            impact=impact,
            sensitivity=sensitivity,
            elasticity=elasticity,
        )


async def analyze(variables, baseline_result, analysis_range=DEFAULT_ANALYSIS_RANGE, run_one=None):
    """
    Run the full strategy and return one SensitivityResult per analyzable variable.

    Raises:
        InvalidBaselineError: if baseline_result is not finite and positive
    """
    return await FullSensitivityAnalysis(variables, baseline_result, analysis_range, run_one).run()
