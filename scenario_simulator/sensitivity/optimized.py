"""
PURPOSE: Single-direction sensitivity analysis, one run per variable.

Only the +range% move is simulated; the low side is taken to be the
baseline itself. This halves the number of engine runs at the price of
asymmetric effects going unnoticed.

Metrics (deliberately different from the full strategy):
    impact         = |high_result - baseline_result|
    percent_change = (high_result - baseline_result) / baseline_result * 100
    sensitivity    = elasticity = |percent_change / analysis_range|
"""

import logging

from scenario_simulator.config import OFFLINE_SUGGESTION_ERROR_COUNT, OPTIMIZED_ANALYSIS_RANGE
from scenario_simulator.models import SensitivityResult
from scenario_simulator.sensitivity.common import (
    SequentialAnalysis,
    call_run_one,
    is_usable_result,
    override_variable,
    perturbation_bounds,
)

logger = logging.getLogger(__name__)


def percent_change(result, baseline_result):
    return (result - baseline_result) / baseline_result * 100.0


class OptimizedSensitivityAnalysis(SequentialAnalysis):
    """
    Sequential single-direction analysis with per-variable status, progress/ETA,
    per-variable completion notifications and an offline-mode suggestion.
    """

    def __init__(
        self,
        variables,
        baseline_result,
        analysis_range=OPTIMIZED_ANALYSIS_RANGE,
        run_one=None,
        offline_mode_used=False,
        **kwargs,
    ):
        super().__init__(variables, baseline_result, analysis_range, run_one, **kwargs)
        self.offline_mode_used = offline_mode_used
        self.offline_suggested = False
        self.variable_complete_callbacks = []
        self.offline_suggested_callbacks = []
        self.on_error(self._maybe_suggest_offline)

    def on_variable_complete(self, callback):
        """callback(variable_name, percent_change) right after each successful variable."""
        self.variable_complete_callbacks.append(callback)

    def on_offline_suggested(self, callback):
        """callback(error_count), fired at most once per run."""
        self.offline_suggested_callbacks.append(callback)

    def _maybe_suggest_offline(self, variable_name, error_count):
        if self.offline_suggested or self.offline_mode_used:
            return
        if error_count >= OFFLINE_SUGGESTION_ERROR_COUNT:
            self.offline_suggested = True
            logger.warning("%d variables failed; offline analysis is suggested", error_count)
            for callback in self.offline_suggested_callbacks:
                callback(error_count)

    async def _analyze_variable(self, index, variable):
        base_value = variable.base_value()
        _, high_value = perturbation_bounds(base_value, self.analysis_range)

        high_result = await call_run_one(self.run_one, override_variable(self.variables, index, high_value))
        if not is_usable_result(high_result):
            logger.warning("Rejecting %s: unusable result %r", variable.name, high_result)
            return None

        high_result = float(high_result)
        change = percent_change(high_result, self.baseline_result)
        sensitivity = abs(change / self.analysis_range) if self.analysis_range else 0.0
        return SensitivityResult(
            variable=variable.name,
            baseline_value=base_value,
            low_value=base_value,
            high_value=high_value,
            low_result=self.baseline_result,
            high_result=high_result,
            impact=abs(high_result - self.baseline_result),
            sensitivity=sensitivity,
            elasticity=sensitivity,
        )

    def _on_completed(self, variable, result):
        change = percent_change(result.high_result, self.baseline_result)
        for callback in self.variable_complete_callbacks:
            callback(variable.name, change)


async def analyze_optimized(variables, baseline_result, analysis_range=OPTIMIZED_ANALYSIS_RANGE, run_one=None):
    return await OptimizedSensitivityAnalysis(variables, baseline_result, analysis_range, run_one).run()
