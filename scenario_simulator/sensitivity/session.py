"""
PURPOSE: Orchestrate one sensitivity analysis run as an awaitable session.

RESPONSIBILITIES:
- Pick the strategy for the requested mode (full, optimized, offline)
- Race the run against a timeout; on expiry keep the finished variables and
  approximate the rest offline
- Expose progress, per-variable completion and offline-suggestion callbacks
- Cooperative cancellation
- Convert total failure into NoAnalyzableVariablesError

The session never mutates the variables or the baseline it was given.
"""

import asyncio
import logging
import time

from scenario_simulator.config import (
    ANALYSIS_TIMEOUT_SECONDS,
    DEFAULT_ANALYSIS_RANGE,
    OPTIMIZED_ANALYSIS_RANGE,
)
from scenario_simulator.errors import NoAnalyzableVariablesError
from scenario_simulator.sensitivity.common import (
    AnalysisMode,
    AnalysisOutcome,
    AnalysisProgress,
    VariableStatus,
    ensure_unique_names,
    validate_baseline,
)
from scenario_simulator.sensitivity.full import FullSensitivityAnalysis
from scenario_simulator.sensitivity.offline import calculate_offline_analysis
from scenario_simulator.sensitivity.optimized import OptimizedSensitivityAnalysis

logger = logging.getLogger(__name__)


class SensitivitySession:
    """
    One sensitivity analysis over a fixed variable list and baseline.

    Usage:
        session = SensitivitySession(variables, baseline, run_one=run_one, mode="optimized")
        session.on_progress(print)
        outcome = await session.start()

    Raises InvalidBaselineError from the constructor, before anything runs.
    """

    def __init__(
        self,
        variables,
        baseline_result,
        analysis_range=None,
        run_one=None,
        mode=AnalysisMode.FULL,
        timeout_seconds=ANALYSIS_TIMEOUT_SECONDS,
        offline_mode_used=False,
        clock=time.monotonic,
    ):
        self.mode = AnalysisMode(mode)
        self.variables = tuple(variables)
        ensure_unique_names(self.variables)
        self.baseline_result = validate_baseline(baseline_result)
        if analysis_range is None:
            analysis_range = OPTIMIZED_ANALYSIS_RANGE if self.mode == AnalysisMode.OPTIMIZED else DEFAULT_ANALYSIS_RANGE
        self.analysis_range = float(analysis_range)
        if self.mode != AnalysisMode.OFFLINE and run_one is None:
            raise ValueError(f"run_one is required for {self.mode.value} analysis")
        self.run_one = run_one
        self.timeout_seconds = timeout_seconds
        self.offline_mode_used = offline_mode_used or self.mode == AnalysisMode.OFFLINE
        self.clock = clock

        self._progress_callbacks = []
        self._variable_complete_callbacks = []
        self._offline_suggested_callbacks = []
        self._analysis = None
        self._cancelled = False
        self._task = None

    def on_progress(self, callback):
        self._progress_callbacks.append(callback)

    def on_variable_complete(self, callback):
        self._variable_complete_callbacks.append(callback)

    def on_offline_suggested(self, callback):
        self._offline_suggested_callbacks.append(callback)

    def cancel(self):
        """Stop before the next variable. Results finished so far are kept."""
        self._cancelled = True
        if self._analysis is not None:
            self._analysis.cancel()

    @property
    def cancelled(self):
        return self._cancelled

    def start(self):
        """Schedule the run on the current event loop and return its task. Idempotent."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        return self._task

    @property
    def result(self):
        return self.start()

    def _publish(self, progress):
        for callback in self._progress_callbacks:
            callback(progress)

    def _build_analysis(self):
        if self.mode == AnalysisMode.OPTIMIZED:
            analysis = OptimizedSensitivityAnalysis(
                self.variables,
                self.baseline_result,
                self.analysis_range,
                self.run_one,
                offline_mode_used=self.offline_mode_used,
                clock=self.clock,
            )
            for callback in self._variable_complete_callbacks:
                analysis.on_variable_complete(callback)
            for callback in self._offline_suggested_callbacks:
                analysis.on_offline_suggested(callback)
        else:
            analysis = FullSensitivityAnalysis(
                self.variables, self.baseline_result, self.analysis_range, self.run_one, clock=self.clock,
            )
        for callback in self._progress_callbacks:
            analysis.on_progress(callback)
        if self._cancelled:
            analysis.cancel()
        return analysis

    async def _run(self):
        if self.mode == AnalysisMode.OFFLINE:
            return self._run_offline()

        self._analysis = analysis = self._build_analysis()
        outcome = AnalysisOutcome(results=[], mode=self.mode)
        try:
            results = await asyncio.wait_for(analysis.run(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            results = self._substitute_offline(analysis, outcome)

        outcome.results = results
        outcome.statuses = dict(analysis.statuses)
        outcome.cancelled = analysis.cancelled
        outcome.offline_suggested = getattr(analysis, "offline_suggested", False)
        if outcome.offline_suggested:
            outcome.warnings.append("Several variables failed; consider running the offline analysis.")

        if not results and not outcome.cancelled:
            raise NoAnalyzableVariablesError(
                f"None of the {len(self.variables)} variables could be analyzed"
            )
        return outcome

    def _substitute_offline(self, analysis, outcome):
        # Variables that already failed stay excluded with their error status.
        remaining = [
            variable for index, variable in enumerate(self.variables)
            if index not in analysis.completed_indices
            and analysis.statuses[variable.name] in (VariableStatus.PENDING, VariableStatus.ANALYZING)
        ]
        logger.warning(
            "Sensitivity analysis timed out after %ss; approximating %d variables offline",
            self.timeout_seconds, len(remaining),
        )
        offline = calculate_offline_analysis(remaining, self.baseline_result, self.analysis_range)
        for variable in remaining:
            analysis.statuses[variable.name] = VariableStatus.COMPLETED
        outcome.timed_out = True
        outcome.warnings.append(
            f"Analysis timed out after {self.timeout_seconds} seconds; "
            f"{len(remaining)} variables were approximated offline."
        )
        return list(analysis.results) + offline

    def _run_offline(self):
        total = len(self.variables)
        results = calculate_offline_analysis(self.variables, self.baseline_result, self.analysis_range)
        if not results:
            raise NoAnalyzableVariablesError("No variables to analyze")
        self._publish(AnalysisProgress(
            current=total, total=total, current_variable="Completed", estimated_time_remaining=0.0,
        ))
        return AnalysisOutcome(
            results=results,
            statuses={variable.name: VariableStatus.COMPLETED for variable in self.variables},
            mode=AnalysisMode.OFFLINE,
            warnings=["Offline analysis is based on estimated elasticities, not on simulation runs."],
        )


async def run_sensitivity_analysis(variables, baseline_result, run_one=None, mode=AnalysisMode.FULL, **kwargs):
    """Convenience wrapper: build a session, run it, return the AnalysisOutcome."""
    return await SensitivitySession(variables, baseline_result, run_one=run_one, mode=mode, **kwargs).start()
