"""
Shared types and helpers for the sensitivity strategies and the analysis session.
"""

import asyncio
import inspect
import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Sequence, Tuple, Union

from scenario_simulator.errors import InvalidBaselineError
from scenario_simulator.models import SensitivityResult, SimulationVariable

logger = logging.getLogger(__name__)

# Takes the full variable list (one variable overridden) and returns the
# baseline metric. May be a plain function or a coroutine function.
RunOne = Callable[[List[SimulationVariable]], Union[float, Awaitable[float]]]


class AnalysisMode(str, Enum):
    FULL = "full"
    OPTIMIZED = "optimized"
    OFFLINE = "offline"


class VariableStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class AnalysisProgress:
    current: int
    total: int
    current_variable: str
    estimated_time_remaining: float


@dataclass
class AnalysisOutcome:
    results: List[SensitivityResult]
    statuses: dict = field(default_factory=dict)
    mode: AnalysisMode = AnalysisMode.FULL
    cancelled: bool = False
    timed_out: bool = False
    offline_suggested: bool = False
    warnings: List[str] = field(default_factory=list)


def validate_baseline(baseline_result) -> float:
    """Return the baseline as float, raising InvalidBaselineError unless it is finite and positive."""
    try:
        value = float(baseline_result)
    except (TypeError, ValueError):
        raise InvalidBaselineError(baseline_result) from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidBaselineError(baseline_result)
    return value


def ensure_unique_names(variables) -> None:
    """Raise ValueError when two variables share a name; statuses and results are keyed by name."""
    seen = set()
    for variable in variables:
        if variable.name in seen:
            raise ValueError(f"duplicate variable name {variable.name!r}")
        seen.add(variable.name)


def perturbation_bounds(base_value: float, analysis_range: float) -> Tuple[float, float]:
    """(low, high) around base_value for a +/- analysis_range percent move. low never drops below 0."""
    delta = base_value * analysis_range / 100.0
    return max(0.0, base_value - delta), base_value + delta


def override_variable(
    variables: Sequence[SimulationVariable], index: int, value: float
) -> List[SimulationVariable]:
    """Copy of the variable list where only variables[index] is re-centered on value."""
    overridden = list(variables)
    overridden[index] = variables[index].with_point_estimate(value)
    return overridden


def is_usable_result(value) -> bool:
    """A run result is usable when it is a finite, non-zero number."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value != 0


async def call_run_one(run_one: RunOne, variables: List[SimulationVariable]) -> float:
    """Invoke run_one without blocking the event loop."""
    if inspect.iscoroutinefunction(run_one):
        return await run_one(variables)
    return await asyncio.to_thread(run_one, variables)


class SequentialAnalysis:
    """
    Base for strategies that test one variable at a time.

    Variables are processed in order. The cancel flag is polled before each
    variable; progress is published before each variable and once at the end.
    A variable whose run raises or returns an unusable value gets status
    `error` and is left out of the results.
    """

    def __init__(self, variables, baseline_result, analysis_range, run_one, clock=time.monotonic):
        self.variables = list(variables)
        ensure_unique_names(self.variables)
        self.baseline_result = validate_baseline(baseline_result)
        self.analysis_range = float(analysis_range)
        self.run_one = run_one
        self.clock = clock
        self.results: List[SensitivityResult] = []
        self.completed_indices = set()
        self.statuses = {variable.name: VariableStatus.PENDING for variable in self.variables}
        self.error_count = 0
        self.cancelled = False
        self.progress_callbacks: List[Callable[[AnalysisProgress], None]] = []
        self.error_callbacks: List[Callable[[str, int], None]] = []

    def cancel(self):
        self.cancelled = True

    def on_progress(self, callback):
        self.progress_callbacks.append(callback)

    def on_error(self, callback):
        """callback(variable_name, error_count) after each failed variable."""
        self.error_callbacks.append(callback)

    def estimated_time_remaining(self, start, completed):
        """elapsed / completed * remaining, 0 before anything completed."""
        if completed == 0:
            return 0.0
        elapsed = self.clock() - start
        return elapsed / completed * (len(self.variables) - completed)

    def _publish(self, progress):
        for callback in self.progress_callbacks:
            callback(progress)

    async def _analyze_variable(self, index, variable):
        raise NotImplementedError

    def _on_completed(self, variable, result):
        pass

    async def run(self) -> List[SensitivityResult]:
        total = len(self.variables)
        start = self.clock()
        for index, variable in enumerate(self.variables):
            if self.cancelled:
                logger.info("Sensitivity analysis cancelled after %d of %d variables", index, total)
                break

            self.statuses[variable.name] = VariableStatus.ANALYZING
            self._publish(AnalysisProgress(
                current=index,
                total=total,
                current_variable=variable.name,
                estimated_time_remaining=self.estimated_time_remaining(start, index),
            ))

            try:
                result = await self._analyze_variable(index, variable)
            except Exception as e:
                logger.warning("Sensitivity run for %s failed: %s", variable.name, e)
                result = None

            if result is None:
                self.statuses[variable.name] = VariableStatus.ERROR
                self.error_count += 1
                for callback in self.error_callbacks:
                    callback(variable.name, self.error_count)
                continue

            self.statuses[variable.name] = VariableStatus.COMPLETED
            self.results.append(result)
            self.completed_indices.add(index)
            self._on_completed(variable, result)

        if not self.cancelled:
            self._publish(AnalysisProgress(
                current=total, total=total, current_variable="Completed", estimated_time_remaining=0.0,
            ))
        return list(self.results)
