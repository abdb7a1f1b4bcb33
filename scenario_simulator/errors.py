"""Operation-level errors raised by the sensitivity analysis."""


class InvalidBaselineError(ValueError):
    """The baseline result is missing, non-positive or non-finite."""

    def __init__(self, baseline_result):
        self.baseline_result = baseline_result
        super().__init__(
            f"Invalid baseline result {baseline_result!r}. Run a simulation with a positive outcome first."
        )


class NoAnalyzableVariablesError(RuntimeError):
    """Every variable failed, so the analysis has nothing to report."""
