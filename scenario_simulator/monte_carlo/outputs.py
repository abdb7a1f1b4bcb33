"""
PURPOSE: Format scenario simulation results and compute risk-adjusted recommendations.

This module turns ScenarioResult objects into human-readable summaries,
GO/CAUTION/NO-GO recommendations driven by the probability of loss, the
templated insights narrative, and CSV/JSON exports. It also exposes the
small pure helpers callers use on a monthly series (ROI, payback, interval).

SRP/DRY: Single responsibility = output formatting and recommendation logic.
         No simulation, no sensitivity analysis.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from scenario_simulator.config import ROUND_CURRENCY, ROUND_PROBABILITY, get_recommendation_thresholds
from scenario_simulator.models import (
    MonthlyPoint,
    ScenarioResult,
    ScenarioStatistics,
    ScenarioType,
    SensitivityResult,
    SimulationResults,
)

CSV_HEADERS = ["Scenario", "Month", "Revenue", "Costs", "Profit", "Cumulative_Profit"]


def calculate_roi(series: List[MonthlyPoint], initial_investment: float) -> float:
    """ROI in percent of the last point of a series. 0 for an empty series."""
    if not series:
        return 0.0
    return series[-1].cumulative_profit / initial_investment * 100.0


def calculate_payback_period(series: List[MonthlyPoint]) -> Optional[int]:
    """First month whose cumulative profit is >= 0, None if it never happens."""
    for point in series:
        if point.cumulative_profit >= 0:
            return point.month
    return None


def get_confidence_interval(statistics: Optional[ScenarioStatistics]) -> Tuple[float, float]:
    """(P5, P95) of the final profit distribution."""
    if statistics is None:
        return 0.0, 0.0
    return statistics.percentile_5, statistics.percentile_95


def results_to_csv(results: SimulationResults) -> str:
    rows = [",".join(CSV_HEADERS)]
    for scenario, result in results.results.items():
        for point in result.results:
            rows.append(",".join([
                ScenarioType(scenario).value,
                str(point.month),
                f"{point.revenue:.2f}",
                f"{point.costs:.2f}",
                f"{point.profit:.2f}",
                f"{point.cumulative_profit:.2f}",
            ]))
    return "\n".join(rows)


def results_to_json(results: SimulationResults, indent: Optional[int] = 2) -> str:
    return results.model_dump_json(by_alias=True, indent=indent)


@dataclass
class ScenarioSummary:
    """Structured, human-oriented view of one scenario result.

    Attributes:
        scenario (str): Scenario type value.
        probability_of_loss (float): Share of trials ending with a loss (0-1).
        risk_adjusted_recommendation (str): "GO", "CAUTION", or "NO-GO".
        profit_p5 (float): 5th percentile final profit.
        profit_median (float): Median final profit.
        profit_p95 (float): 95th percentile final profit.
        roi (float): Return on investment in percent.
        break_even_month (Optional[int]): Month by which half the trials broke even.
        payback_period (Optional[int]): Payback month of the averaged series.
        summary_narrative (str): Plain English summary of key findings.
    """
    scenario: str
    probability_of_loss: float
    risk_adjusted_recommendation: str
    profit_p5: float
    profit_median: float
    profit_p95: float
    roi: float
    break_even_month: Optional[int]
    payback_period: Optional[int]
    summary_narrative: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for JSON serialization."""
        return {
            "scenario": self.scenario,
            "probability_of_loss": round(self.probability_of_loss, ROUND_PROBABILITY),
            "risk_adjusted_recommendation": self.risk_adjusted_recommendation,
            "profit": {
                "p5": round(self.profit_p5, ROUND_CURRENCY),
                "median": round(self.profit_median, ROUND_CURRENCY),
                "p95": round(self.profit_p95, ROUND_CURRENCY),
            },
            "roi": round(self.roi, ROUND_CURRENCY),
            "break_even_month": self.break_even_month,
            "payback_period": self.payback_period,
            "summary_narrative": self.summary_narrative,
        }


class OutputFormatter:
    """
    Formats scenario results into actionable outputs.

    Thresholds for risk-adjusted recommendations:
    - GO: probability_of_loss <= 20%
    - CAUTION: 20% < probability_of_loss <= 50%
    - NO-GO: probability_of_loss > 50%
    """

    GO_MAX_LOSS_PROBABILITY = get_recommendation_thresholds()["go"]
    CAUTION_MAX_LOSS_PROBABILITY = get_recommendation_thresholds()["caution"]

    @staticmethod
    def format_scenario(
        scenario: ScenarioType,
        result: ScenarioResult,
        go_max: float = GO_MAX_LOSS_PROBABILITY,
        caution_max: float = CAUTION_MAX_LOSS_PROBABILITY,
    ) -> ScenarioSummary:
        """
        Format a scenario result into a structured summary.

        Raises:
            ValueError: If the thresholds are not ordered go_max <= caution_max.
        """
        if go_max > caution_max:
            raise ValueError(f"go_max ({go_max}) must not exceed caution_max ({caution_max})")

        scenario = ScenarioType(scenario)
        stats = result.statistics
        risk = result.risk_metrics
        recommendation = OutputFormatter._compute_recommendation(risk.probability_of_loss, go_max, caution_max)
        narrative = OutputFormatter._generate_narrative(scenario, result, recommendation)

        return ScenarioSummary(
            scenario=scenario.value,
            probability_of_loss=risk.probability_of_loss,
            risk_adjusted_recommendation=recommendation,
            profit_p5=stats.percentile_5,
            profit_median=stats.median,
            profit_p95=stats.percentile_95,
            roi=result.final_metrics.roi,
            break_even_month=risk.break_even_month,
            payback_period=result.final_metrics.payback_period,
            summary_narrative=narrative,
        )

    @staticmethod
    def _compute_recommendation(probability_of_loss: float, go_max: float, caution_max: float) -> str:
        if probability_of_loss <= go_max:
            return "GO"
        elif probability_of_loss <= caution_max:
            return "CAUTION"
        else:
            return "NO-GO"

    @staticmethod
    def _generate_narrative(scenario: ScenarioType, result: ScenarioResult, recommendation: str) -> str:
        if result.valid_trials == 0:
            return f"{scenario.value.capitalize()} scenario: no valid trials, results unavailable."

        stats = result.statistics
        risk = result.risk_metrics
        narrative = f"{scenario.value.capitalize()} scenario: "
        narrative += f"expected final profit {stats.mean:,.2f} "
        narrative += f"(90% interval {stats.percentile_5:,.2f} to {stats.percentile_95:,.2f}). "
        narrative += f"Probability of loss: {risk.probability_of_loss * 100:.1f}%. "
        narrative += f"ROI: {result.final_metrics.roi:.1f}%. "
        if risk.break_even_month is not None:
            narrative += f"Half of the trials break even by month {risk.break_even_month}. "
        else:
            narrative += "Most trials do not break even within the horizon. "
        narrative += f"Recommendation: {recommendation}."
        return narrative


def generate_insights(
    results: Dict[ScenarioType, ScenarioResult],
    initial_investment: float,
    sensitivity: Optional[List[SensitivityResult]] = None,
) -> str:
    """Deterministic narrative over all scenarios plus the strongest sensitivity driver."""
    paragraphs = [
        OutputFormatter.format_scenario(scenario, result).summary_narrative
        for scenario, result in results.items()
    ]
    if sensitivity:
        top = max(sensitivity, key=lambda r: r.impact)
        paragraphs.append(
            f"The most influential variable is {top.variable.replace('_', ' ')}, "
            f"moving the expected result by {top.impact:,.2f} "
            f"({top.impact / initial_investment * 100:.1f}% of the initial investment)."
        )
    return "\n".join(paragraphs)


def summarize_results(results: SimulationResults) -> Dict[str, Any]:
    return {
        "idea_title": results.idea_title,
        "revenue_model": results.metadata.revenue_model.value,
        "scenarios": [
            OutputFormatter.format_scenario(scenario, result).to_dict()
            for scenario, result in results.results.items()
        ],
        "sensitivity": [
            {"variable": r.variable, "impact": round(r.impact, ROUND_CURRENCY), "elasticity": round(r.elasticity, 4)}
            for r in results.sensitivity_analysis
        ],
    }
