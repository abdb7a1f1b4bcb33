"""
Tests for output formatting, recommendations and exports.
"""

import json

import pytest

from scenario_simulator.models import (
    FinalMetrics,
    MonthlyPoint,
    RevenueModel,
    RiskMetrics,
    ScenarioResult,
    ScenarioStatistics,
    ScenarioType,
    SensitivityResult,
    SimulationMetadata,
    SimulationResults,
)
from scenario_simulator.monte_carlo.outputs import (
    CSV_HEADERS,
    OutputFormatter,
    calculate_payback_period,
    calculate_roi,
    generate_insights,
    get_confidence_interval,
    results_to_csv,
    results_to_json,
    summarize_results,
)
from scenario_simulator.monte_carlo.simulation import empty_scenario_result


def point(month, cumulative, revenue=100.0, costs=50.0):
    return MonthlyPoint(
        month=month, revenue=revenue, costs=costs, profit=revenue - costs, cumulative_profit=cumulative,
    )


def make_result(probability_of_loss=0.1, break_even=6):
    return ScenarioResult(
        results=[point(1, -500.0), point(2, 250.123)],
        statistics=ScenarioStatistics(mean=250.0, median=240.0, std_dev=80.0, percentile_5=100.0, percentile_95=400.0),
        risk_metrics=RiskMetrics(
            probability_of_loss=probability_of_loss, value_at_risk=100.0, expected_shortfall=80.0,
            break_even_month=break_even,
        ),
        final_metrics=FinalMetrics(net_profit=250.0, roi=25.0, payback_period=2),
        valid_trials=100,
    )


def make_results(sensitivity=None):
    return SimulationResults(
        results={ScenarioType.REALISTIC: make_result()},
        metadata=SimulationMetadata(
            total_iterations=100, time_horizon=2, confidence_level=95.0, revenue_model=RevenueModel.SUBSCRIPTION,
        ),
        sensitivity_analysis=sensitivity or [],
        idea_title="Test Idea",
    )


def sensitivity_result(name, impact):
    return SensitivityResult(
        variable=name, baseline_value=1.0, low_value=0.8, high_value=1.2,
        low_result=100.0, high_result=100.0 + impact, impact=impact, sensitivity=1.0, elasticity=0.5,
    )


class TestSeriesHelpers:

    def test_roi(self):
        assert calculate_roi([point(1, -10.0), point(2, 50.0)], 100.0) == pytest.approx(50.0)
        assert calculate_roi([], 100.0) == 0.0

    def test_payback(self):
        series = [point(1, -10.0), point(2, -5.0), point(3, 0.0), point(4, 5.0)]
        assert calculate_payback_period(series) == 3
        assert calculate_payback_period([point(1, -1.0)]) is None

    def test_confidence_interval(self):
        assert get_confidence_interval(make_result().statistics) == (100.0, 400.0)
        assert get_confidence_interval(None) == (0.0, 0.0)


class TestExports:

    def test_csv(self):
        lines = results_to_csv(make_results()).splitlines()
        assert lines[0] == ",".join(CSV_HEADERS)
        assert lines[1] == "realistic,1,100.00,50.00,50.00,-500.00"
        assert lines[2].endswith(",250.12")
        assert len(lines) == 3

    def test_json_uses_camel_case(self):
        payload = json.loads(results_to_json(make_results()))
        scenario = payload["results"]["realistic"]
        assert scenario["statistics"]["stdDev"] == 80.0
        assert scenario["statistics"]["percentile95"] == 400.0
        assert scenario["riskMetrics"]["probabilityOfLoss"] == 0.1
        assert payload["metadata"]["revenueModel"] == "subscription"

    def test_json_round_trip(self):
        results = make_results([sensitivity_result("market_demand", 10.0)])
        assert SimulationResults.model_validate_json(results_to_json(results)) == results


class TestRecommendation:

    @pytest.mark.parametrize("probability, expected", [
        (0.0, "GO"),
        (0.2, "GO"),
        (0.35, "CAUTION"),
        (0.5, "CAUTION"),
        (0.51, "NO-GO"),
    ])
    def test_thresholds(self, probability, expected):
        summary = OutputFormatter.format_scenario(ScenarioType.REALISTIC, make_result(probability))
        assert summary.risk_adjusted_recommendation == expected

    def test_unordered_thresholds(self):
        with pytest.raises(ValueError):
            OutputFormatter.format_scenario(ScenarioType.REALISTIC, make_result(), go_max=0.6, caution_max=0.5)

    def test_summary_fields(self):
        summary = OutputFormatter.format_scenario("optimistic", make_result())
        assert summary.scenario == "optimistic"
        assert summary.break_even_month == 6
        assert summary.payback_period == 2
        data = summary.to_dict()
        assert data["profit"] == {"p5": 100.0, "median": 240.0, "p95": 400.0}
        assert "month 6" in summary.summary_narrative

    def test_narrative_without_break_even(self):
        summary = OutputFormatter.format_scenario(ScenarioType.PESSIMISTIC, make_result(0.9, break_even=None))
        assert "do not break even" in summary.summary_narrative
        assert summary.summary_narrative.endswith("NO-GO.")

    def test_empty_result(self):
        summary = OutputFormatter.format_scenario(ScenarioType.REALISTIC, empty_scenario_result(50))
        assert "no valid trials" in summary.summary_narrative


class TestInsights:

    def test_mentions_top_driver(self):
        sensitivity = [sensitivity_result("market_demand", 10.0), sensitivity_result("competition_impact", 500.0)]
        text = generate_insights({ScenarioType.REALISTIC: make_result()}, 1000.0, sensitivity)
        assert "competition impact" in text
        assert "50.0% of the initial investment" in text

    def test_deterministic(self):
        results = {ScenarioType.REALISTIC: make_result()}
        assert generate_insights(results, 1000.0) == generate_insights(results, 1000.0)

    def test_summarize_results(self):
        summary = summarize_results(make_results([sensitivity_result("market_demand", 12.3456)]))
        assert summary["idea_title"] == "Test Idea"
        assert summary["revenue_model"] == "subscription"
        assert summary["scenarios"][0]["risk_adjusted_recommendation"] == "GO"
        assert summary["sensitivity"] == [{"variable": "market_demand", "impact": 12.35, "elasticity": 0.5}]
