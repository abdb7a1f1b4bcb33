"""
Tests for the elasticity-table approximation and its recommendation buckets.
"""

import pytest

from scenario_simulator.errors import InvalidBaselineError
from scenario_simulator.models import SensitivityResult, SimulationVariable, VariableParameters
from scenario_simulator.sensitivity.offline import (
    calculate_offline_analysis,
    get_recommendations,
    get_variable_elasticity,
)

BASELINE = 100000.0


def variable(name, impact="revenue"):
    return SimulationVariable(name=name, impact=impact, parameters=VariableParameters(mean=1.0, std_dev=0.1))


def with_elasticity(name, elasticity):
    return SensitivityResult(
        variable=name, baseline_value=1.0, low_value=0.8, high_value=1.2, low_result=1.0, high_result=2.0,
        impact=1.0, sensitivity=elasticity, elasticity=elasticity, is_offline_calculation=True,
    )


class TestElasticityTable:

    def test_mapped(self):
        assert get_variable_elasticity("market_demand", "revenue") == 1.2
        assert get_variable_elasticity("churn_rate_variation", "churn_rate") == 1.4

    def test_mapped_zero_stays_zero(self):
        assert get_variable_elasticity("market_demand", "costs") == 0.0

    def test_unmapped_uses_default(self):
        assert get_variable_elasticity("mystery_factor", "revenue") == 0.5
        assert get_variable_elasticity("market_demand", "unknown_category") == 0.5


class TestOfflineAnalysis:

    def test_unmapped_variable(self):
        [result] = calculate_offline_analysis([variable("mystery_factor")], BASELINE, 15)
        assert result.impact == pytest.approx(7500.0)
        assert result.high_result == pytest.approx(107500.0)
        assert result.low_result == pytest.approx(92500.0)
        assert result.sensitivity == pytest.approx(50.0)
        assert result.elasticity == pytest.approx(50.0)
        assert result.low_value == pytest.approx(0.85)
        assert result.high_value == pytest.approx(1.15)
        assert result.is_offline_calculation

    def test_mapped_variable(self):
        [result] = calculate_offline_analysis([variable("market_demand")], BASELINE, 15)
        assert result.impact == pytest.approx(18000.0)
        assert result.elasticity == pytest.approx(120.0)

    def test_mapped_zero_has_no_impact(self):
        [result] = calculate_offline_analysis([variable("market_demand", "costs")], BASELINE, 15)
        assert result.impact == 0.0
        assert result.low_result == result.high_result == BASELINE

    def test_sorted_by_impact(self):
        variables = [variable("repeat_purchase_rate"), variable("market_demand"), variable("mystery_factor")]
        results = calculate_offline_analysis(variables, BASELINE, 20)
        assert [r.variable for r in results] == ["market_demand", "mystery_factor", "repeat_purchase_rate"]
        impacts = [r.impact for r in results]
        assert impacts == sorted(impacts, reverse=True)

    @pytest.mark.parametrize("baseline", [0.0, -1.0, float("nan")])
    def test_invalid_baseline(self, baseline):
        with pytest.raises(InvalidBaselineError):
            calculate_offline_analysis([variable("market_demand")], baseline, 15)

    def test_empty(self):
        assert calculate_offline_analysis([], BASELINE, 15) == []


class TestRecommendations:

    def test_buckets(self):
        results = [with_elasticity("a", 120.0), with_elasticity("b", 50.0), with_elasticity("c", 30.0)]
        recommendations = get_recommendations(results)
        assert recommendations.high_impact == ["a"]
        assert recommendations.medium_impact == ["b"]
        assert recommendations.low_impact == ["c"]
        assert len(recommendations.recommendations) == 4
        assert "1 high-impact" in recommendations.recommendations[0]

    def test_boundaries(self):
        recommendations = get_recommendations([with_elasticity("a", 80.0), with_elasticity("b", 40.0)])
        assert recommendations.high_impact == []
        assert recommendations.medium_impact == ["a", "b"]

    def test_exact_partition(self):
        variables = [variable(n) for n in ("market_demand", "pricing", "operational_costs", "mystery_factor")]
        results = calculate_offline_analysis(variables, BASELINE, 15)
        recommendations = get_recommendations(results)
        buckets = recommendations.high_impact + recommendations.medium_impact + recommendations.low_impact
        assert sorted(buckets) == sorted(v.name for v in variables)
