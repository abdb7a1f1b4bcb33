"""
Unit tests for the shared data model.

STRATEGY:
    1. Point estimate and re-centering of SimulationVariable
    2. camelCase JSON aliases on input and output
    3. Immutability of returned models
"""

import unittest

from pydantic import ValidationError

from scenario_simulator.models import (
    DistributionType,
    ImpactCategory,
    ScenarioType,
    SimulationMetadata,
    SimulationParams,
    SimulationResults,
    SimulationVariable,
    VariableParameters,
    RevenueModel,
)


class TestBaseValue(unittest.TestCase):

    def test_mean_wins(self):
        variable = SimulationVariable(name="x", impact="revenue", parameters=VariableParameters(mean=2.0, mode=3.0))
        self.assertEqual(variable.base_value(), 2.0)

    def test_zero_mean_falls_back_to_mode(self):
        variable = SimulationVariable(name="x", impact="revenue", parameters=VariableParameters(mean=0.0, mode=3.0))
        self.assertEqual(variable.base_value(), 3.0)

    def test_no_estimate_defaults_to_one(self):
        variable = SimulationVariable(name="x", impact="costs", type="uniform", parameters=VariableParameters(min=0.5, max=1.5))
        self.assertEqual(variable.base_value(), 1.0)


class TestWithPointEstimate(unittest.TestCase):

    def test_normal_spread_is_rescaled(self):
        variable = SimulationVariable(
            name="market_demand", impact="revenue", parameters=VariableParameters(mean=1.0, std_dev=0.2),
        )
        moved = variable.with_point_estimate(1.2)
        self.assertAlmostEqual(moved.parameters.mean, 1.2)
        self.assertAlmostEqual(moved.parameters.std_dev, 0.24)
        self.assertAlmostEqual(moved.base_value(), 1.2)

    def test_triangular_bounds_follow_the_mode(self):
        variable = SimulationVariable(
            name="customer_acquisition_cost",
            impact="costs",
            type="triangular",
            parameters=VariableParameters(min=0.8, max=1.5, mode=1.0),
        )
        moved = variable.with_point_estimate(0.8)
        self.assertAlmostEqual(moved.parameters.mode, 0.8)
        self.assertAlmostEqual(moved.parameters.min, 0.64)
        self.assertAlmostEqual(moved.parameters.max, 1.2)

    def test_source_is_not_mutated(self):
        variable = SimulationVariable(name="x", impact="revenue", parameters=VariableParameters(mean=1.0, std_dev=0.2))
        before = variable.model_dump()
        variable.with_point_estimate(5.0)
        self.assertEqual(variable.model_dump(), before)


class TestAliases(unittest.TestCase):

    def test_params_dump_uses_camel_case(self):
        params = SimulationParams(time_horizon=12, iterations=100)
        dumped = params.model_dump(by_alias=True)
        self.assertEqual(dumped["timeHorizon"], 12)
        self.assertEqual(dumped["confidenceLevel"], 95.0)

    def test_variable_accepts_camel_case_input(self):
        variable = SimulationVariable.model_validate({
            "name": "market_demand",
            "impact": "revenue",
            "type": "lognormal",
            "parameters": {"mean": 1.0, "stdDev": 0.2},
        })
        self.assertEqual(variable.type, DistributionType.LOGNORMAL)
        self.assertEqual(variable.impact, ImpactCategory.REVENUE)
        self.assertEqual(variable.parameters.std_dev, 0.2)
        self.assertIn("stdDev", variable.parameters.model_dump(by_alias=True))


class TestImmutability(unittest.TestCase):

    def test_variable_is_frozen(self):
        variable = SimulationVariable(name="x", impact="revenue")
        with self.assertRaises(ValidationError):
            variable.name = "y"

    def test_unknown_impact_rejected(self):
        with self.assertRaises(ValidationError):
            SimulationVariable(name="x", impact="happiness")


class TestSimulationResults(unittest.TestCase):

    def test_missing_scenario_baseline_is_zero(self):
        results = SimulationResults(
            results={},
            metadata=SimulationMetadata(
                total_iterations=100, time_horizon=12, confidence_level=95, revenue_model=RevenueModel.ONE_TIME,
            ),
        )
        self.assertEqual(results.baseline_result(), 0.0)
        self.assertEqual(results.baseline_result(ScenarioType.OPTIMISTIC), 0.0)


if __name__ == "__main__":
    unittest.main()
