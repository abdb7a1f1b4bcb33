"""
Tests for default variables and parameter validation.
"""

import unittest

from scenario_simulator.models import (
    DistributionType,
    IdeaFinancialData,
    ImpactCategory,
    SimulationParams,
    SimulationVariable,
    VariableParameters,
)
from scenario_simulator.monte_carlo.variables import (
    create_default_params,
    create_default_variables,
    get_variable_type_info,
    validate_simulation_params,
)


class TestDefaultVariables(unittest.TestCase):

    def test_five_defaults(self):
        variables = create_default_variables()
        self.assertEqual(
            [v.name for v in variables],
            ["market_demand", "customer_acquisition_cost", "competition_impact",
             "operational_efficiency", "market_growth_rate"],
        )
        self.assertEqual(variables[0].impact, ImpactCategory.REVENUE)
        self.assertEqual(variables[4].parameters.mode, 0.05)

    def test_churn_variable_for_known_churn(self):
        idea = IdeaFinancialData(
            target_market_size=1000, initial_investment=1000, monthly_costs=100, pricing=10, churn_rate=0.05,
        )
        variables = create_default_variables(idea)
        self.assertEqual(len(variables), 6)
        self.assertEqual(variables[-1].impact, ImpactCategory.CHURN_RATE)

    def test_default_params_are_valid(self):
        params = create_default_params(create_default_variables())
        self.assertEqual(params.time_horizon, 36)
        self.assertEqual(validate_simulation_params(params), [])


class TestValidation(unittest.TestCase):

    def test_out_of_range(self):
        params = SimulationParams(time_horizon=0, iterations=50, confidence_level=50.0)
        errors = validate_simulation_params(params)
        self.assertEqual(len(errors), 3)
        self.assertIn("Time horizon", errors[0])
        self.assertIn("iterations", errors[1])
        self.assertIn("Confidence level", errors[2])

    def test_missing_parameters(self):
        variable = SimulationVariable(
            name="price", impact="revenue", type="triangular", parameters=VariableParameters(min=0.5, max=1.5),
        )
        params = SimulationParams(time_horizon=12, iterations=1000, variables=[variable])
        self.assertEqual(validate_simulation_params(params), ["Variable price: parameter mode is required"])

    def test_blank_name(self):
        variable = SimulationVariable(name=" ", impact="costs", parameters=VariableParameters(mean=1.0, std_dev=0.1))
        params = SimulationParams(time_horizon=12, iterations=1000, variables=[variable])
        self.assertEqual(validate_simulation_params(params), ["Variable 1: name is required"])


class TestTypeInfo(unittest.TestCase):

    def test_parameters(self):
        self.assertEqual(get_variable_type_info(DistributionType.TRIANGULAR)["parameters"], ["min", "max", "mode"])
        self.assertEqual(get_variable_type_info("lognormal")["name"], "Log-Normal")

    def test_returns_copy(self):
        info = get_variable_type_info(DistributionType.NORMAL)
        info["name"] = "changed"
        self.assertEqual(get_variable_type_info(DistributionType.NORMAL)["name"], "Normal")


if __name__ == "__main__":
    unittest.main()
