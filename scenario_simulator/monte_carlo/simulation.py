"""
PURPOSE: Core Monte Carlo simulation engine for startup idea financial scenarios.

Runs N independent stochastic trials per scenario over a monthly horizon and
computes profit statistics, risk metrics and final metrics.

SINGLE RESPONSIBILITY:
- Execute N independent trials of a business idea for each requested scenario
- Sample the uncertain variables, walk the months through the revenue-model strategy table
- Aggregate per-trial outcomes into a ScenarioResult (no formatting, no file I/O)

CONSTRAINTS:
- No mocks or stubs; uses real numpy/scipy distributions
- Randomness comes from an injected numpy Generator (seeded or entropy-seeded)
- Does NOT modify the input idea, params or scenario configs
"""

import asyncio
import json
import logging

import numpy as np

from scenario_simulator.config import (
    CHURN_FACTOR_RANGE,
    COST_FACTOR_RANGE,
    DEFAULT_ANALYSIS_RANGE,
    DEMAND_FACTOR_RANGE,
    GROWTH_RATE_RANGE,
    RANDOM_SEED,
    SENSITIVITY_ITERATIONS,
    SENSITIVITY_RANDOM_SEED,
    SHARE_FACTOR_RANGE,
)
from scenario_simulator.financial_data import resolve_revenue_model
from scenario_simulator.models import (
    ALL_SCENARIOS,
    FinalMetrics,
    ImpactCategory,
    MonthlyPoint,
    RiskMetrics,
    ScenarioResult,
    ScenarioStatistics,
    ScenarioType,
    SimulationMetadata,
    SimulationResults,
)
from scenario_simulator.monte_carlo.distributions import VariableSampler, make_rng
from scenario_simulator.monte_carlo.outputs import generate_insights
from scenario_simulator.monte_carlo.revenue_models import (
    Baseline,
    CustomerState,
    MonthFactors,
    get_step_function,
)
from scenario_simulator.monte_carlo.statistics import (
    compute_final_metrics,
    compute_risk_metrics,
    compute_statistics,
)
from scenario_simulator.scenarios import scenario_parameters

logger = logging.getLogger(__name__)


def empty_scenario_result(discarded_trials=0):
    """Sentinel result for a scenario where every trial was invalid."""
    return ScenarioResult(
        results=[],
        statistics=ScenarioStatistics(mean=0.0, median=0.0, std_dev=0.0, percentile_5=0.0, percentile_95=0.0),
        risk_metrics=RiskMetrics(probability_of_loss=0.0, value_at_risk=0.0, expected_shortfall=0.0),
        final_metrics=FinalMetrics(net_profit=0.0, roi=0.0),
        valid_trials=0,
        discarded_trials=discarded_trials,
    )


class MonteCarloSimulation:
    """
    Monte Carlo simulation engine for idea financial scenarios.

    Each trial of a scenario:
    - Samples every variable once per month from its distribution
    - Combines the samples with the scenario's multipliers into monthly factors
    - Advances customers, revenue and costs month by month via the revenue model
    - Tracks cumulative profit (starting at -initial_investment) and break-even
    """

    def __init__(self, num_runs=None, random_seed=RANDOM_SEED, rng=None):
        """
        Initialize simulation engine.

        Args:
            num_runs: Trials per scenario (None = params.iterations)
            random_seed: Seed for a fresh Generator on every run (None = entropy)
            rng: Shared numpy Generator; takes precedence over random_seed
        """
        self.num_runs = num_runs
        self.random_seed = random_seed
        self.rng = rng

    def _new_rng(self):
        if self.rng is not None:
            return self.rng
        return make_rng(self.random_seed)

    def run(self, idea, params, scenario=ScenarioType.REALISTIC, scenario_configs=None):
        """Simulate a single scenario and return its ScenarioResult."""
        return self.run_scenarios(idea, params, [scenario], scenario_configs)[ScenarioType(scenario)]

    def run_scenarios(self, idea, params, scenarios=ALL_SCENARIOS, scenario_configs=None):
        """
        Execute the simulation for every requested scenario.

        Args:
            idea: IdeaFinancialData with positive investment, costs and pricing
            params: SimulationParams (horizon, iterations, confidence, variables)
            scenarios: Scenario types to simulate, in output order
            scenario_configs: Optional ScenarioConfig overrides keyed by ScenarioType

        Returns:
            Dict ScenarioType -> ScenarioResult

        Raises:
            ValueError: on non-positive financials, horizon or iterations, or no scenarios
        """
        self._validate(idea, params, scenarios)
        revenue_model = resolve_revenue_model(idea)
        step = get_step_function(revenue_model)
        rng = self._new_rng()
        trials = self.num_runs or params.iterations

        results = {}
        for scenario in scenarios:
            scenario = ScenarioType(scenario)
            logger.debug(
                "Simulating %s scenario: model=%s trials=%d horizon=%d",
                scenario.value, revenue_model.value, trials, params.time_horizon,
            )
            results[scenario] = self._simulate_scenario(
                idea, params, scenario_parameters(scenario, scenario_configs), step, trials, rng,
            )
        return results

    @staticmethod
    def _validate(idea, params, scenarios):
        if idea is None:
            raise ValueError("idea financial data is required")
        for field_name in ("initial_investment", "monthly_costs", "pricing", "target_market_size"):
            value = getattr(idea, field_name)
            if value is None or not np.isfinite(value) or value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value!r}")
        if params.time_horizon <= 0:
            raise ValueError(f"time_horizon must be positive, got {params.time_horizon}")
        if params.iterations <= 0:
            raise ValueError(f"iterations must be positive, got {params.iterations}")
        if not scenarios:
            raise ValueError("at least one scenario is required")

    @staticmethod
    def _build_factors(variables, scenario, shape, rng):
        """Monthly factor matrices of shape (trials, months)."""
        demand = np.full(shape, scenario.market_growth_multiplier)
        cost = np.ones(shape)
        churn = np.ones(shape)
        share = np.ones(shape)
        growth = np.ones(shape)

        for variable in variables:
            values = VariableSampler.sample(variable, shape, rng)
            impact = variable.impact
            if impact == ImpactCategory.REVENUE:
                demand *= np.clip(values, *DEMAND_FACTOR_RANGE)
            elif impact == ImpactCategory.COSTS:
                cost *= np.clip(values, *COST_FACTOR_RANGE)
            elif impact == ImpactCategory.CHURN_RATE:
                churn *= np.clip(values, *CHURN_FACTOR_RANGE)
            elif impact == ImpactCategory.MARKET_SHARE:
                share *= np.clip(values, *SHARE_FACTOR_RANGE)
            elif impact == ImpactCategory.GROWTH_RATE:
                growth *= 1.0 + np.clip(values, *GROWTH_RATE_RANGE)

        return demand, cost, churn, share, growth

    def _simulate_scenario(self, idea, params, scenario, step, trials, rng):
        horizon = params.time_horizon
        baseline = Baseline(
            pricing=float(idea.pricing),
            monthly_costs=float(idea.monthly_costs),
            target_market_size=float(idea.target_market_size),
        )
        demand, cost, churn, share, growth = self._build_factors(params.variables, scenario, (trials, horizon), rng)

        revenue = np.empty((trials, horizon))
        costs = np.empty((trials, horizon))
        cumulative = np.empty((trials, horizon))
        customers = np.empty((trials, horizon))
        break_even = np.full(trials, np.inf)

        state = CustomerState.empty(trials)
        running = np.full(trials, -float(idea.initial_investment))
        for month in range(1, horizon + 1):
            col = month - 1
            factors = MonthFactors(
                demand=demand[:, col], cost=cost[:, col], churn=churn[:, col], share=share[:, col], growth=growth[:, col],
            )
            outcome = step(month, state, baseline, scenario, factors)
            state = outcome.state
            running = running + (outcome.revenue - outcome.costs)

            broke_even = (running >= 0) & np.isinf(break_even)
            break_even[broke_even] = month

            revenue[:, col] = outcome.revenue
            costs[:, col] = outcome.costs
            cumulative[:, col] = running
            customers[:, col] = state.total

        final_values = cumulative[:, -1]
        valid = np.isfinite(final_values) & (final_values != 0)
        discarded = int(trials - np.count_nonzero(valid))
        if discarded:
            logger.warning("Discarded %d of %d trials with a non-finite or zero final value", discarded, trials)
        if not valid.any():
            logger.warning("No valid trials; returning an empty scenario result")
            return empty_scenario_result(discarded_trials=discarded)

        final_values = final_values[valid]
        mean_revenue = revenue[valid].mean(axis=0)
        mean_costs = costs[valid].mean(axis=0)
        mean_cumulative = cumulative[valid].mean(axis=0)
        mean_customers = customers[valid].mean(axis=0)

        series = [
            MonthlyPoint(
                month=month,
                revenue=float(mean_revenue[month - 1]),
                costs=float(mean_costs[month - 1]),
                profit=float(mean_revenue[month - 1] - mean_costs[month - 1]),
                cumulative_profit=float(mean_cumulative[month - 1]),
                customer_base=float(mean_customers[month - 1]),
            )
            for month in range(1, horizon + 1)
        ]

        statistics = compute_statistics(final_values)
        return ScenarioResult(
            results=series,
            statistics=statistics,
            risk_metrics=compute_risk_metrics(final_values, break_even[valid], params.confidence_level),
            final_metrics=compute_final_metrics(
                statistics.mean, mean_revenue, mean_costs, mean_cumulative, float(idea.initial_investment),
            ),
            valid_trials=int(final_values.size),
            discarded_trials=discarded,
        )


def make_run_one(
    idea,
    params,
    scenario=ScenarioType.REALISTIC,
    scenario_configs=None,
    random_seed=SENSITIVITY_RANDOM_SEED,
    iterations=None,
):
    """
    Build the single-run function used by the sensitivity analysis.

    The returned callable takes a full variable list (one of them overridden)
    and returns the mean final profit of `scenario`. Every call reuses the same
    seed so differences come from the override, not from sampling noise.
    """
    trials = iterations or min(params.iterations, SENSITIVITY_ITERATIONS)

    def run_one(variables):
        run_params = params.model_copy(update={"variables": list(variables), "iterations": trials})
        simulation = MonteCarloSimulation(random_seed=random_seed)
        result = simulation.run(idea, run_params, scenario, scenario_configs)
        if result.valid_trials == 0:
            return 0.0
        return result.statistics.mean

    return run_one


async def _run_sensitivity(idea, params, scenario_configs):
    # Deferred import: the sensitivity package builds on this module.
    from scenario_simulator.sensitivity.full import FullSensitivityAnalysis

    run_one = make_run_one(idea, params, scenario_configs=scenario_configs)
    baseline_result = await asyncio.to_thread(run_one, params.variables)
    analysis = FullSensitivityAnalysis(params.variables, baseline_result, DEFAULT_ANALYSIS_RANGE, run_one)
    return await analysis.run()


async def run_simulation(
    idea_data,
    params,
    scenarios=ALL_SCENARIOS,
    scenario_configs=None,
    random_seed=RANDOM_SEED,
    rng=None,
    include_sensitivity=True,
):
    """
    Simulate an idea across scenarios and assemble SimulationResults.

    The numpy engine runs in a worker thread. When variables are given, the
    full sensitivity analysis runs against the realistic scenario; its failure
    is logged and leaves sensitivity_analysis empty.
    """
    simulation = MonteCarloSimulation(random_seed=random_seed, rng=rng)
    results = await asyncio.to_thread(simulation.run_scenarios, idea_data, params, scenarios, scenario_configs)

    sensitivity = []
    if include_sensitivity and params.variables:
        try:
            sensitivity = await _run_sensitivity(idea_data, params, scenario_configs)
        except (ValueError, RuntimeError) as e:
            logger.warning("Sensitivity analysis failed: %s", e)
            sensitivity = []

    revenue_model = resolve_revenue_model(idea_data)
    return SimulationResults(
        results=results,
        metadata=SimulationMetadata(
            total_iterations=params.iterations,
            time_horizon=params.time_horizon,
            confidence_level=params.confidence_level,
            revenue_model=revenue_model,
        ),
        sensitivity_analysis=sensitivity,
        insights=generate_insights(results, idea_data.initial_investment, sensitivity),
        idea_title=idea_data.title,
    )


if __name__ == "__main__":
    from scenario_simulator.models import IdeaFinancialData
    from scenario_simulator.monte_carlo.outputs import summarize_results
    from scenario_simulator.monte_carlo.variables import create_default_params, create_default_variables

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    demo_idea = IdeaFinancialData(
        title="Demo SaaS",
        description="Scheduling platform for small clinics",
        monetization="Monthly subscription",
        target_market_size=100000,
        initial_investment=50000,
        monthly_costs=5000,
        revenue_model="subscription",
        pricing=49,
        churn_rate=0.05,
    )
    demo_params = create_default_params(create_default_variables(demo_idea)).model_copy(update={"iterations": 1000})
    demo_results = asyncio.run(run_simulation(demo_idea, demo_params, random_seed=42))
    print(json.dumps(summarize_results(demo_results), indent=2))
