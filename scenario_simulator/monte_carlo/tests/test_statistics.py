"""
Unit tests for statistics and risk aggregation.
"""

import math
import unittest

import numpy as np

from scenario_simulator.monte_carlo.statistics import (
    break_even_month,
    compute_final_metrics,
    compute_risk_metrics,
    compute_statistics,
    expected_shortfall,
    net_present_value,
    value_at_risk,
)


class TestComputeStatistics(unittest.TestCase):

    def test_small_sample(self):
        stats = compute_statistics([5.0, 1.0, 3.0, 2.0, 4.0])
        self.assertAlmostEqual(stats.mean, 3.0)
        self.assertAlmostEqual(stats.median, 3.0)
        self.assertAlmostEqual(stats.std_dev, math.sqrt(2.0))  # population
        self.assertAlmostEqual(stats.percentile_5, 1.2)
        self.assertAlmostEqual(stats.percentile_95, 4.8)

    def test_even_count_median(self):
        self.assertAlmostEqual(compute_statistics([1.0, 2.0, 3.0, 10.0]).median, 2.5)

    def test_percentiles_are_ordered(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            stats = compute_statistics(rng.normal(0, 1000, size=rng.integers(1, 200)))
            self.assertLessEqual(stats.percentile_5, stats.median)
            self.assertLessEqual(stats.median, stats.percentile_95)

    def test_empty(self):
        self.assertEqual(compute_statistics([]).mean, 0.0)


class TestRisk(unittest.TestCase):

    def test_value_at_risk_is_signed_percentile(self):
        values = np.arange(1, 101, dtype=float) - 50.0
        self.assertAlmostEqual(value_at_risk(values, 95), 5.95 - 50.0)

    def test_expected_shortfall(self):
        values = np.arange(1, 101, dtype=float)
        var = value_at_risk(values, 95)
        self.assertAlmostEqual(expected_shortfall(values, var), 3.0)

    def test_probability_of_loss(self):
        risk = compute_risk_metrics([-1.0, -2.0, 3.0, 4.0], [np.inf, np.inf, 2, 3], 95)
        self.assertEqual(risk.probability_of_loss, 0.5)
        self.assertLessEqual(risk.expected_shortfall, risk.value_at_risk)

    def test_empty(self):
        risk = compute_risk_metrics([], [], 95)
        self.assertEqual(risk.probability_of_loss, 0.0)
        self.assertIsNone(risk.break_even_month)


class TestBreakEvenMonth(unittest.TestCase):

    def test_half_of_trials(self):
        self.assertEqual(break_even_month([3, np.inf, 5, np.inf]), 5)

    def test_never_for_most_trials(self):
        self.assertIsNone(break_even_month([2, np.inf, np.inf]))

    def test_single_trial(self):
        self.assertEqual(break_even_month([4]), 4)
        self.assertIsNone(break_even_month([np.inf]))

    def test_empty(self):
        self.assertIsNone(break_even_month([]))


class TestFinalMetrics(unittest.TestCase):

    def test_npv(self):
        self.assertAlmostEqual(net_present_value([101.0], 100.0, annual_rate=0.12), 0.0)
        self.assertAlmostEqual(net_present_value([], 100.0), -100.0)

    def test_payback_and_totals(self):
        metrics = compute_final_metrics(
            mean_final_value=5.0,
            revenue=[10.0, 10.0, 10.0, 10.0],
            costs=[20.0, 5.0, 5.0, 5.0],
            cumulative_profit=[-20.0, -15.0, 0.0, 5.0],
            initial_investment=10.0,
        )
        self.assertEqual(metrics.payback_period, 3)
        self.assertAlmostEqual(metrics.roi, 50.0)
        self.assertAlmostEqual(metrics.total_revenue, 40.0)
        self.assertAlmostEqual(metrics.total_costs, 35.0)
        self.assertAlmostEqual(metrics.net_profit, 5.0)

    def test_no_payback(self):
        metrics = compute_final_metrics(-5.0, [1.0], [2.0], [-5.0], 4.0)
        self.assertIsNone(metrics.payback_period)
        self.assertAlmostEqual(metrics.roi, -125.0)


if __name__ == "__main__":
    unittest.main()
