"""
Unit tests for distribution samplers.

STRATEGY:
    For each distribution (normal, uniform, triangular, lognormal):
    1. Sample a (trials, months) matrix
    2. Verify bounds and shape
    3. Verify statistics are reasonable
    4. Verify the point-estimate fallback when parameters are missing
    5. Verify reproducibility with a seeded generator
"""

import unittest

import numpy as np

from scenario_simulator.models import SimulationVariable, VariableParameters
from scenario_simulator.monte_carlo.distributions import (
    VariableSampler,
    compute_lognormal_params,
    make_rng,
    sample_variable,
)


def variable(dist, **params):
    return SimulationVariable(name="v", impact="revenue", type=dist, parameters=VariableParameters(**params))


class TestShapesAndBounds(unittest.TestCase):

    def test_shape(self):
        samples = sample_variable(variable("normal", mean=1.0, std_dev=0.2), (50, 12), make_rng(1))
        self.assertEqual(samples.shape, (50, 12))

    def test_uniform_bounds(self):
        samples = sample_variable(variable("uniform", min=0.7, max=1.3), (1000,), make_rng(2))
        self.assertTrue(np.all(samples >= 0.7))
        self.assertTrue(np.all(samples <= 1.3))

    def test_triangular_bounds_and_mean(self):
        samples = sample_variable(variable("triangular", min=0.8, mode=1.0, max=1.5), (20000,), make_rng(3))
        self.assertTrue(np.all(samples >= 0.8))
        self.assertTrue(np.all(samples <= 1.5))
        self.assertAlmostEqual(np.mean(samples), (0.8 + 1.0 + 1.5) / 3, delta=0.01)

    def test_triangular_mode_defaults_to_point_estimate(self):
        samples = sample_variable(variable("triangular", min=0.0, mean=9.5, max=10.0), (20000,), make_rng(4))
        self.assertGreater(np.median(samples), 5.0)

    def test_normal_statistics(self):
        samples = sample_variable(variable("normal", mean=1.0, std_dev=0.2), (20000,), make_rng(5))
        self.assertAlmostEqual(np.mean(samples), 1.0, delta=0.01)
        self.assertAlmostEqual(np.std(samples), 0.2, delta=0.01)

    def test_lognormal_real_space_moments(self):
        samples = sample_variable(variable("lognormal", mean=2.0, std_dev=0.5), (50000,), make_rng(6))
        self.assertTrue(np.all(samples > 0))
        self.assertAlmostEqual(np.mean(samples), 2.0, delta=0.05)
        self.assertAlmostEqual(np.std(samples), 0.5, delta=0.05)


class TestPointEstimateFallback(unittest.TestCase):

    def assert_constant(self, var, expected):
        samples = VariableSampler.sample(var, (10, 3), make_rng(0))
        self.assertTrue(np.all(samples == expected))

    def test_normal_without_std(self):
        self.assert_constant(variable("normal", mean=1.3), 1.3)

    def test_uniform_with_empty_range(self):
        self.assert_constant(variable("uniform", min=1.0, max=1.0, mean=1.0), 1.0)

    def test_triangular_missing_max(self):
        self.assert_constant(variable("triangular", min=0.5, mode=0.9), 0.9)

    def test_lognormal_non_positive_mean(self):
        self.assert_constant(variable("lognormal", mean=-1.0, std_dev=0.2), -1.0)

    def test_no_parameters_is_one(self):
        self.assert_constant(variable("normal"), 1.0)


class TestReproducibility(unittest.TestCase):

    def test_same_seed_same_samples(self):
        for dist, params in [
            ("normal", dict(mean=1.0, std_dev=0.2)),
            ("uniform", dict(min=0.7, max=1.3)),
            ("triangular", dict(min=0.8, mode=1.0, max=1.5)),
            ("lognormal", dict(mean=1.0, std_dev=0.3)),
        ]:
            var = variable(dist, **params)
            first = VariableSampler.sample(var, (100, 6), make_rng(42))
            second = VariableSampler.sample(var, (100, 6), make_rng(42))
            np.testing.assert_array_equal(first, second, err_msg=dist)

    def test_different_seeds_differ(self):
        var = variable("normal", mean=1.0, std_dev=0.2)
        first = VariableSampler.sample(var, (100,), make_rng(1))
        second = VariableSampler.sample(var, (100,), make_rng(2))
        self.assertFalse(np.array_equal(first, second))


class TestLognormalParams(unittest.TestCase):

    def test_zero_std_is_point_mass(self):
        mu, sigma = compute_lognormal_params(2.0, 0.0)
        self.assertAlmostEqual(sigma, 0.0)
        self.assertAlmostEqual(np.exp(mu), 2.0)

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            compute_lognormal_params(0.0, 0.1)
        with self.assertRaises(ValueError):
            compute_lognormal_params(1.0, -0.1)


if __name__ == "__main__":
    unittest.main()
