"""
PURPOSE: Probabilistic distribution samplers for the uncertain inputs of a business idea.

RESPONSIBILITIES:
- Sample normal, uniform, triangular and lognormal variables
- Fall back to the point estimate when a distribution is missing required parameters
- Convert real-space mean/std to lognormal (mu, sigma)
- Single responsibility: only sampling, no aggregation or I/O

Every sampler takes an injected numpy Generator so runs are reproducible
when the caller seeds it.
"""

import numpy as np
from scipy.stats import triang, lognorm

from scenario_simulator.models import DistributionType, SimulationVariable


def make_rng(seed=None):
    """Create the random source for a run. None seeds from OS entropy."""
    return np.random.default_rng(seed)


class VariableSampler:
    """Samples one SimulationVariable, shaped as (trials, months)."""

    @staticmethod
    def sample_normal(mean, std_dev, size, rng):
        return rng.normal(loc=mean, scale=std_dev, size=size)

    @staticmethod
    def sample_uniform(min_val, max_val, size, rng):
        return rng.uniform(low=min_val, high=max_val, size=size)

    @staticmethod
    def sample_triangular(min_val, mode_val, max_val, size, rng):
        """
        Sample from triangular distribution.

        Args:
            min_val: Left bound
            mode_val: Peak (clipped into [min_val, max_val])
            max_val: Right bound
            size: Output shape
            rng: numpy Generator

        Returns:
            numpy array of samples
        """
        a = min_val
        b = max_val
        # Scipy triangular requires normalized parameters: c = (mode - a) / (b - a)
        c = float(np.clip((mode_val - a) / (b - a), 0.0, 1.0))
        return triang.rvs(c, loc=a, scale=b - a, size=size, random_state=rng)

    @staticmethod
    def sample_lognormal(mean, std_dev, size, rng):
        """Lognormal whose real-space mean and standard deviation are `mean` and `std_dev`."""
        mu, sigma = compute_lognormal_params(mean, std_dev)
        return lognorm.rvs(s=sigma, scale=np.exp(mu), size=size, random_state=rng)

    @classmethod
    def sample(cls, variable: SimulationVariable, size, rng):
        """
        Draw samples for a variable.

        A variable whose distribution lacks its required parameters is
        deterministic: every sample equals its point estimate.
        """
        params = variable.parameters
        point = variable.base_value()
        dist = variable.type

        if dist == DistributionType.NORMAL:
            if params.std_dev is not None and params.std_dev > 0:
                mean = params.mean if params.mean is not None else point
                return cls.sample_normal(mean, params.std_dev, size, rng)

        elif dist == DistributionType.UNIFORM:
            if params.min is not None and params.max is not None and params.min < params.max:
                return cls.sample_uniform(params.min, params.max, size, rng)

        elif dist == DistributionType.TRIANGULAR:
            if params.min is not None and params.max is not None and params.min < params.max:
                mode = params.mode if params.mode is not None else point
                return cls.sample_triangular(params.min, mode, params.max, size, rng)

        elif dist == DistributionType.LOGNORMAL:
            mean = params.mean if params.mean is not None else point
            if mean > 0 and params.std_dev is not None and params.std_dev > 0:
                return cls.sample_lognormal(mean, params.std_dev, size, rng)

        else:
            raise ValueError(f"Unknown distribution type: {dist}")

        return np.full(size, point, dtype=float)


def compute_lognormal_params(mean, std_dev):
    """Compute lognormal parameters (mu, sigma) from mean and std dev.

    Given E[X]=mean and SD[X]=std_dev, compute mu and sigma for Lognormal(mu, sigma).

    Raises:
        ValueError: if mean is not positive or std_dev is negative
    """
    if mean <= 0 or std_dev < 0:
        raise ValueError("mean must be positive and std_dev must be non-negative")

    cv = std_dev / mean  # coefficient of variation
    sigma = np.sqrt(np.log(cv**2 + 1))  # exact relationship
    mu = np.log(mean) - sigma**2 / 2
    return mu, sigma


def sample_variable(variable, size, rng=None):
    """Module-level wrapper for variable sampling."""
    if rng is None:
        rng = make_rng()
    return VariableSampler.sample(variable, size, rng)
