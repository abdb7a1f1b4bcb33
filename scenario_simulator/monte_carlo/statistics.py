"""
PURPOSE: Statistics and risk aggregation over per-trial simulation outcomes.

RESPONSIBILITIES:
- Descriptive statistics of final cumulative profit (mean, median, std, P5, P95)
- Risk metrics: probability of loss, value at risk, expected shortfall, break-even month
- Final metrics of the averaged monthly series (ROI, payback, totals, NPV)
- Pure functions over numpy arrays, no sampling and no I/O
"""

import math

import numpy as np

from scenario_simulator.config import ANNUAL_DISCOUNT_RATE, BREAK_EVEN_QUORUM
from scenario_simulator.models import FinalMetrics, RiskMetrics, ScenarioStatistics


def compute_statistics(values):
    """
    Descriptive statistics of per-trial outcomes.

    Standard deviation is the population one (ddof=0). Percentiles use
    linear interpolation between sorted values, so P5 <= median <= P95.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return ScenarioStatistics(mean=0.0, median=0.0, std_dev=0.0, percentile_5=0.0, percentile_95=0.0)

    p5, median, p95 = np.percentile(values, [5, 50, 95])
    return ScenarioStatistics(
        mean=float(np.mean(values)),
        median=float(median),
        std_dev=float(np.std(values)),
        percentile_5=float(p5),
        percentile_95=float(p95),
    )


def value_at_risk(values, confidence_level):
    """The (100 - confidence_level)th percentile, signed: a loss is negative."""
    return float(np.percentile(np.asarray(values, dtype=float), 100.0 - confidence_level))


def expected_shortfall(values, var):
    """Mean of the outcomes at or below the value at risk."""
    values = np.asarray(values, dtype=float)
    tail = values[values <= var]
    if tail.size == 0:
        return float(var)
    return float(np.mean(tail))


def break_even_month(trial_months):
    """
    Smallest month by which at least half of the trials had broken even.

    Args:
        trial_months: per-trial break-even month, np.inf for trials that never broke even

    Returns:
        int month, or None when fewer than half of the trials ever broke even
    """
    months = np.sort(np.asarray(trial_months, dtype=float))
    if months.size == 0:
        return None
    quorum = math.ceil(months.size * BREAK_EVEN_QUORUM)
    month = months[max(quorum, 1) - 1]
    if not np.isfinite(month):
        return None
    return int(month)


def compute_risk_metrics(final_values, trial_break_even_months, confidence_level):
    final_values = np.asarray(final_values, dtype=float)
    if final_values.size == 0:
        return RiskMetrics(probability_of_loss=0.0, value_at_risk=0.0, expected_shortfall=0.0, break_even_month=None)

    var = value_at_risk(final_values, confidence_level)
    return RiskMetrics(
        probability_of_loss=float(np.mean(final_values < 0)),
        value_at_risk=var,
        expected_shortfall=expected_shortfall(final_values, var),
        break_even_month=break_even_month(trial_break_even_months),
    )


def net_present_value(monthly_profits, initial_investment, annual_rate=ANNUAL_DISCOUNT_RATE):
    """Monthly profits discounted at annual_rate/12 per month, minus the investment."""
    profits = np.asarray(monthly_profits, dtype=float)
    if profits.size == 0:
        return -float(initial_investment)
    months = np.arange(1, profits.size + 1)
    discounted = profits / (1.0 + annual_rate / 12.0) ** months
    return float(np.sum(discounted) - initial_investment)


def compute_final_metrics(mean_final_value, revenue, costs, cumulative_profit, initial_investment):
    """
    Final metrics of a scenario.

    net_profit is the mean final cumulative profit over trials; the series
    arguments are the averaged monthly series.
    """
    revenue = np.asarray(revenue, dtype=float)
    costs = np.asarray(costs, dtype=float)
    cumulative_profit = np.asarray(cumulative_profit, dtype=float)

    payback = None
    reached = np.nonzero(cumulative_profit >= 0)[0]
    if reached.size:
        payback = int(reached[0]) + 1

    return FinalMetrics(
        net_profit=float(mean_final_value),
        roi=float(mean_final_value) / initial_investment * 100.0,
        payback_period=payback,
        total_revenue=float(np.sum(revenue)),
        total_costs=float(np.sum(costs)),
        net_present_value=net_present_value(revenue - costs, initial_investment),
    )
