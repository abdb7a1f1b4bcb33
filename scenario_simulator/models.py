"""
Data model shared by the simulation engine, the sensitivity analysis and the
persistence collaborator.

Attributes are snake_case; the JSON form uses camelCase aliases so a
serialized SimulationResults keeps the shape the dashboards consume.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ScenarioType(str, Enum):
    OPTIMISTIC = "optimistic"
    REALISTIC = "realistic"
    PESSIMISTIC = "pessimistic"


class ImpactCategory(str, Enum):
    REVENUE = "revenue"
    COSTS = "costs"
    GROWTH_RATE = "growth_rate"
    MARKET_SHARE = "market_share"
    CHURN_RATE = "churn_rate"


class DistributionType(str, Enum):
    NORMAL = "normal"
    UNIFORM = "uniform"
    TRIANGULAR = "triangular"
    LOGNORMAL = "lognormal"


class RevenueModel(str, Enum):
    SUBSCRIPTION = "subscription"
    FREEMIUM = "freemium"
    MARKETPLACE = "marketplace"
    ADVERTISING = "advertising"
    ONE_TIME = "one_time"


ALL_SCENARIOS = (ScenarioType.OPTIMISTIC, ScenarioType.REALISTIC, ScenarioType.PESSIMISTIC)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class VariableParameters(_CamelModel):
    mean: Optional[float] = None
    mode: Optional[float] = None
    std_dev: Optional[float] = Field(default=None, alias="stdDev")
    min: Optional[float] = None
    max: Optional[float] = None


class SimulationVariable(_CamelModel):
    """One stochastic input of the simulation."""

    name: str
    impact: ImpactCategory
    type: DistributionType = DistributionType.NORMAL
    parameters: VariableParameters = Field(default_factory=VariableParameters)

    def base_value(self) -> float:
        """Point estimate: the first non-zero of mean and mode, otherwise 1.0."""
        if self.parameters.mean:
            return float(self.parameters.mean)
        if self.parameters.mode:
            return float(self.parameters.mode)
        return 1.0

    def with_point_estimate(self, value: float) -> "SimulationVariable":
        """
        Copy of this variable centered on `value`.

        Spread parameters (stdDev, min, max) are rescaled by value/base so
        the distribution keeps its relative shape.
        """
        params = self.parameters
        base = self.base_value()
        ratio = value / base if base else None

        def _scaled(x: Optional[float]) -> Optional[float]:
            if x is None or ratio is None:
                return x
            return x * ratio

        std_dev = _scaled(params.std_dev)
        if std_dev is not None:
            std_dev = abs(std_dev)
        low, high = _scaled(params.min), _scaled(params.max)
        if low is not None and high is not None and low > high:
            low, high = high, low
        new_params = VariableParameters(mean=value, mode=value, std_dev=std_dev, min=low, max=high)
        return self.model_copy(update={"parameters": new_params})


class IdeaFinancialData(BaseModel):
    """Baseline financials for one idea. Field names match the collaborator payload."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    monetization: str = ""
    target_market_size: float
    initial_investment: float
    monthly_costs: float
    revenue_model: str = ""
    pricing: float
    customer_acquisition_cost: Optional[float] = None
    churn_rate: Optional[float] = None


class SimulationParams(_CamelModel):
    time_horizon: int
    iterations: int
    confidence_level: float = 95.0
    variables: list[SimulationVariable] = Field(default_factory=list)


class MonthlyPoint(_CamelModel):
    month: int
    revenue: float
    costs: float
    profit: float
    cumulative_profit: float
    customer_base: float = 0.0


class ScenarioStatistics(_CamelModel):
    mean: float
    median: float
    std_dev: float = Field(alias="stdDev")
    percentile_5: float = Field(alias="percentile5")
    percentile_95: float = Field(alias="percentile95")


class RiskMetrics(_CamelModel):
    probability_of_loss: float = Field(ge=0.0, le=1.0)
    value_at_risk: float
    expected_shortfall: float
    break_even_month: Optional[int] = None


class FinalMetrics(_CamelModel):
    net_profit: float
    roi: float
    payback_period: Optional[int] = None
    total_revenue: float = 0.0
    total_costs: float = 0.0
    net_present_value: float = 0.0


class ScenarioResult(_CamelModel):
    results: list[MonthlyPoint]
    statistics: ScenarioStatistics
    risk_metrics: RiskMetrics
    final_metrics: FinalMetrics
    valid_trials: int = 0
    discarded_trials: int = 0


class SimulationMetadata(_CamelModel):
    total_iterations: int
    time_horizon: int
    confidence_level: float
    revenue_model: RevenueModel


class SensitivityResult(_CamelModel):
    variable: str
    baseline_value: float
    low_value: float
    high_value: float
    low_result: float
    high_result: float
    impact: float = Field(ge=0.0)
    sensitivity: float = Field(ge=0.0)
    elasticity: float = Field(ge=0.0)
    is_offline_calculation: bool = False


class SimulationResults(_CamelModel):
    results: dict[ScenarioType, ScenarioResult]
    metadata: SimulationMetadata
    sensitivity_analysis: list[SensitivityResult] = Field(default_factory=list)
    insights: Optional[str] = None
    idea_title: str = ""

    def baseline_result(self, scenario: ScenarioType = ScenarioType.REALISTIC) -> float:
        """Mean final profit of a scenario, 0.0 when the scenario was not simulated."""
        result = self.results.get(scenario)
        if result is None:
            return 0.0
        return result.statistics.mean
