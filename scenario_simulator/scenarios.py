"""
PURPOSE: Scenario configuration for optimistic / realistic / pessimistic simulations.

RESPONSIBILITIES:
- Hold the percent-of-baseline multipliers for each scenario (100 = unchanged)
- Convert a ScenarioConfig into the multiplicative ScenarioParameters the engine uses
- Copy / reset / compare scenarios and edit their custom factors
- Provide presentation metadata for each scenario type
"""
from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from pydantic import Field, field_validator

from scenario_simulator.models import ALL_SCENARIOS, ScenarioType, _CamelModel


class CustomFactor(_CamelModel):
    name: str
    value: float = 100.0
    impact: Literal["positive", "negative"] = "positive"

    @field_validator("value")
    @classmethod
    def _value_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"custom factor value must be positive, got {value}")
        return value


class ScenarioConfig(_CamelModel):
    """Named percentage multipliers for one scenario. 100 means "same as baseline"."""

    name: str
    description: str = ""
    market_growth: float = 100.0
    adoption_rate: float = 100.0
    competition_impact: float = 100.0
    cost_efficiency: float = 100.0
    economic_conditions: float = 100.0
    regulatory_risk: float = 100.0
    technology_risk: float = 100.0
    custom_factors: list[CustomFactor] = Field(default_factory=list)
    assumptions: list[str] = Field(default_factory=list)
    key_risks: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)

    @field_validator(
        "market_growth",
        "adoption_rate",
        "competition_impact",
        "cost_efficiency",
        "economic_conditions",
        "regulatory_risk",
        "technology_risk",
    )
    @classmethod
    def _multiplier_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"scenario multipliers are percentages and must be positive, got {value}")
        return value

    def to_parameters(self) -> "ScenarioParameters":
        demand_adjustment = 1.0
        for factor in self.custom_factors:
            if factor.impact == "positive":
                demand_adjustment *= factor.value / 100.0
            else:
                demand_adjustment *= 100.0 / factor.value

        return ScenarioParameters(
            market_growth_multiplier=self.market_growth / 100.0 * demand_adjustment,
            customer_acquisition_multiplier=(self.adoption_rate / 100.0) * (100.0 / self.competition_impact),
            retention_multiplier=100.0 / self.technology_risk,
            pricing_power_multiplier=1.0 + (self.economic_conditions - 100.0) / 300.0,
            cost_efficiency_multiplier=(100.0 / self.cost_efficiency) * (1.0 + (self.regulatory_risk - 100.0) / 500.0),
        )


@dataclass(frozen=True)
class ScenarioParameters:
    """Multiplicative factors (1.0 = unchanged) applied inside the Monte Carlo loop."""

    market_growth_multiplier: float = 1.0
    customer_acquisition_multiplier: float = 1.0
    retention_multiplier: float = 1.0
    pricing_power_multiplier: float = 1.0
    cost_efficiency_multiplier: float = 1.0


@dataclass(frozen=True)
class ScenarioInfo:
    name: str
    description: str
    icon: str
    color: str
    bg_color: str
    border_color: str

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "color": self.color,
            "bgColor": self.bg_color,
            "borderColor": self.border_color,
        }


@dataclass(frozen=True)
class ScenarioComparison:
    metric: str
    optimistic: float
    realistic: float
    pessimistic: float
    unit: str = "%"


_SCENARIO_INFO = {
    ScenarioType.OPTIMISTIC: ScenarioInfo(
        name="Optimistic",
        description="Favorable market conditions",
        icon="📈",
        color="text-green-600",
        bg_color="bg-green-50",
        border_color="border-green-200",
    ),
    ScenarioType.REALISTIC: ScenarioInfo(
        name="Realistic",
        description="Normal market conditions",
        icon="📊",
        color="text-blue-600",
        bg_color="bg-blue-50",
        border_color="border-blue-200",
    ),
    ScenarioType.PESSIMISTIC: ScenarioInfo(
        name="Pessimistic",
        description="Adverse market conditions",
        icon="📉",
        color="text-red-600",
        bg_color="bg-red-50",
        border_color="border-red-200",
    ),
}

# marketGrowth, adoptionRate, competitionImpact, costEfficiency,
# economicConditions, regulatoryRisk, technologyRisk
_DEFAULT_MULTIPLIERS = {
    ScenarioType.OPTIMISTIC: (150, 180, 70, 120, 130, 80, 90),
    ScenarioType.REALISTIC: (100, 100, 100, 100, 100, 100, 100),
    ScenarioType.PESSIMISTIC: (70, 60, 140, 80, 70, 130, 120),
}

_DEFAULT_TEXT = {
    ScenarioType.OPTIMISTIC: {
        "name": "Optimistic Scenario",
        "description": "Favorable market conditions with accelerated growth",
        "assumptions": [
            "Sustained economic growth",
            "Fast technology adoption",
            "Favorable regulatory environment",
            "Low market resistance",
        ],
        "key_risks": [
            "Overestimated demand",
            "Entry of large competitors",
            "Unexpected regulatory changes",
        ],
        "opportunities": [
            "Accelerated international expansion",
            "Strategic partnerships",
            "Disruptive innovation",
        ],
    },
    ScenarioType.REALISTIC: {
        "name": "Realistic Scenario",
        "description": "Normal market conditions based on historical data",
        "assumptions": [
            "Moderate market growth",
            "Gradual adoption of the solution",
            "Balanced competition",
            "Regulatory stability",
        ],
        "key_risks": [
            "Economic fluctuations",
            "Shifting consumer preferences",
            "Competitive pressure",
        ],
        "opportunities": [
            "Process optimization",
            "Market expansion",
            "Incremental improvements",
        ],
    },
    ScenarioType.PESSIMISTIC: {
        "name": "Pessimistic Scenario",
        "description": "Adverse conditions with multiple market challenges",
        "assumptions": [
            "Economic recession",
            "Resistance to change",
            "Intense competition",
            "Restrictive regulation",
        ],
        "key_risks": [
            "Market contraction",
            "Price war",
            "Adverse regulatory changes",
            "Funding problems",
        ],
        "opportunities": [
            "Market consolidation",
            "Acquiring competitors",
            "Focus on efficiency",
        ],
    },
}


def get_scenario_info(scenario: ScenarioType) -> ScenarioInfo:
    """Presentation metadata for a scenario type. Always returns the same value."""
    return _SCENARIO_INFO[ScenarioType(scenario)]


def default_scenario_config(scenario: ScenarioType) -> ScenarioConfig:
    scenario = ScenarioType(scenario)
    (
        market_growth,
        adoption_rate,
        competition_impact,
        cost_efficiency,
        economic_conditions,
        regulatory_risk,
        technology_risk,
    ) = _DEFAULT_MULTIPLIERS[scenario]
    text = _DEFAULT_TEXT[scenario]
    return ScenarioConfig(
        name=text["name"],
        description=text["description"],
        market_growth=market_growth,
        adoption_rate=adoption_rate,
        competition_impact=competition_impact,
        cost_efficiency=cost_efficiency,
        economic_conditions=economic_conditions,
        regulatory_risk=regulatory_risk,
        technology_risk=technology_risk,
        assumptions=list(text["assumptions"]),
        key_risks=list(text["key_risks"]),
        opportunities=list(text["opportunities"]),
    )


def default_scenario_configs() -> dict[ScenarioType, ScenarioConfig]:
    """A fresh set of default configs, one per scenario type."""
    return {scenario: default_scenario_config(scenario) for scenario in ALL_SCENARIOS}


def reset_scenario(configs: Mapping[ScenarioType, ScenarioConfig], scenario: ScenarioType) -> dict[ScenarioType, ScenarioConfig]:
    """Restore the default multipliers of one scenario and drop its custom factors."""
    defaults = default_scenario_config(scenario)
    current = configs.get(scenario, defaults)
    reset = current.model_copy(
        update={
            "market_growth": defaults.market_growth,
            "adoption_rate": defaults.adoption_rate,
            "competition_impact": defaults.competition_impact,
            "cost_efficiency": defaults.cost_efficiency,
            "economic_conditions": defaults.economic_conditions,
            "regulatory_risk": defaults.regulatory_risk,
            "technology_risk": defaults.technology_risk,
            "custom_factors": [],
        }
    )
    return {**configs, scenario: reset}


def copy_scenario(
    configs: Mapping[ScenarioType, ScenarioConfig],
    from_scenario: ScenarioType,
    to_scenario: ScenarioType,
) -> dict[ScenarioType, ScenarioConfig]:
    """Copy every setting of one scenario onto another, keeping the target's name."""
    source = configs[from_scenario]
    target_name = configs[to_scenario].name if to_scenario in configs else get_scenario_info(to_scenario).name
    copied = source.model_copy(deep=True, update={"name": target_name})
    return {**configs, to_scenario: copied}


def add_custom_factor(
    config: ScenarioConfig,
    name: str = "New Factor",
    value: float = 100.0,
    impact: Literal["positive", "negative"] = "positive",
) -> ScenarioConfig:
    factor = CustomFactor(name=name, value=value, impact=impact)
    return config.model_copy(update={"custom_factors": [*config.custom_factors, factor]})


def remove_custom_factor(config: ScenarioConfig, index: int) -> ScenarioConfig:
    factors = [factor for i, factor in enumerate(config.custom_factors) if i != index]
    return config.model_copy(update={"custom_factors": factors})


def compare_scenarios(configs: Mapping[ScenarioType, ScenarioConfig]) -> list[ScenarioComparison]:
    """Side-by-side view of the main multipliers across the three scenarios."""
    metrics = [
        ("Market Growth", "market_growth"),
        ("Adoption Rate", "adoption_rate"),
        ("Competition Impact", "competition_impact"),
        ("Cost Efficiency", "cost_efficiency"),
    ]
    return [
        ScenarioComparison(
            metric=label,
            optimistic=getattr(configs[ScenarioType.OPTIMISTIC], attr),
            realistic=getattr(configs[ScenarioType.REALISTIC], attr),
            pessimistic=getattr(configs[ScenarioType.PESSIMISTIC], attr),
        )
        for label, attr in metrics
    ]


def scenario_parameters(
    scenario: ScenarioType,
    configs: Optional[Mapping[ScenarioType, ScenarioConfig]] = None,
) -> ScenarioParameters:
    """Engine parameters for a scenario, from the given configs or the defaults."""
    scenario = ScenarioType(scenario)
    if configs and scenario in configs:
        return configs[scenario].to_parameters()
    return default_scenario_config(scenario).to_parameters()
