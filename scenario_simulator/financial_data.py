"""
PURPOSE: Turn loosely formatted idea data into baseline financials the engine can use.

RESPONSIBILITIES:
- Parse monetary values out of free text ("R$ 100.000,00", "$100,000.00", "50k", "1.5M")
- Extract financial fields from an AI analysis payload
- Generate category defaults and clamp every field into sane bounds
- Resolve the revenue model label to a RevenueModel
- NO simulation, NO statistics
"""
import logging
import math
import re
from typing import Any, Mapping, Optional, Union

from scenario_simulator.config import get_financial_bounds
from scenario_simulator.models import IdeaFinancialData, RevenueModel

logger = logging.getLogger(__name__)

_SUFFIX_PATTERN = re.compile(r"([0-9]+(?:[.,][0-9]+)?)\s?([kKmM])\b")
_CURRENCY_PATTERNS = [
    re.compile(r"R\$?\s*([0-9]+(?:\.[0-9]{3})*(?:,[0-9]{2})?)"),
    re.compile(r"\$\s*([0-9]+(?:,[0-9]{3})*(?:\.[0-9]{2})?)"),
    re.compile(r"([0-9]+(?:\.[0-9]{3})*(?:,[0-9]{2})?)\s*reais?", re.IGNORECASE),
    re.compile(r"([0-9]+(?:,[0-9]{3})*(?:\.[0-9]{2})?)\s*d[óo]lares?", re.IGNORECASE),
]
_NUMBER_PATTERN = re.compile(r"[0-9]+(?:[.,][0-9]+)*")

_SUFFIX_MULTIPLIERS = {"k": 1_000.0, "m": 1_000_000.0}

SMART_DEFAULTS = {
    "saas": {"initial_investment": 50000.0, "monthly_costs": 5000.0, "pricing": 49.0, "target_market_size": 100000.0},
    "ecommerce": {"initial_investment": 30000.0, "monthly_costs": 8000.0, "pricing": 99.0, "target_market_size": 50000.0},
    "service": {"initial_investment": 10000.0, "monthly_costs": 3000.0, "pricing": 200.0, "target_market_size": 10000.0},
    "physical": {"initial_investment": 100000.0, "monthly_costs": 15000.0, "pricing": 150.0, "target_market_size": 20000.0},
}

_CATEGORY_KEYWORDS = [
    ("physical", ("físico", "fisico", "restaurante", "loja física", "physical store", "restaurant")),
    ("saas", ("app", "software", "plataforma", "platform")),
    ("ecommerce", ("loja", "produto", "venda", "store", "product", "shop")),
    ("service", ("serviço", "servico", "consultoria", "freelance", "service", "consulting")),
]

REVENUE_MODEL_ALIASES = {
    "subscription": RevenueModel.SUBSCRIPTION,
    "saas": RevenueModel.SUBSCRIPTION,
    "assinatura": RevenueModel.SUBSCRIPTION,
    "freemium": RevenueModel.FREEMIUM,
    "commission": RevenueModel.MARKETPLACE,
    "marketplace": RevenueModel.MARKETPLACE,
    "comissão": RevenueModel.MARKETPLACE,
    "advertising": RevenueModel.ADVERTISING,
    "ads": RevenueModel.ADVERTISING,
    "publicidade": RevenueModel.ADVERTISING,
    "one-time": RevenueModel.ONE_TIME,
    "one_time": RevenueModel.ONE_TIME,
    "onetime": RevenueModel.ONE_TIME,
    "pagamento único": RevenueModel.ONE_TIME,
}


def _to_number(raw: str) -> float:
    """Convert "100.000,50", "100,000.50", "100,50" or "100.000" to a float."""
    clean = re.sub(r"[^\d.,]", "", raw)
    if not clean:
        return 0.0
    if "." in clean and "," in clean:
        # The separator that comes last is the decimal one.
        if clean.rfind(",") > clean.rfind("."):
            clean = clean.replace(".", "").replace(",", ".")
        else:
            clean = clean.replace(",", "")
    elif "," in clean:
        if re.fullmatch(r"\d{1,3}(,\d{3})+", clean):
            clean = clean.replace(",", "")
        else:
            clean = clean.replace(",", ".")
    elif re.fullmatch(r"\d{1,3}(\.\d{3})+", clean):
        clean = clean.replace(".", "")
    try:
        return float(clean)
    except ValueError:
        return 0.0


def parse_financial_value(text: Union[str, float, int, None]) -> float:
    """
    Extract a numeric value from a string with a monetary format.

    Numbers pass through unchanged. Returns 0.0 when nothing can be parsed.
    """
    if isinstance(text, bool):
        return 0.0
    if isinstance(text, (int, float)):
        return float(text)
    if not text or not isinstance(text, str):
        return 0.0

    clean_text = text.strip()

    suffix_match = _SUFFIX_PATTERN.search(clean_text)
    if suffix_match:
        base = _to_number(suffix_match.group(1).replace(",", "."))
        return base * _SUFFIX_MULTIPLIERS[suffix_match.group(2).lower()]

    for pattern in _CURRENCY_PATTERNS:
        match = pattern.search(clean_text)
        if match:
            return _to_number(match.group(1))

    match = _NUMBER_PATTERN.search(clean_text)
    if match:
        return _to_number(match.group(0))
    return 0.0


def _first_present(section: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = section.get(key)
        if value:
            return value
    return None


def extract_financial_data(analysis: Optional[Mapping[str, Any]]) -> dict[str, float]:
    """Extract financial fields from the financial_analysis / market_analysis sections of an analysis."""
    analysis = analysis or {}
    financial = analysis.get("financial_analysis") or {}
    market = analysis.get("market_analysis") or {}

    return {
        "initial_investment": parse_financial_value(
            _first_present(financial, "initial_investment", "investment", "startup_cost")
        ),
        "monthly_costs": parse_financial_value(
            _first_present(financial, "monthly_costs", "operational_costs", "running_costs")
        ),
        "pricing": parse_financial_value(_first_present(financial, "pricing", "price", "subscription_price")),
        "revenue_per_month": parse_financial_value(
            _first_present(financial, "revenue_per_month", "monthly_revenue")
        ),
        "target_market_size": parse_financial_value(_first_present(market, "target_market_size", "market_size")),
    }


def _field(idea: Union[IdeaFinancialData, Mapping[str, Any]], key: str, default: Any = None) -> Any:
    if isinstance(idea, Mapping):
        return idea.get(key, default)
    return getattr(idea, key, default)


def detect_idea_category(idea: Union[IdeaFinancialData, Mapping[str, Any]]) -> str:
    description = (_field(idea, "description") or "").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in description for keyword in keywords):
            return category
    return "saas"


def generate_smart_defaults(idea: Union[IdeaFinancialData, Mapping[str, Any]]) -> dict[str, float]:
    """Default financials for the idea's category (saas when nothing matches)."""
    return dict(SMART_DEFAULTS[detect_idea_category(idea)])


def validate_financial_data(data: Mapping[str, Any]) -> list[str]:
    """Return warnings for fields that make a simulation meaningless. Empty list means valid."""
    warnings = []
    initial_investment = data.get("initial_investment") or 0
    monthly_costs = data.get("monthly_costs") or 0
    pricing = data.get("pricing") or 0

    if initial_investment <= 0:
        warnings.append("Initial investment is missing or invalid")
    if monthly_costs <= 0:
        warnings.append("Monthly costs are missing or invalid")
    if pricing <= 0:
        warnings.append("Product/service price is missing or invalid")
    if monthly_costs > 0 and pricing > 0 and monthly_costs > pricing * 100:
        warnings.append("Monthly costs look too high relative to the price")
    return warnings


def clamp_financial_data(idea: IdeaFinancialData) -> IdeaFinancialData:
    """
    Replace missing values with category defaults and clamp every field into its bounds.

    Returns a new IdeaFinancialData; the input is left untouched.
    """
    defaults = generate_smart_defaults(idea)
    updates = {}
    for key, (low, high) in get_financial_bounds().items():
        value = getattr(idea, key)
        if value is None or not math.isfinite(value) or value <= 0:
            logger.info("Field %s=%r is unusable, falling back to default %s", key, value, defaults[key])
            value = defaults[key]
        clamped = min(max(value, low), high)
        if clamped != value:
            logger.info("Clamped %s from %s to %s", key, value, clamped)
        updates[key] = clamped
    return idea.model_copy(update=updates)


# Whole words only: "leads" or "downloads" must not read as ads.
_SUBSCRIPTION_WORDS = re.compile(r"\b(assinaturas?|subscriptions?|mensal|mensalidades?|saas)\b")
_FREEMIUM_WORDS = re.compile(r"\bfreemium\b")
_MARKETPLACE_WORDS = re.compile(r"\b(marketplaces?|comissão|comissões|commissions?)\b")
_ADVERTISING_WORDS = re.compile(r"\b(publicidade|anúncios?|advertising|ads)\b")


def detect_revenue_model(monetization: str, description: str = "") -> RevenueModel:
    """Keyword detection on the monetization text (freemium also looks at the description)."""
    monetization = (monetization or "").lower()
    description = (description or "").lower()

    if _SUBSCRIPTION_WORDS.search(monetization):
        return RevenueModel.SUBSCRIPTION
    if _FREEMIUM_WORDS.search(monetization) or _FREEMIUM_WORDS.search(description):
        return RevenueModel.FREEMIUM
    if _MARKETPLACE_WORDS.search(monetization):
        return RevenueModel.MARKETPLACE
    if _ADVERTISING_WORDS.search(monetization):
        return RevenueModel.ADVERTISING
    return RevenueModel.ONE_TIME


def resolve_revenue_model(idea: Union[IdeaFinancialData, Mapping[str, Any]]) -> RevenueModel:
    """Map the revenue_model label to a RevenueModel, falling back to keyword detection."""
    label = _field(idea, "revenue_model")
    if isinstance(label, RevenueModel):
        return label
    if isinstance(label, str) and label.strip():
        normalized = label.strip().lower()
        if normalized in REVENUE_MODEL_ALIASES:
            return REVENUE_MODEL_ALIASES[normalized]
        logger.debug("Unknown revenue_model label %r, detecting from monetization", label)
    return detect_revenue_model(_field(idea, "monetization") or "", _field(idea, "description") or "")
