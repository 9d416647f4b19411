"""
Term-life rate calculator - fixed multiplicative premium model.

annual = coverage / 1000 * base_rate * age * gender * smoker * health * term factors
monthly = annual / 12

Both figures are rounded half-up to cents. Unknown health ratings and term lengths
fall back to a neutral factor of 1.0 instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from src.utils.config_loader import RatesConfig

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
NEUTRAL_FACTOR = Decimal("1")

DEFAULT_RATES = RatesConfig()

GENDERS = ("male", "female")
HEALTH_RATINGS = ("excellent", "good", "average", "poor")


@dataclass(frozen=True)
class RateInput:
    coverage: int
    term_years: int
    age: int
    gender: str
    smoker: bool
    health_rating: str

    def with_term(self, term_years: int) -> "RateInput":
        return RateInput(
            coverage=self.coverage,
            term_years=term_years,
            age=self.age,
            gender=self.gender,
            smoker=self.smoker,
            health_rating=self.health_rating,
        )

    def with_coverage(self, coverage: int) -> "RateInput":
        return RateInput(
            coverage=coverage,
            term_years=self.term_years,
            age=self.age,
            gender=self.gender,
            smoker=self.smoker,
            health_rating=self.health_rating,
        )


@dataclass(frozen=True)
class RateOutput:
    monthly: float
    annual: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _norm(value: Any) -> str:
    return "" if value is None else str(value).strip().lower()


def _factors(rate_input: RateInput, rates: RatesConfig) -> Dict[str, Decimal]:
    age_factor = NEUTRAL_FACTOR + (Decimal(int(rate_input.age)) - rates.age_pivot) * rates.age_step
    gender_factor = rates.female_factor if _norm(rate_input.gender) == "female" else NEUTRAL_FACTOR
    smoker_factor = rates.smoker_factor if rate_input.smoker else NEUTRAL_FACTOR

    health_key = _norm(rate_input.health_rating)
    health_factor = rates.health_factors.get(health_key)
    if health_factor is None:
        logger.debug("[RateCalculator] unknown health_rating=%r; using neutral factor", rate_input.health_rating)
        health_factor = NEUTRAL_FACTOR

    term_factor = rates.term_factors.get(int(rate_input.term_years))
    if term_factor is None:
        logger.debug("[RateCalculator] unknown term_years=%r; using neutral factor", rate_input.term_years)
        term_factor = NEUTRAL_FACTOR

    return {
        "base_rate": rates.base_rate,
        "age_factor": age_factor,
        "gender_factor": gender_factor,
        "smoker_factor": smoker_factor,
        "health_factor": health_factor,
        "term_factor": term_factor,
    }


def _annual_unrounded(rate_input: RateInput, factors: Dict[str, Decimal]) -> Decimal:
    annual = Decimal(int(rate_input.coverage)) / 1000
    for value in factors.values():
        annual *= value
    return annual


def calculate_rate(rate_input: RateInput, rates: Optional[RatesConfig] = None) -> RateOutput:
    """Return the monthly and annual premium for one coverage/term combination."""
    rates = rates or DEFAULT_RATES
    annual = _annual_unrounded(rate_input, _factors(rate_input, rates))
    monthly = annual / 12
    return RateOutput(
        monthly=float(monthly.quantize(CENTS, rounding=ROUND_HALF_UP)),
        annual=float(annual.quantize(CENTS, rounding=ROUND_HALF_UP)),
    )


def rate_breakdown(rate_input: RateInput, rates: Optional[RatesConfig] = None) -> Dict[str, Any]:
    """Premium plus every factor that went into it, for display next to a quote."""
    rates = rates or DEFAULT_RATES
    factors = _factors(rate_input, rates)
    output = calculate_rate(rate_input, rates)
    return {
        "coverage": int(rate_input.coverage),
        "term_years": int(rate_input.term_years),
        "monthly": output.monthly,
        "annual": output.annual,
        "factors": {name: float(value) for name, value in factors.items()},
    }
