"""
Quote option generation and the comparison grid selector.

One QuoteOption per configured term, regenerated as a whole whenever the coverage or
the applicant attributes change.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from src.quoting.rate_calculator import RateInput, calculate_rate
from src.utils.config_loader import OptionsConfig, RatesConfig

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = OptionsConfig()

TERM_OPTIONS = tuple(DEFAULT_OPTIONS.terms)
COVERAGE_QUICK_SELECT = tuple(DEFAULT_OPTIONS.coverage.quick_select)
COVERAGE_MIN = DEFAULT_OPTIONS.coverage.min
COVERAGE_MAX = DEFAULT_OPTIONS.coverage.max
COVERAGE_STEP = DEFAULT_OPTIONS.coverage.step

POPULAR_TERM = 20
SAVINGS_LABELS = {10: "Best Value", 20: "Most Popular"}


def option_id(term_years: int) -> str:
    return f"term-{term_years}"


@dataclass(frozen=True)
class QuoteOption:
    id: str
    term_length: str
    term_years: int
    coverage: int
    monthly_rate: float
    annual_rate: float
    popular: bool = False
    savings: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def generate_quote_options(
    template: RateInput,
    coverage: Optional[int] = None,
    terms: Iterable[int] = TERM_OPTIONS,
    rates: Optional[RatesConfig] = None,
) -> List[QuoteOption]:
    """Price every term for one coverage amount, in the order the terms are given."""
    base = template if coverage is None else template.with_coverage(coverage)
    options: List[QuoteOption] = []
    for term in terms:
        output = calculate_rate(base.with_term(term), rates)
        options.append(
            QuoteOption(
                id=option_id(term),
                term_length=f"{term} Year Term",
                term_years=term,
                coverage=int(base.coverage),
                monthly_rate=output.monthly,
                annual_rate=output.annual,
                popular=term == POPULAR_TERM,
                savings=SAVINGS_LABELS.get(term),
            )
        )
    return options


def snap_coverage(amount: int, config: Optional[OptionsConfig] = None) -> int:
    """Clamp to the slider range and round to the nearest slider step."""
    cov = (config or DEFAULT_OPTIONS).coverage
    clamped = max(cov.min, min(cov.max, int(amount)))
    steps = (clamped - cov.min + cov.step // 2) // cov.step
    return min(cov.max, cov.min + steps * cov.step)


class QuoteComparison:
    """
    Selection state behind the quote comparison grid.

    Options are rebuilt on every coverage or applicant change. The selection sticks by id
    across rebuilds; when nothing is selected the default term is picked.
    """

    def __init__(
        self,
        base: RateInput,
        coverage: Optional[int] = None,
        config: Optional[OptionsConfig] = None,
        rates: Optional[RatesConfig] = None,
        on_select: Optional[Callable[[QuoteOption], None]] = None,
        on_coverage_change: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.config = config or DEFAULT_OPTIONS
        self.rates = rates
        self.on_select = on_select
        self.on_coverage_change = on_coverage_change
        self.base = base
        self.coverage = int(base.coverage if coverage is None else coverage)
        self.selected_id: Optional[str] = None
        self.options: List[QuoteOption] = []
        self._regenerate()

    @property
    def terms(self) -> List[int]:
        return list(self.config.terms)

    def _regenerate(self) -> None:
        self.options = generate_quote_options(self.base, self.coverage, self.config.terms, self.rates)
        if self.selected_id is None:
            self.selected_id = option_id(self.config.default_selected_term)
            logger.debug("[QuoteComparison] auto-selected %s", self.selected_id)

    def set_coverage(self, amount: int) -> int:
        """Slider/quick-select handler; returns the coverage actually applied."""
        self.coverage = snap_coverage(amount, self.config)
        self._regenerate()
        if self.on_coverage_change:
            self.on_coverage_change(self.coverage)
        return self.coverage

    def update_base(self, base: RateInput) -> None:
        self.base = base
        self._regenerate()

    def select(self, selected: str) -> QuoteOption:
        option = self.get_option(selected)
        if option is None:
            raise KeyError(f"Unknown quote option: {selected}")
        self.selected_id = option.id
        if self.on_select:
            self.on_select(option)
        return option

    def clear_selection(self) -> None:
        self.selected_id = None

    def get_option(self, selected: str) -> Optional[QuoteOption]:
        return next((o for o in self.options if o.id == selected), None)

    @property
    def selected_option(self) -> Optional[QuoteOption]:
        if self.selected_id is None:
            return None
        return self.get_option(self.selected_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coverage": self.coverage,
            "selected_id": self.selected_id,
            "options": [o.to_dict() for o in self.options],
        }
