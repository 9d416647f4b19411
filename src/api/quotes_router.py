"""
APIRouter for term-life rate quotes and the quote comparison grid.

Endpoints:
- GET  /quotes/config
- POST /quotes/rate
- POST /quotes/options
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from src.api.main import get_config
from src.quoting.options import QuoteComparison
from src.quoting.rate_calculator import RateInput, calculate_rate, rate_breakdown


api = APIRouter()


class RateRequest(BaseModel):
    coverage: int = Field(..., ge=0)
    term_years: int = Field(20, gt=0)
    age: int = Field(..., ge=0, le=120)
    gender: str = "male"
    smoker: bool = False
    health_rating: str = "good"

    def to_rate_input(self) -> RateInput:
        return RateInput(
            coverage=self.coverage,
            term_years=self.term_years,
            age=self.age,
            gender=self.gender,
            smoker=self.smoker,
            health_rating=self.health_rating,
        )


class OptionsRequest(RateRequest):
    selected_id: Optional[str] = Field(None, description="Option id currently selected in the grid, e.g. term-15")


@api.get("/quotes/config", tags=["Quotes"])
def quotes_config(config=Depends(get_config)):
    """Term set, coverage slider bounds, quick-select amounts and coverage types."""
    coverage = config.options.coverage
    return {
        "terms": list(config.options.terms),
        "default_selected_term": config.options.default_selected_term,
        "coverage": {
            "min": coverage.min,
            "max": coverage.max,
            "step": coverage.step,
            "default": coverage.default,
            "quick_select": list(coverage.quick_select),
        },
        "coverage_types": [c.model_dump() for c in config.intake.coverage_types],
    }


@api.post("/quotes/rate", tags=["Quotes"])
def quote_rate(body: RateRequest, include_breakdown: bool = False, config=Depends(get_config)):
    rate_input = body.to_rate_input()
    if include_breakdown:
        return rate_breakdown(rate_input, config.rates)
    return calculate_rate(rate_input, config.rates).to_dict()


@api.post("/quotes/options", tags=["Quotes"])
def quote_options(body: OptionsRequest, config=Depends(get_config)):
    """
    Price every configured term for the given applicant and coverage.
    The coverage is snapped to the slider; the default term is selected when none is given.
    """
    comparison = QuoteComparison(body.to_rate_input(), config=config.options, rates=config.rates)
    comparison.set_coverage(body.coverage)
    if body.selected_id:
        try:
            comparison.select(body.selected_id)
        except KeyError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown quote option: {body.selected_id}")
    return comparison.to_dict()
