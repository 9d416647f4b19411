from decimal import Decimal

import pytest

from src.quoting.rate_calculator import RateInput, calculate_rate, rate_breakdown
from src.utils.config_loader import RatesConfig


def test_fixed_example(applicant):
    out = calculate_rate(applicant)
    assert out.annual == 88.2
    assert out.monthly == 7.35
    assert out.to_dict() == {"monthly": 7.35, "annual": 88.2}


def test_same_input_same_output(applicant):
    assert calculate_rate(applicant) == calculate_rate(applicant)


@pytest.mark.parametrize("term", [10, 15, 20, 25, 30])
@pytest.mark.parametrize("coverage", [100000, 250000, 777777, 2000000])
def test_monthly_times_twelve_close_to_annual(applicant, term, coverage):
    out = calculate_rate(applicant.with_term(term).with_coverage(coverage))
    assert abs(out.monthly * 12 - out.annual) <= 0.06 + 1e-9


def test_monotonic_in_coverage(applicant):
    annuals = [calculate_rate(applicant.with_coverage(c)).annual for c in (100000, 250000, 500000, 1000000, 2000000)]
    assert annuals == sorted(annuals)
    assert len(set(annuals)) == len(annuals)


def test_smoker_strictly_more_expensive(applicant):
    smoker = RateInput(**{**applicant.__dict__, "smoker": True})
    assert calculate_rate(smoker).annual > calculate_rate(applicant).annual
    assert calculate_rate(smoker).annual == pytest.approx(88.2 * 2.3, abs=0.01)


def test_female_and_health_factors(applicant):
    female = RateInput(**{**applicant.__dict__, "gender": "female"})
    assert calculate_rate(female).annual == pytest.approx(88.2 * 0.91, abs=0.01)

    poor = RateInput(**{**applicant.__dict__, "health_rating": "poor"})
    assert calculate_rate(poor).annual == pytest.approx(88.2 * 1.7, abs=0.01)


def test_gender_and_health_are_case_insensitive(applicant):
    shouty = RateInput(**{**applicant.__dict__, "gender": " FEMALE ", "health_rating": "Excellent"})
    expected = RateInput(**{**applicant.__dict__, "gender": "female", "health_rating": "excellent"})
    assert calculate_rate(shouty) == calculate_rate(expected)


def test_unknown_health_rating_and_term_fall_back_to_neutral(applicant):
    unknown_health = RateInput(**{**applicant.__dict__, "health_rating": "superb"})
    assert calculate_rate(unknown_health).annual == 88.2

    # 20-year term factor is 1.0, so an unlisted term prices the same
    assert calculate_rate(applicant.with_term(17)).annual == 88.2


def test_age_below_pivot_discounts(applicant):
    young = RateInput(**{**applicant.__dict__, "age": 20})
    # 1 + (20 - 25) * 0.026 = 0.87
    assert calculate_rate(young).annual == pytest.approx(500 * 0.14 * 0.87, abs=0.01)


def test_term_factors(applicant):
    assert calculate_rate(applicant.with_term(10)).annual == pytest.approx(88.2 * 0.65, abs=0.01)
    assert calculate_rate(applicant.with_term(30)).annual == pytest.approx(88.2 * 1.4, abs=0.01)


def test_custom_rates_are_used(applicant):
    rates = RatesConfig(base_rate=Decimal("0.28"))
    assert calculate_rate(applicant, rates).annual == 176.4


def test_breakdown_lists_factors(applicant):
    out = rate_breakdown(applicant)
    assert out["annual"] == 88.2
    assert out["monthly"] == 7.35
    assert out["factors"]["age_factor"] == pytest.approx(1.26)
    assert out["factors"]["term_factor"] == 1.0
    assert set(out["factors"]) == {"base_rate", "age_factor", "gender_factor", "smoker_factor", "health_factor", "term_factor"}
