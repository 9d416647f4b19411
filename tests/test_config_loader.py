from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.utils.config_loader import DEFAULT_CONFIG_PATH, QuoteConfig, load_quote_config


def test_shipped_config_matches_defaults():
    loaded = load_quote_config()
    assert loaded == QuoteConfig()
    assert loaded.rates.term_factors[25] == Decimal("1.2")
    assert loaded.intake.coverage_type_ids == ["term", "whole", "universal", "final", "unsure"]
    assert DEFAULT_CONFIG_PATH.name == "quote_config.yml"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_quote_config(tmp_path / "nope.yml")


def test_partial_file_keeps_defaults(tmp_path):
    path = tmp_path / "quote_config.yml"
    path.write_text("rates:\n  smoker_factor: '2.5'\nintake:\n  session_ttl_seconds: 600\n", encoding="utf-8")
    loaded = load_quote_config(path)
    assert loaded.rates.smoker_factor == Decimal("2.5")
    assert loaded.rates.base_rate == Decimal("0.14")
    assert loaded.intake.session_ttl_seconds == 600
    assert loaded.options.terms == [10, 15, 20, 25, 30]


def test_invalid_coverage_bounds_rejected(tmp_path):
    path = tmp_path / "quote_config.yml"
    path.write_text("options:\n  coverage:\n    min: 500000\n    max: 100000\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_quote_config(path)
