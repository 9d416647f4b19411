"""
Configuration loader for the quoting service
"""

import yaml
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError, model_validator
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "quote_config.yml"


class RatesConfig(BaseModel):
    """Multiplicative premium model constants"""

    base_rate: Decimal = Decimal("0.14")
    age_pivot: int = 25
    age_step: Decimal = Decimal("0.026")
    female_factor: Decimal = Decimal("0.91")
    smoker_factor: Decimal = Decimal("2.3")
    health_factors: Dict[str, Decimal] = Field(
        default_factory=lambda: {
            "excellent": Decimal("0.8"),
            "good": Decimal("1"),
            "average": Decimal("1.3"),
            "poor": Decimal("1.7"),
        }
    )
    term_factors: Dict[int, Decimal] = Field(
        default_factory=lambda: {
            10: Decimal("0.65"),
            15: Decimal("0.8"),
            20: Decimal("1"),
            25: Decimal("1.2"),
            30: Decimal("1.4"),
        }
    )


class CoverageConfig(BaseModel):
    """Coverage slider bounds and quick-select amounts"""

    min: int = Field(default=100000, gt=0)
    max: int = Field(default=2000000, gt=0)
    step: int = Field(default=50000, gt=0)
    default: int = 500000
    quick_select: List[int] = Field(
        default_factory=lambda: [250000, 500000, 750000, 1000000, 1500000, 2000000]
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "CoverageConfig":
        if self.min > self.max:
            raise ValueError("coverage.min must not exceed coverage.max")
        if not self.min <= self.default <= self.max:
            raise ValueError("coverage.default must lie within [min, max]")
        return self


class OptionsConfig(BaseModel):
    """Quote comparison grid configuration"""

    terms: List[int] = Field(default_factory=lambda: [10, 15, 20, 25, 30], min_length=1)
    default_selected_term: int = 20
    coverage: CoverageConfig = Field(default_factory=lambda: CoverageConfig())


class CoverageType(BaseModel):
    id: str
    label: str
    description: str = ""


class IntakeConfig(BaseModel):
    """Quote intake wizard configuration"""

    session_ttl_seconds: int = Field(default=1800, ge=60)
    submit_lock_ttl_seconds: int = Field(default=60, gt=0)
    coverage_types: List[CoverageType] = Field(
        default_factory=lambda: [
            CoverageType(id="term", label="Mortgage Protection", description="Protect your home & family"),
            CoverageType(id="whole", label="Whole Life", description="Permanent coverage, cash value"),
            CoverageType(id="universal", label="IUL", description="Index-linked growth & flexibility"),
            CoverageType(id="final", label="Final Expense", description="Cover end-of-life costs"),
            CoverageType(id="unsure", label="I'm Not Sure", description="Help me decide"),
        ]
    )

    @property
    def coverage_type_ids(self) -> List[str]:
        return [c.id for c in self.coverage_types]


class TrainingConfig(BaseModel):
    min_save_interval_seconds: float = Field(default=5.0, ge=0.0)
    max_open_trackers: int = Field(default=1000, gt=0)


class QuoteConfig(BaseModel):
    """Complete quoting service configuration"""

    rates: RatesConfig = Field(default_factory=lambda: RatesConfig())
    options: OptionsConfig = Field(default_factory=lambda: OptionsConfig())
    intake: IntakeConfig = Field(default_factory=lambda: IntakeConfig())
    training: TrainingConfig = Field(default_factory=lambda: TrainingConfig())


def load_quote_config(config_path: Optional[Path] = None) -> QuoteConfig:
    """
    Load and validate quoting configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to config/quote_config.yml

    Returns:
        Validated QuoteConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        config = QuoteConfig(**config_data)
        logger.info(f"Successfully loaded config from {config_path}")
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise


@lru_cache(maxsize=1)
def get_quote_config() -> QuoteConfig:
    """Process-wide config, loaded once from the default location."""
    return load_quote_config()
