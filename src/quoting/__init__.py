"""
Term-life quoting: rate calculator and quote comparison options
"""
from .rate_calculator import RateInput, RateOutput, calculate_rate, rate_breakdown
from .options import QuoteComparison, QuoteOption, generate_quote_options, snap_coverage

__all__ = [
    'RateInput',
    'RateOutput',
    'calculate_rate',
    'rate_breakdown',
    'QuoteComparison',
    'QuoteOption',
    'generate_quote_options',
    'snap_coverage',
]
