"""
Utility modules for the quoting service
"""
from .config_loader import QuoteConfig, load_quote_config, get_quote_config
from .rate_limiter import WriteThrottle

__all__ = [
    'QuoteConfig',
    'load_quote_config',
    'get_quote_config',
    'WriteThrottle',
]
