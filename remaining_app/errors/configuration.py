"""
Configuration error classifications for budget computations.

These exceptions cover everything that is wrong with the inputs before any
ledger is folded: unreadable vault values, unsupported currencies and dates
that fall outside of the periods configuration.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ConfigurationFailure(Exception):
    """Base class for invalid or unreadable configuration."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(ConfigurationFailure):
    """Vault values are missing or cannot be decoded."""

    def __init__(self, message: str, key: Optional[str] = None,
                 source: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.key = key
        self.source = source


class CurrencyNotFoundError(ConfigurationFailure):
    """An amount refers to a currency absent from the exchange rates."""

    def __init__(self, message: str, currency_ident: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.currency_ident = currency_ident


class UnsupportedCurrencyError(ConfigurationFailure):
    """Exchange rates were built with an identifier outside the allow-list."""

    def __init__(self, message: str, currency_ident: Optional[str] = None,
                 supported: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.currency_ident = currency_ident
        self.supported = supported or []


class PeriodRangeKind(str, Enum):
    """Reasons a date cannot be placed in the periods configuration."""
    DATE_BEFORE_CONFIG_START = "date_before_config_start"
    END_BEFORE_START = "end_before_start"
    DATES_BEFORE_CONFIG_START = "dates_before_config_start"
    START_BEFORE_CONFIG_START = "start_before_config_start"
    END_BEFORE_CONFIG_START = "end_before_config_start"


class PeriodRangeError(ConfigurationFailure):
    """A date or date range is invalid for the active period policy."""

    def __init__(self, message: str, kind: Optional[PeriodRangeKind] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.kind = kind
