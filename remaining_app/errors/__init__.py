"""
Error classification system for the remaining operation.

This module provides the exception hierarchy for configuration problems and
ledger inconsistencies. Every error is terminal for the computation that
raised it.
"""

from .configuration import (
    ConfigurationFailure,
    ConfigurationError,
    CurrencyNotFoundError,
    UnsupportedCurrencyError,
    PeriodRangeKind,
    PeriodRangeError,
)
from .computation import (
    ComputationFailure,
    LedgerOrderError,
    OvercommitError,
    MissingTargetError,
    DuplicateTargetError,
    IllustrationMismatchError,
)
from .chaining import with_context

# Every error raised by the engine on bad inputs
DOMAIN_ERRORS = (ConfigurationFailure, ComputationFailure)

__all__ = [
    # Configuration Errors
    "ConfigurationFailure",
    "ConfigurationError",
    "CurrencyNotFoundError",
    "UnsupportedCurrencyError",
    "PeriodRangeKind",
    "PeriodRangeError",
    # Computation Errors
    "ComputationFailure",
    "LedgerOrderError",
    "OvercommitError",
    "MissingTargetError",
    "DuplicateTargetError",
    "IllustrationMismatchError",
    # Helpers
    "with_context",
    "DOMAIN_ERRORS",
]
