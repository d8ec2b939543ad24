"""
Computation error classifications for ledger folding and aggregation.

These exceptions are raised once the inputs have been read and the engine
finds them inconsistent. They always abort the whole remaining operation.
"""

from datetime import date
from typing import Optional, Dict, Any


class ComputationFailure(Exception):
    """Base class for inconsistencies found while computing a screen."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class LedgerOrderError(ComputationFailure):
    """Two consecutive ledger entries are not in chronological order."""

    def __init__(self, message: str, previous_date: Optional[date] = None,
                 next_date: Optional[date] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.previous_date = previous_date
        self.next_date = next_date


class OvercommitError(ComputationFailure):
    """More money was taken out of a bucket than it ever contained."""

    def __init__(self, message: str, line_date: Optional[date] = None,
                 balance: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.line_date = line_date
        self.balance = balance


class MissingTargetError(ComputationFailure):
    """A bucket has no SetTarget line."""

    def __init__(self, message: str, bucket_name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.bucket_name = bucket_name


class DuplicateTargetError(ComputationFailure):
    """A bucket has more than one SetTarget line."""

    def __init__(self, message: str, bucket_name: Optional[str] = None,
                 target_count: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.bucket_name = bucket_name
        self.target_count = target_count


class IllustrationMismatchError(ComputationFailure):
    """An operand does not expose the same illustration fields as its group."""

    def __init__(self, message: str, operand_name: Optional[str] = None,
                 operand_fields: Optional[list] = None,
                 group_fields: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operand_name = operand_name
        self.operand_fields = operand_fields or []
        self.group_fields = group_fields or []
