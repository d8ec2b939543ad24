"""Sinking-fund buckets: ledger models, parsing and allocation"""

from .engine import evaluate_bucket, find_target, periods_remaining
from .models import (
    Bucket,
    BucketSnapshot,
    Deposit,
    DepositCancellation,
    LedgerLine,
    RawAmount,
    SetTarget,
)
from .parsers import LedgerParseError, parse_bucket, parse_ledger_line

__all__ = [
    "Bucket",
    "BucketSnapshot",
    "Deposit",
    "DepositCancellation",
    "LedgerLine",
    "RawAmount",
    "SetTarget",
    "evaluate_bucket",
    "find_target",
    "periods_remaining",
    "LedgerParseError",
    "parse_bucket",
    "parse_ledger_line",
]
