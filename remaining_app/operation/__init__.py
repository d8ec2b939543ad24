"""Operands, groups and operand providers of the remaining operation"""

from .models import (
    Group,
    Illustration,
    IllustrationValue,
    Operand,
    OperandProvider,
    RemainingOperationScreen,
    RemainingOperationScreenGroup,
)
from .providers import (
    AccountOperandBuilder,
    BucketOperandBuilder,
    FoundAmount,
    IgnoredTransactionOperandBuilder,
    PredictedIncomeOperandBuilder,
)

__all__ = [
    "Group",
    "Illustration",
    "IllustrationValue",
    "Operand",
    "OperandProvider",
    "RemainingOperationScreen",
    "RemainingOperationScreenGroup",
    "AccountOperandBuilder",
    "BucketOperandBuilder",
    "FoundAmount",
    "IgnoredTransactionOperandBuilder",
    "PredictedIncomeOperandBuilder",
]
