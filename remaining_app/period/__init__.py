"""Period policies and the period data model"""

from .models import Period
from .policies import (
    CALENDAR_MONTH,
    FIXED_LENGTH,
    CalendarMonthPolicy,
    FixedLengthPolicy,
    PeriodPolicy,
    policy_from_config,
)

__all__ = [
    "Period",
    "PeriodPolicy",
    "FixedLengthPolicy",
    "CalendarMonthPolicy",
    "policy_from_config",
    "FIXED_LENGTH",
    "CALENDAR_MONTH",
]
