"""
Period policies: how the calendar is cut into budgeting periods.

The set of policies is closed and chosen by configuration. Every policy
exposes the same two operations:

- ``period_for_date(day)``: the period containing ``day``
- ``periods_between(start, end)``: how many periods the inclusive range
  touches (same period -> 1, adjacent periods -> 2, ...)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Union

from ..errors import ConfigurationError, PeriodRangeError, PeriodRangeKind
from ..logging.config import get_logger
from ..utils.time import first_day_of_month, last_day_of_month, month_index, parse_date
from .models import Period

logger = get_logger(__name__)

FIXED_LENGTH = "fixed_length"
CALENDAR_MONTH = "monthly"


def _check_order(start: date, end: date) -> None:
    if start > end:
        raise PeriodRangeError(
            "Start date is after end date",
            kind=PeriodRangeKind.END_BEFORE_START,
            context={"start": start.isoformat(), "end": end.isoformat()},
        )


@dataclass(frozen=True)
class FixedLengthPolicy:
    """Consecutive periods of ``period_in_days`` days from ``start_date``."""
    start_date: date
    period_in_days: int

    def __post_init__(self):
        if self.period_in_days < 1:
            raise ConfigurationError(
                f"Period length must be at least one day, got {self.period_in_days}",
                key="period_in_days",
            )

    def period_index_for_date(self, day: date) -> int:
        """
        Index of the period containing ``day``, 0 for the first period.

        Raises:
            PeriodRangeError: If ``day`` is before the configuration start
        """
        if day < self.start_date:
            raise PeriodRangeError(
                "Date is before PeriodsConfiguration's start",
                kind=PeriodRangeKind.DATE_BEFORE_CONFIG_START,
                context={"date": day.isoformat(), "start_date": self.start_date.isoformat()},
            )
        return (day - self.start_date).days // self.period_in_days

    def period_for_date(self, day: date) -> Period:
        index = self.period_index_for_date(day)

        # The next period starts period_in_days later, this one ends the day before
        start_offset = index * self.period_in_days
        end_offset = start_offset + self.period_in_days - 1

        return Period(
            start_date=self.start_date + timedelta(days=start_offset),
            end_date=self.start_date + timedelta(days=end_offset),
        )

    def periods_between(self, start: date, end: date) -> int:
        _check_order(start, end)

        start_before = start < self.start_date
        end_before = end < self.start_date
        if start_before and end_before:
            raise PeriodRangeError(
                "Dates before PeriodsConfiguration's start",
                kind=PeriodRangeKind.DATES_BEFORE_CONFIG_START,
            )
        if start_before:
            raise PeriodRangeError(
                "Start date is before PeriodsConfiguration's start",
                kind=PeriodRangeKind.START_BEFORE_CONFIG_START,
            )
        if end_before:
            raise PeriodRangeError(
                "End date is before PeriodsConfiguration's start",
                kind=PeriodRangeKind.END_BEFORE_CONFIG_START,
            )

        return self.period_index_for_date(end) - self.period_index_for_date(start) + 1


@dataclass(frozen=True)
class CalendarMonthPolicy:
    """One period per calendar month."""

    def period_for_date(self, day: date) -> Period:
        return Period(
            start_date=first_day_of_month(day),
            end_date=last_day_of_month(day),
        )

    def periods_between(self, start: date, end: date) -> int:
        _check_order(start, end)
        return month_index(end) - month_index(start) + 1


PeriodPolicy = Union[FixedLengthPolicy, CalendarMonthPolicy]


def policy_from_config(raw: dict[str, Any]) -> PeriodPolicy:
    """
    Build a period policy from its vault representation.

    Accepted shapes::

        {"type": "monthly"}
        {"type": "fixed_length", "start_date": "2023-04-11", "period_in_days": 14}

    Raises:
        ConfigurationError: If the type is unknown or a field is invalid
    """
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Periods configuration must be a mapping, got {type(raw).__name__}",
            key="periods_configuration",
        )

    policy_type = raw.get("type")

    if policy_type == CALENDAR_MONTH:
        policy: PeriodPolicy = CalendarMonthPolicy()
    elif policy_type == FIXED_LENGTH:
        try:
            period_in_days = raw["period_in_days"]
            # bool is an int subclass, and YAML strings such as "7" are not lengths
            if isinstance(period_in_days, bool) or not isinstance(period_in_days, int):
                raise ConfigurationError(
                    f"period_in_days must be an integer, got {period_in_days!r}",
                    key="periods_configuration",
                )
            policy = FixedLengthPolicy(
                start_date=parse_date(raw["start_date"]),
                period_in_days=period_in_days,
            )
        except KeyError as e:
            raise ConfigurationError(
                f"Fixed length periods configuration is missing {e.args[0]}",
                key="periods_configuration",
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid fixed length periods configuration: {e}",
                key="periods_configuration",
            ) from e
    else:
        raise ConfigurationError(
            f"Unknown periods configuration type: {policy_type!r}, "
            f"expected '{FIXED_LENGTH}' or '{CALENDAR_MONTH}'",
            key="periods_configuration",
        )

    logger.debug("Loaded period policy", policy=type(policy).__name__)
    return policy
