"""
Period data model and its textual form.

A period is the closed date interval used as the budgeting cadence. Periods
are produced by a period policy; the textual form is only used at the
configuration and display boundary.
"""

import re
from dataclasses import dataclass
from datetime import date

from ..errors import PeriodRangeError, PeriodRangeKind
from ..utils.time import first_day_of_month, format_date, last_day_of_month, parse_date

_RANGE_SEPARATOR = "/"
_MONTH = re.compile(r"^\d{4}-\d{2}$")


@dataclass(frozen=True)
class Period:
    """Closed interval of calendar days, ``start_date <= end_date``."""
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise PeriodRangeError(
                f"Period ends ({self.end_date}) before it starts ({self.start_date})",
                kind=PeriodRangeKind.END_BEFORE_START,
            )

    def contains(self, day: date) -> bool:
        """Check whether ``day`` falls within the period, bounds included."""
        return self.start_date <= day <= self.end_date

    @property
    def is_calendar_month(self) -> bool:
        """True when the period spans exactly one whole calendar month."""
        return (self.start_date.day == 1
                and self.end_date == last_day_of_month(self.start_date))

    def serialize(self) -> str:
        """
        Render the period as text.

        Whole calendar months render as ``YYYY-MM``, any other period as
        ``YYYY-MM-DD/YYYY-MM-DD``.
        """
        if self.is_calendar_month:
            return f"{self.start_date.year:04d}-{self.start_date.month:02d}"
        return f"{format_date(self.start_date)}{_RANGE_SEPARATOR}{format_date(self.end_date)}"

    @classmethod
    def deserialize(cls, text: str) -> "Period":
        """
        Parse either textual form produced by ``serialize``.

        Raises:
            ValueError: If the text matches neither form
        """
        raw = text.strip()
        if _RANGE_SEPARATOR in raw:
            start_raw, _, end_raw = raw.partition(_RANGE_SEPARATOR)
            return cls(start_date=parse_date(start_raw), end_date=parse_date(end_raw))

        message = f"Could not parse period {text!r}: expected YYYY-MM or YYYY-MM-DD/YYYY-MM-DD"
        if not _MONTH.match(raw):
            raise ValueError(message)
        try:
            month_start = date(int(raw[:4]), int(raw[5:]), 1)
        except ValueError as e:
            raise ValueError(message) from e

        return cls(start_date=first_day_of_month(month_start),
                   end_date=last_day_of_month(month_start))

    def __str__(self) -> str:
        return self.serialize()
