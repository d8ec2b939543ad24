"""Pytest configuration and shared fixtures."""

import pytest
from datetime import date
from decimal import Decimal
from typing import Callable

from remaining_app.amounts import ExchangeRates
from remaining_app.buckets import Bucket, Deposit, DepositCancellation, RawAmount, SetTarget
from remaining_app.period import CalendarMonthPolicy, FixedLengthPolicy


def make_date(month: int, day: int, year: int = 2023) -> date:
    """Date helper, 2023 unless told otherwise."""
    return date(year, month, day)


@pytest.fixture
def mkdate() -> Callable[..., date]:
    """Date helper for tests."""
    return make_date


@pytest.fixture
def exchange_rates() -> ExchangeRates:
    """One euro for two yens."""
    return ExchangeRates.build([("EUR", 1), ("JPY", 2)])


@pytest.fixture
def euro(exchange_rates):
    """Build euro amounts."""
    return lambda figure: exchange_rates.new_amount("EUR", figure)


@pytest.fixture
def yen(exchange_rates):
    """Build yen amounts."""
    return lambda figure: exchange_rates.new_amount("JPY", figure)


@pytest.fixture
def calendar_month_policy() -> CalendarMonthPolicy:
    """Calendar month periods."""
    return CalendarMonthPolicy()


@pytest.fixture
def fixed_length_policy() -> FixedLengthPolicy:
    """Four-day periods starting on 2023-04-11."""
    return FixedLengthPolicy(start_date=make_date(4, 11), period_in_days=4)


@pytest.fixture
def bucket_factory() -> Callable[..., Bucket]:
    """
    Build a bucket from compact line tuples, in euros unless told otherwise.

    Lines are ``("target", date, figure, target_date)``, ``("deposit", date, figure)``
    or ``("cancel", date, figure)``.
    """
    def build(name, *lines, currency="EUR"):
        ledger = []
        for kind, line_date, figure, *rest in lines:
            amount = RawAmount(currency=currency, figure=Decimal(figure))
            if kind == "target":
                ledger.append(SetTarget(date=line_date, amount=amount, target_date=rest[0]))
            elif kind == "deposit":
                ledger.append(Deposit(date=line_date, amount=amount))
            else:
                ledger.append(DepositCancellation(date=line_date, amount=amount))
        return Bucket(name=name, lines=tuple(ledger))

    return build
