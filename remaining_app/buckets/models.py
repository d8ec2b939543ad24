"""
Bucket ledger data models.

A bucket is a named sinking fund: an append-only ledger of dated lines that
deposit money, cancel earlier deposits, or set the goal the bucket saves for.
Ledger amounts stay raw (currency identifier and figure) until they are
evaluated against the exchange rates of a computation.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..amounts import Amount, CurrencyIdent, ExchangeRates


@dataclass(frozen=True)
class RawAmount:
    """Amount as written in the vault, not yet bound to exchange rates."""
    currency: CurrencyIdent
    figure: Decimal

    def to_amount(self, exchange_rates: ExchangeRates) -> Amount:
        return exchange_rates.new_amount(self.currency, self.figure)


@dataclass(frozen=True)
class Deposit:
    """Money put into the bucket."""
    date: date
    amount: RawAmount


@dataclass(frozen=True)
class DepositCancellation:
    """Money taken back out of the bucket."""
    date: date
    amount: RawAmount


@dataclass(frozen=True)
class SetTarget:
    """The goal: reach ``amount`` by ``target_date``."""
    date: date
    amount: RawAmount
    target_date: date


LedgerLine = Union[Deposit, DepositCancellation, SetTarget]


@dataclass(frozen=True)
class Bucket:
    """Named ledger, expected in chronological order."""
    name: str
    lines: tuple[LedgerLine, ...] = ()

    def targets(self) -> list[SetTarget]:
        return [line for line in self.lines if isinstance(line, SetTarget)]


@dataclass(frozen=True)
class BucketSnapshot:
    """State of a bucket for the active period."""
    # Actual change when something happened this period, else the recommendation
    recommended_or_actual_change: Amount
    current_recommended_deposit: Amount
    current_actual_deposit: Optional[Amount]
    total_deposit: Amount
