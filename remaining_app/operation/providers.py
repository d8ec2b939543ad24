"""
Operand providers for the remaining operation.

The set of providers is closed: accounts, buckets, ignored transactions and
predicted income. Each one turns its vault values into zero or one operand
for the active period.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..amounts import CurrencyIdent, ExchangeRates, to_figure
from ..buckets import Bucket, evaluate_bucket, find_target
from ..errors import (
    DOMAIN_ERRORS,
    ConfigurationError,
    LedgerOrderError,
    PeriodRangeError,
    PeriodRangeKind,
    with_context,
)
from ..logging.config import get_operation_logger
from ..period import Period, PeriodPolicy
from ..utils.time import format_date, parse_date
from .models import Operand

logger = get_operation_logger(__name__)


def _required(raw: Any, key: str, kind: str) -> Any:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{kind} must be a mapping, got {raw!r}", key=kind)
    try:
        return raw[key]
    except KeyError:
        raise ConfigurationError(f"{kind} is missing {key}", key=kind) from None


def _figure(raw: Any, kind: str) -> Decimal:
    try:
        return to_figure(raw)
    except ValueError as e:
        raise ConfigurationError(f"{kind}: {e}", key=kind) from e


def _date(raw: Any, kind: str) -> date:
    try:
        return parse_date(raw)
    except ValueError as e:
        raise ConfigurationError(f"{kind}: {e}", key=kind) from e


@dataclass(frozen=True)
class FoundAmount:
    """Balance found in an account history."""
    figure: Decimal
    # True when no observation was recorded on the requested date itself
    estimated: bool


@dataclass(frozen=True)
class AccountOperandBuilder:
    """Balance history of one account."""
    name: str
    currency: CurrencyIdent
    amounts: tuple[tuple[date, Decimal], ...]

    @classmethod
    def from_config(cls, raw: dict[str, Any]) -> "AccountOperandBuilder":
        name = str(_required(raw, "name", "account"))
        currency = str(_required(raw, "currency", "account"))
        amounts = tuple(
            (_date(_required(item, "date", "account"), "account"),
             _figure(_required(item, "amount", "account"), "account"))
            for item in raw.get("amounts") or []
        )
        return cls(name=name, currency=currency, amounts=amounts)

    def amount_at(self, day: date) -> FoundAmount:
        """
        Balance on ``day``: the last observation recorded on or before it.

        Raises:
            ConfigurationError: If the history is empty
            PeriodRangeError: If ``day`` is before the first observation
            LedgerOrderError: If the history is out of order
        """
        if not self.amounts:
            raise ConfigurationError("The account has no amount history", key="accounts")

        if day < self.amounts[0][0]:
            raise PeriodRangeError(
                "The requested date is before the start of the amount history",
                kind=PeriodRangeKind.DATE_BEFORE_CONFIG_START,
            )

        found: Optional[FoundAmount] = None
        previous_date: Optional[date] = None
        for observed_on, figure in self.amounts:
            if previous_date is not None and previous_date > observed_on:
                raise LedgerOrderError(
                    "Amount history out of order",
                    previous_date=previous_date,
                    next_date=observed_on,
                )
            previous_date = observed_on
            if observed_on <= day:
                found = FoundAmount(figure=figure, estimated=observed_on != day)

        # amounts[0] <= day, so found is set
        return found

    def build(self, period: Period, today: date,
              exchange_rates: ExchangeRates) -> Optional[Operand]:
        try:
            start = self.amount_at(period.start_date)
            end = self.amount_at(today)
            start_amount = exchange_rates.new_amount(self.currency, start.figure)
            end_amount = exchange_rates.new_amount(self.currency, end.figure)
        except DOMAIN_ERRORS as e:
            raise with_context(f"Account '{self.name}'", e) from e

        difference = end_amount.sub(start_amount)
        return Operand(
            name=self.name,
            amount=difference,
            illustration=(
                ("Period start amount", start_amount),
                ("Period end amount", end_amount),
                ("Estimated", end.estimated),
                ("Difference", difference),
            ),
        )


@dataclass(frozen=True)
class BucketOperandBuilder:
    """A bucket evaluated against the active period policy."""
    bucket: Bucket
    policy: PeriodPolicy

    def build(self, period: Period, today: date,
              exchange_rates: ExchangeRates) -> Optional[Operand]:
        try:
            snapshot = evaluate_bucket(self.bucket, self.policy, today, exchange_rates)
            target = find_target(self.bucket)
            target_amount = target.amount.to_amount(exchange_rates)
        except DOMAIN_ERRORS as e:
            raise with_context(f"Bucket '{self.bucket.name}'", e) from e

        # Money set aside for a bucket is no longer available this period
        return Operand(
            name=self.bucket.name,
            amount=snapshot.recommended_or_actual_change.negate(),
            illustration=(
                ("This period - recommended deposit", snapshot.current_recommended_deposit),
                ("This period - actual deposit", snapshot.current_actual_deposit),
                ("Total deposit", snapshot.total_deposit),
                ("Target", target_amount),
                ("Target date", target.target_date),
            ),
        )


@dataclass(frozen=True)
class IgnoredTransactionOperandBuilder:
    """A one-off transaction taken into account separately from accounts."""
    name: str
    currency: CurrencyIdent
    amount: Decimal
    date: date

    @classmethod
    def from_config(cls, raw: dict[str, Any]) -> "IgnoredTransactionOperandBuilder":
        kind = "ignored_transaction"
        return cls(
            name=str(_required(raw, "name", kind)),
            currency=str(_required(raw, "currency", kind)),
            amount=_figure(_required(raw, "amount", kind), kind),
            date=_date(_required(raw, "date", kind), kind),
        )

    def build(self, period: Period, today: date,
              exchange_rates: ExchangeRates) -> Optional[Operand]:
        if not period.contains(self.date):
            logger.debug(
                "Ignored transaction outside of the period",
                name=self.name,
                date=format_date(self.date),
                period=period.serialize(),
            )
            return None

        included = self.date <= today
        try:
            amount = exchange_rates.new_amount(
                self.currency, self.amount if included else Decimal(0)
            )
        except DOMAIN_ERRORS as e:
            raise with_context(f"Ignored transaction '{self.name}'", e) from e

        return Operand(
            name=self.name,
            amount=amount,
            illustration=(
                ("Included", included),
                ("Date", self.date),
            ),
        )


@dataclass(frozen=True)
class PredictedIncomeOperandBuilder:
    """Income expected before the end of the period."""
    currency: CurrencyIdent
    figure: Decimal
    name: str = "Predicted Income"

    @classmethod
    def from_config(cls, raw: dict[str, Any]) -> "PredictedIncomeOperandBuilder":
        kind = "predicted_income"
        return cls(
            currency=str(_required(raw, "currency", kind)),
            figure=_figure(_required(raw, "figure", kind), kind),
        )

    def build(self, period: Period, today: date,
              exchange_rates: ExchangeRates) -> Optional[Operand]:
        try:
            amount = exchange_rates.new_amount(self.currency, self.figure)
        except DOMAIN_ERRORS as e:
            raise with_context(self.name, e) from e

        return Operand(
            name=self.name,
            amount=amount,
            illustration=(("Amount", amount),),
        )
