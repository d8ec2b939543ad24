"""
Sinking-fund allocation for buckets.

For the active period, a bucket is asked how much should be deposited to stay
on track for its goal and how much actually was. The recommendation is a
straight-line amortization of the outstanding shortfall over the periods left
until the target date:

    recommended = max(target - max(balance_before_period, 0), 0) / periods_remaining

It is recomputed from the complete ledger on every call, so an over or under
contribution in past periods reflows into the next recommendations without
any stored running state.
"""

from datetime import date
from typing import Iterable, Optional

from ..amounts import Amount, ExchangeRates
from ..errors import (
    DuplicateTargetError,
    LedgerOrderError,
    MissingTargetError,
    OvercommitError,
    PeriodRangeError,
    PeriodRangeKind,
    with_context,
)
from ..logging.config import get_bucket_logger, log_bucket_evaluation
from ..period import PeriodPolicy
from .models import Bucket, BucketSnapshot, Deposit, DepositCancellation, LedgerLine, SetTarget

logger = get_bucket_logger(__name__)


def find_target(bucket: Bucket) -> SetTarget:
    """
    Return the bucket's unique SetTarget line.

    Raises:
        MissingTargetError: If the ledger has no target
        DuplicateTargetError: If the ledger has more than one target
    """
    targets = bucket.targets()
    if not targets:
        raise MissingTargetError("No target for bucket", bucket_name=bucket.name)
    if len(targets) > 1:
        raise DuplicateTargetError(
            f"Bucket has {len(targets)} targets, expected exactly one",
            bucket_name=bucket.name,
            target_count=len(targets),
        )
    return targets[0]


def _signed_amount(line: LedgerLine, exchange_rates: ExchangeRates) -> Optional[Amount]:
    """Contribution of a line to the balance, None for lines that move no money."""
    if isinstance(line, Deposit):
        return line.amount.to_amount(exchange_rates)
    if isinstance(line, DepositCancellation):
        return line.amount.to_amount(exchange_rates).negate()
    return None


def total_balance(bucket: Bucket, today: date, zero: Amount,
                  exchange_rates: ExchangeRates) -> Amount:
    """
    Fold every line dated up to ``today`` into the bucket balance.

    The ledger order is validated for every consecutive pair before the
    balance is updated, and the running balance must stay non-negative at
    every prefix, even if a later deposit would restore it.

    Raises:
        LedgerOrderError: If two consecutive lines are out of order
        OvercommitError: If the running balance ever goes negative
    """
    balance = zero
    previous: Optional[LedgerLine] = None

    for line in bucket.lines:
        if previous is not None and previous.date > line.date:
            logger.error(
                "Bucket ledger out of order",
                bucket_name=bucket.name,
                previous_date=previous.date.isoformat(),
                next_date=line.date.isoformat(),
            )
            raise LedgerOrderError(
                "Amount history out of order",
                previous_date=previous.date,
                next_date=line.date,
            )
        previous = line

        if line.date > today:
            continue

        change = _signed_amount(line, exchange_rates)
        if change is None:
            continue

        balance = balance.add(change)
        if balance.is_negative:
            logger.error(
                "Bucket balance went negative",
                bucket_name=bucket.name,
                line_date=line.date.isoformat(),
                balance=str(balance),
            )
            raise OvercommitError(
                "attempt to withdraw more money than the Bucket contains",
                line_date=line.date,
                balance=str(balance),
            )

    return balance


def sum_lines(lines: Iterable[LedgerLine], zero: Amount,
              exchange_rates: ExchangeRates) -> Optional[Amount]:
    """
    Sum the money moved by ``lines``.

    Returns:
        The sum, or None when no line moved money
    """
    result: Optional[Amount] = None
    for line in lines:
        change = _signed_amount(line, exchange_rates)
        if change is None:
            continue
        result = (result or zero).add(change)
    return result


def periods_remaining(policy: PeriodPolicy, today: date, target_date: date) -> int:
    """
    Number of periods left to reach the target, the current one included.

    A target date already in the past counts as due this period.
    """
    try:
        return policy.periods_between(today, target_date)
    except PeriodRangeError as e:
        if e.kind == PeriodRangeKind.END_BEFORE_START:
            logger.debug(
                "Target date already past, due this period",
                today=today.isoformat(),
                target_date=target_date.isoformat(),
            )
            return 1
        raise with_context("Could not count the periods until the target date", e) from e


def evaluate_bucket(
    bucket: Bucket,
    policy: PeriodPolicy,
    today: date,
    exchange_rates: ExchangeRates
) -> BucketSnapshot:
    """
    Compute the bucket's recommended and actual deposits for the period of ``today``.

    Args:
        bucket: Bucket ledger
        policy: Active period policy
        today: Evaluation date
        exchange_rates: Exchange rates of the computation

    Returns:
        BucketSnapshot expressed in the target's currency

    Raises:
        MissingTargetError: If the bucket has no target
        LedgerOrderError: If the ledger is out of chronological order
        OvercommitError: If the balance goes negative at any point
        PeriodRangeError: If ``today`` or the target date cannot be placed in periods
    """
    target = find_target(bucket)
    target_amount = target.amount.to_amount(exchange_rates)
    zero = target_amount.zero()

    balance = total_balance(bucket, today, zero, exchange_rates)

    try:
        current_period = policy.period_for_date(today)
    except PeriodRangeError as e:
        raise with_context("Could not compute the current period", e) from e

    before_period = sum_lines(
        (line for line in bucket.lines if line.date < current_period.start_date),
        zero, exchange_rates,
    ) or zero
    change_this_period = sum_lines(
        (line for line in bucket.lines if current_period.start_date <= line.date <= today),
        zero, exchange_rates,
    )

    remaining_periods = periods_remaining(policy, today, target.target_date)

    shortfall = target_amount.sub(before_period.maximum(zero)).maximum(zero)
    recommended = shortfall.divide(remaining_periods)

    snapshot = BucketSnapshot(
        recommended_or_actual_change=(
            change_this_period if change_this_period is not None else recommended
        ),
        current_recommended_deposit=recommended,
        current_actual_deposit=change_this_period,
        total_deposit=balance,
    )

    log_bucket_evaluation(
        logger,
        bucket.name,
        snapshot,
        remaining_periods,
        context={"period": current_period.serialize()},
    )
    return snapshot
