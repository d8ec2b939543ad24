"""
Remaining operation coordinator.

Orchestrates the remaining-money computation for the active period: resolves
the period once, asks every operand provider for its contribution, validates
the groups and folds every operand into a single figure.
"""

from datetime import date
from typing import Iterable, Optional

import structlog

from .amounts import CurrencyIdent, ExchangeRates
from .config.defaults import get_default_config
from .errors import IllustrationMismatchError, PeriodRangeError, with_context
from .logging.config import get_operation_logger
from .operation.models import (
    Group,
    Operand,
    OperandProvider,
    RemainingOperationScreen,
)
from .period import Period, PeriodPolicy
from .utils.time import today as resolve_today

logger = structlog.get_logger(__name__)
operation_logger = get_operation_logger(__name__)


class RemainingOperation:
    """
    Coordinator for one remaining-money computation.

    Manages the pipeline:
    Period → Operand providers → Groups → Remaining amount
    """

    def __init__(
        self,
        policy: PeriodPolicy,
        exchange_rates: ExchangeRates,
        today: Optional[date] = None
    ) -> None:
        """
        Resolve the active period for ``today``.

        Raises:
            PeriodRangeError: If ``today`` is outside of the periods configuration
        """
        self.policy = policy
        self.exchange_rates = exchange_rates
        self.today = resolve_today(today)
        self.groups: list[Group] = []

        try:
            self.period: Period = policy.period_for_date(self.today)
        except PeriodRangeError as e:
            raise with_context("Failed to fetch Periods Configuration", e) from e

        operation_logger.info(
            "Remaining operation initialized",
            today=self.today.isoformat(),
            period=self.period.serialize(),
            currencies=exchange_rates.idents,
        )

    def add_group(self, name: str, providers: Iterable[OperandProvider]) -> Group:
        """
        Build every provider of a group for the active period.

        Providers returning None contribute nothing. The first error aborts
        the whole group.

        Raises:
            IllustrationMismatchError: If operands expose different fields
        """
        operands: list[Operand] = []
        for provider in providers:
            operand = provider.build(self.period, self.today, self.exchange_rates)
            if operand is not None:
                operands.append(operand)

        try:
            group = Group.new(name, operands)
        except IllustrationMismatchError as e:
            operation_logger.error("Group validation failed", group=name, error=str(e))
            raise

        self.groups.append(group)
        logger.debug("Added group", group=name, operands=len(group.operands))
        return group

    def execute(
        self,
        target_currency: Optional[CurrencyIdent] = None
    ) -> RemainingOperationScreen:
        """
        Fold every operand into the remaining amount in ``target_currency``.

        Without an explicit currency the default target currency is used.

        Raises:
            CurrencyNotFoundError: If the target currency has no exchange rate
        """
        if target_currency is None:
            target_currency = get_default_config().currency.default_target_currency
        zero = self.exchange_rates.zero(target_currency)

        screen_groups = tuple(group.to_screen_group(zero) for group in self.groups)

        remaining = zero
        for group in self.groups:
            for operand in group.operands:
                remaining = remaining.add(operand.amount)

        operation_logger.info(
            "Remaining operation computed",
            period=self.period.serialize(),
            target_currency=target_currency,
            remaining=str(remaining),
        )

        return RemainingOperationScreen(
            period=self.period,
            groups=screen_groups,
            remaining=remaining,
        )
