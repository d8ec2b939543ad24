"""Unit tests for the remaining operation coordinator."""

import pytest
from datetime import date

from remaining_app.buckets import parse_bucket
from remaining_app.engine import RemainingOperation
from remaining_app.errors import (
    CurrencyNotFoundError,
    IllustrationMismatchError,
    PeriodRangeError,
)
from remaining_app.operation import (
    AccountOperandBuilder,
    BucketOperandBuilder,
    IgnoredTransactionOperandBuilder,
    Operand,
    PredictedIncomeOperandBuilder,
)
from remaining_app.period import FixedLengthPolicy, Period


def mkdate(month: int, day: int) -> date:
    return date(2023, month, day)


def account(name, currency, amounts):
    return AccountOperandBuilder.from_config({
        "name": name,
        "currency": currency,
        "amounts": [{"date": day, "amount": figure} for day, figure in amounts],
    })


def ignored(name, currency, amount, day):
    return IgnoredTransactionOperandBuilder.from_config({
        "name": name, "currency": currency, "amount": amount, "date": day,
    })


class StaticProvider:
    """Provider returning a prepared operand."""

    def __init__(self, operand):
        self.operand = operand

    def build(self, period, today, exchange_rates):
        return self.operand


@pytest.fixture
def operation(calendar_month_policy, exchange_rates):
    """
    Two accounts per currency, two buckets, four ignored transactions and one
    predicted income, on 2023-08-20 with one euro for two yens.
    """
    remaining_operation = RemainingOperation(
        calendar_month_policy, exchange_rates, today=mkdate(8, 20)
    )

    remaining_operation.add_group("Accounts", [
        account("account in euros left", "EUR",
                [(mkdate(7, 1), 1000), (mkdate(8, 2), 1500), (mkdate(8, 3), 2200)]),
        account("account in euros right", "EUR",
                [(mkdate(7, 15), 500), (mkdate(8, 2), 500), (mkdate(8, 3), 300)]),
        account("account in yen left", "JPY", [(mkdate(7, 31), 500)]),
        account("account in yen right", "JPY", [(mkdate(7, 2), 700), (mkdate(8, 15), 700)]),
    ])

    remaining_operation.add_group("Buckets", [
        BucketOperandBuilder(bucket=parse_bucket({
            "name": "Goal must commit",
            "lines": ["2023/07/01 TARG ¥200 2023/08/31", "2023/07/18 DEPO ¥150"],
        }), policy=calendar_month_policy),
        BucketOperandBuilder(bucket=parse_bucket({
            "name": "Goal already committed",
            "lines": [
                "2023/07/01 TARG ¥500 2023/08/31",
                "2023/07/18 DEPO ¥100",
                "2023/08/17 DEPO ¥100",
            ],
        }), policy=calendar_month_policy),
    ])

    remaining_operation.add_group("Ignored transactions", [
        ignored("Ignored incoming", "EUR", 200, mkdate(8, 15)),
        ignored("Ignored outgoing", "JPY", -800, mkdate(8, 14)),
        ignored("Ignored later this month", "EUR", 200, mkdate(8, 21)),
        ignored("Ignored last month", "EUR", 200, mkdate(7, 21)),
    ])

    remaining_operation.add_group("Predicted Income", [
        PredictedIncomeOperandBuilder.from_config({"currency": "JPY", "figure": 400}),
    ])

    return remaining_operation


class TestRemainingOperation:
    """End-to-end remaining computation."""

    def test_period_resolved_once(self, operation):
        assert operation.period == Period(mkdate(8, 1), mkdate(8, 31))

    def test_remaining_in_euros(self, operation, euro):
        screen = operation.execute("EUR")

        assert screen.remaining == euro("925.00")
        assert screen.period == Period(mkdate(8, 1), mkdate(8, 31))

    def test_default_target_currency(self, operation, euro):
        assert operation.execute().remaining == euro("925.00")

    def test_remaining_in_yens(self, operation, yen):
        assert operation.execute("JPY").remaining == yen("1850")

    def test_group_totals(self, operation, euro):
        screen = operation.execute("EUR")

        assert [group.name for group in screen.groups] == [
            "Accounts", "Buckets", "Ignored transactions", "Predicted Income",
        ]
        assert [group.total for group in screen.groups] == [
            euro(1000), euro(-75), euro(-200), euro(200),
        ]

    def test_accounts_group(self, operation, euro, yen):
        accounts = operation.execute("EUR").groups[0]

        assert [operand.amount for operand in accounts.operands] == [
            euro(1200), euro(-200), yen(0), yen(0),
        ]
        assert accounts.illustration_fields == (
            "Period start amount", "Period end amount", "Estimated", "Difference",
        )

    def test_buckets_group(self, operation, yen):
        buckets = operation.execute("EUR").groups[1]

        assert [operand.amount for operand in buckets.operands] == [yen(-50), yen(-100)]

    def test_ignored_transactions_group(self, operation, euro, yen):
        ignored_group = operation.execute("EUR").groups[2]

        # The transaction of last month contributes no operand
        assert [operand.name for operand in ignored_group.operands] == [
            "Ignored incoming", "Ignored outgoing", "Ignored later this month",
        ]
        assert [operand.amount for operand in ignored_group.operands] == [
            euro(200), yen(-800), euro(0),
        ]

    def test_operands_keep_their_currency(self, operation):
        """Only totals are converted to the target currency."""
        screen = operation.execute("JPY")

        assert screen.groups[0].operands[0].amount.currency.ident == "EUR"
        assert screen.groups[0].total.currency.ident == "JPY"

    def test_unknown_target_currency(self, operation):
        with pytest.raises(CurrencyNotFoundError):
            operation.execute("GBP")

    def test_to_dict(self, operation):
        result = operation.execute("EUR").to_dict()

        assert result["period"] == "2023-08"
        assert result["remaining"] == {"currency": "EUR", "figure": "925.00"}


class TestRemainingOperationErrors:
    """Any error aborts the whole computation."""

    def test_today_outside_configuration(self, exchange_rates):
        policy = FixedLengthPolicy(start_date=mkdate(9, 1), period_in_days=14)

        with pytest.raises(PeriodRangeError) as exc_info:
            RemainingOperation(policy, exchange_rates, today=mkdate(8, 20))

        assert str(exc_info.value).startswith("Failed to fetch Periods Configuration: ")

    def test_mismatched_illustrations(self, calendar_month_policy, exchange_rates, euro):
        remaining_operation = RemainingOperation(
            calendar_month_policy, exchange_rates, today=mkdate(8, 20)
        )

        with pytest.raises(IllustrationMismatchError):
            remaining_operation.add_group("Mixed", [
                StaticProvider(Operand("a", euro(1), (("Amount", euro(1)),))),
                StaticProvider(Operand("b", euro(1), (("Included", True),))),
            ])

        assert remaining_operation.groups == []

    def test_provider_error_propagates(self, calendar_month_policy, exchange_rates):
        remaining_operation = RemainingOperation(
            calendar_month_policy, exchange_rates, today=mkdate(8, 20)
        )

        with pytest.raises(PeriodRangeError, match="Account 'New account'"):
            remaining_operation.add_group("Accounts", [
                account("New account", "EUR", [(mkdate(8, 10), 100)]),
            ])

    def test_empty_operation(self, calendar_month_policy, exchange_rates, euro):
        remaining_operation = RemainingOperation(
            calendar_month_policy, exchange_rates, today=mkdate(8, 20)
        )

        screen = remaining_operation.execute("EUR")

        assert screen.remaining == euro(0)
        assert screen.groups == ()
