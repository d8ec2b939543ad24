"""
Data models for the remaining operation.

Operands are the individual contributions to the remaining figure of the
active period. They are gathered in named groups whose operands all expose
the same illustration fields, so that a presentation layer can render each
group as one table.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Protocol, Union

from ..amounts import Amount, ExchangeRates
from ..errors import IllustrationMismatchError
from ..period import Period
from ..utils.time import format_date

# None stands for an amount that does not exist yet, e.g. no deposit this period
IllustrationValue = Union[Amount, bool, date, None]
Illustration = tuple[tuple[str, IllustrationValue], ...]


@dataclass(frozen=True)
class Operand:
    """One contribution to the remaining figure."""
    name: str
    amount: Amount
    illustration: Illustration = ()

    @property
    def illustration_fields(self) -> list[str]:
        return [label for label, _ in self.illustration]


class OperandProvider(Protocol):
    """Anything able to contribute zero or one operand for a period."""

    def build(self, period: Period, today: date,
              exchange_rates: ExchangeRates) -> Optional[Operand]:
        ...


@dataclass
class Group:
    """Named operands sharing the same illustration fields."""
    name: str
    operands: list[Operand] = field(default_factory=list)
    illustration_fields: Optional[list[str]] = None

    @classmethod
    def new(cls, name: str, operands: list[Operand]) -> "Group":
        group = cls(name=name)
        for operand in operands:
            group.add_operand(operand)
        return group

    def add_operand(self, operand: Operand) -> None:
        """
        Add an operand, checking its illustration fields against the group.

        Raises:
            IllustrationMismatchError: If the fields differ from the group's
        """
        field_names = operand.illustration_fields
        if self.illustration_fields is None:
            self.illustration_fields = field_names
        elif field_names != self.illustration_fields:
            raise IllustrationMismatchError(
                f"Adding an operand ({operand.name!r}) whose fields ({field_names}) "
                f"does not match that of the rest of the operand in this group "
                f"({self.illustration_fields})",
                operand_name=operand.name,
                operand_fields=field_names,
                group_fields=list(self.illustration_fields),
            )
        self.operands.append(operand)

    def total(self, zero: Amount) -> Amount:
        """Sum of the operand amounts, in the currency of ``zero``."""
        result = zero
        for operand in self.operands:
            result = result.add(operand.amount)
        return result

    def to_screen_group(self, zero: Amount) -> "RemainingOperationScreenGroup":
        return RemainingOperationScreenGroup(
            name=self.name,
            operands=tuple(self.operands),
            illustration_fields=tuple(self.illustration_fields or ()),
            total=self.total(zero),
        )


def _illustration_value_to_json(value: IllustrationValue) -> Any:
    if isinstance(value, Amount):
        return {"currency": value.currency.ident, "figure": str(value.figure)}
    if isinstance(value, date):
        return format_date(value)
    return value


@dataclass(frozen=True)
class RemainingOperationScreenGroup:
    """A group as handed over to presentation."""
    name: str
    operands: tuple[Operand, ...]
    illustration_fields: tuple[str, ...]
    total: Amount

    @property
    def empty(self) -> bool:
        return not self.operands


@dataclass(frozen=True)
class RemainingOperationScreen:
    """Result of a remaining operation."""
    period: Period
    groups: tuple[RemainingOperationScreenGroup, ...]
    remaining: Amount

    def to_dict(self) -> dict[str, Any]:
        """Plain structure for JSON renderers."""
        return {
            "period": self.period.serialize(),
            "groups": [
                {
                    "name": group.name,
                    "illustration_fields": list(group.illustration_fields),
                    "total": _illustration_value_to_json(group.total),
                    "operands": [
                        {
                            "name": operand.name,
                            "amount": _illustration_value_to_json(operand.amount),
                            "illustration": [
                                [label, _illustration_value_to_json(value)]
                                for label, value in operand.illustration
                            ],
                        }
                        for operand in group.operands
                    ],
                }
                for group in self.groups
            ],
            "remaining": _illustration_value_to_json(self.remaining),
        }
