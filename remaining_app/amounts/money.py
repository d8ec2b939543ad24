"""
Currency-safe amount arithmetic.

Amounts are immutable values. Their figure is rounded to two decimal places
(half to even) on construction and after every operation. Binary operations
take the left operand's currency as authoritative: the right operand is
converted into it first, so a chain of folds always ends up in the currency
of the accumulator.

Exchange rates express how many units of a currency one reference unit is
worth, e.g. ``EUR: 1`` and ``JPY: 160`` mean one euro buys 160 yen.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from ..config.defaults import AmountParams, CurrencyParams
from ..errors import ConfigurationError, CurrencyNotFoundError, UnsupportedCurrencyError

Figure = Decimal
CurrencyIdent = str
FigureLike = Union[Decimal, int, str, float]

_AMOUNT_PARAMS = AmountParams()
_QUANTUM = Decimal(1).scaleb(-_AMOUNT_PARAMS.decimal_places)


def to_figure(value: FigureLike) -> Figure:
    """
    Convert a raw number to a Decimal without binary float artefacts.

    Raises:
        ValueError: If the value is not a number
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        figure = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a number: {value!r}") from e
    if not figure.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return figure


def round_figure(value: FigureLike) -> Figure:
    """Round to two decimal places, half to even."""
    return to_figure(value).quantize(_QUANTUM, rounding=_AMOUNT_PARAMS.rounding)


@dataclass(frozen=True)
class Currency:
    """A supported currency with its rate against the reference unit."""
    ident: CurrencyIdent
    rate: Figure
    sign: str


@dataclass(frozen=True)
class Amount:
    """A figure in a given currency. Build through ``ExchangeRates.new_amount``."""
    currency: Currency
    figure: Figure

    def __post_init__(self):
        object.__setattr__(self, "figure", round_figure(self.figure))

    def convert(self, target: Currency) -> "Amount":
        """Express this amount in ``target``."""
        if target == self.currency:
            return self
        exchange_rate = target.rate / self.currency.rate
        return Amount(currency=target, figure=self.figure * exchange_rate)

    def add(self, other: "Amount") -> "Amount":
        converted = other.convert(self.currency)
        return Amount(currency=self.currency, figure=self.figure + converted.figure)

    def sub(self, other: "Amount") -> "Amount":
        converted = other.convert(self.currency)
        return Amount(currency=self.currency, figure=self.figure - converted.figure)

    def maximum(self, other: "Amount") -> "Amount":
        converted = other.convert(self.currency)
        return Amount(currency=self.currency, figure=max(self.figure, converted.figure))

    def divide(self, count: int) -> "Amount":
        """
        Split the amount evenly over ``count`` periods.

        Raises:
            ValueError: If ``count`` is lower than one
        """
        if count < 1:
            raise ValueError(f"Cannot divide an amount over {count} periods")
        return Amount(currency=self.currency, figure=self.figure / Decimal(count))

    def negate(self) -> "Amount":
        return Amount(currency=self.currency, figure=-self.figure)

    def zero(self) -> "Amount":
        """Zero in the same currency."""
        return Amount(currency=self.currency, figure=Decimal(0))

    @property
    def is_negative(self) -> bool:
        return self.figure < 0

    def __add__(self, other: "Amount") -> "Amount":
        return self.add(other)

    def __sub__(self, other: "Amount") -> "Amount":
        return self.sub(other)

    def __neg__(self) -> "Amount":
        return self.negate()

    def __str__(self) -> str:
        return f"{self.currency.sign}{self.figure}"


class ExchangeRates:
    """Immutable table of the currencies available for one computation."""

    def __init__(self, currencies: Mapping[CurrencyIdent, Currency]):
        self._currencies = MappingProxyType(dict(currencies))

    @classmethod
    def build(
        cls,
        pairs: Iterable[tuple[CurrencyIdent, FigureLike]],
        params: Optional[CurrencyParams] = None
    ) -> "ExchangeRates":
        """
        Build exchange rates from ``(currency_ident, rate)`` pairs.

        Raises:
            UnsupportedCurrencyError: If an identifier is not supported
            ConfigurationError: If a rate is not a positive number
        """
        params = params or CurrencyParams()
        currencies: dict[CurrencyIdent, Currency] = {}

        for ident, raw_rate in pairs:
            if ident not in params.signs:
                raise UnsupportedCurrencyError(
                    f"Unsupported currency: {ident}. "
                    f"We support only {', '.join(params.supported)} for now.",
                    currency_ident=ident,
                    supported=params.supported,
                )
            try:
                rate = to_figure(raw_rate)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid exchange rate for {ident}: {e}", key="exchange_rates"
                ) from e
            if rate <= 0:
                raise ConfigurationError(
                    f"Exchange rate for {ident} must be positive, got {rate}",
                    key="exchange_rates",
                )
            currencies[ident] = Currency(ident=ident, rate=rate, sign=params.signs[ident])

        return cls(currencies)

    @property
    def idents(self) -> list[CurrencyIdent]:
        return list(self._currencies)

    def get_currency(self, ident: CurrencyIdent) -> Currency:
        try:
            return self._currencies[ident]
        except KeyError:
            raise CurrencyNotFoundError(
                f"Could not find currency ident: {ident}", currency_ident=ident
            ) from None

    def new_amount(self, ident: CurrencyIdent, figure: FigureLike) -> Amount:
        return Amount(currency=self.get_currency(ident), figure=to_figure(figure))

    def zero(self, ident: CurrencyIdent) -> Amount:
        return self.new_amount(ident, Decimal(0))

    def convert(self, amount: Amount, ident: CurrencyIdent) -> Amount:
        """Express ``amount`` in the currency named ``ident``."""
        return amount.convert(self.get_currency(ident))

    def __repr__(self) -> str:
        rates = ", ".join(f"{c.ident}={c.rate}" for c in self._currencies.values())
        return f"ExchangeRates({rates})"


def parse_exchange_rate(text: str) -> tuple[CurrencyIdent, Figure]:
    """
    Parse a ``CURRENCY:RATE`` pair such as ``EUR:0.24561``.

    Raises:
        ConfigurationError: If the text does not follow the format
    """
    parts = text.split(":")
    if len(parts) == 2 and parts[0].strip():
        try:
            return parts[0].strip(), to_figure(parts[1].strip())
        except ValueError:
            pass

    raise ConfigurationError(
        f"Could not decode exchange rate {text}: "
        "Format is {CURRENCY_NAME}:{RATE}, eg. EUR:0.24561",
        key="exchange_rates",
    )
