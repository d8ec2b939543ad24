"""Currency-safe amounts and exchange rates"""

from .money import (
    Amount,
    Currency,
    CurrencyIdent,
    ExchangeRates,
    Figure,
    parse_exchange_rate,
    round_figure,
    to_figure,
)

__all__ = [
    "Amount",
    "Currency",
    "CurrencyIdent",
    "ExchangeRates",
    "Figure",
    "parse_exchange_rate",
    "round_figure",
    "to_figure",
]
