"""
Parsers converting vault bucket definitions into ledger models.

Two line formats are accepted. The compact text form::

    "2023/07/01 TARG ¥200 2023/08/31"
    "2023/07/18 DEPO ¥150"
    "2023/08/02 CANC ¥50"

and the mapping form::

    {"date": "2023-07-18", "action": "deposit", "amount": {"currency": "JPY", "figure": 150}}
"""

from typing import Any, Optional

from ..amounts import to_figure
from ..config.defaults import CurrencyParams
from ..errors import ConfigurationError
from ..utils.time import parse_date
from .models import Bucket, Deposit, DepositCancellation, LedgerLine, RawAmount, SetTarget

DEPOSIT_CODE = "DEPO"
CANCELLATION_CODE = "CANC"
TARGET_CODE = "TARG"

DEPOSIT_ACTION = "deposit"
CANCELLATION_ACTION = "deposit_cancellation"
TARGET_ACTION = "set_target"


class LedgerParseError(ConfigurationError):
    """Raised when a bucket ledger line cannot be decoded."""
    pass


def parse_signed_amount(token: str, params: Optional[CurrencyParams] = None) -> RawAmount:
    """
    Parse ``¥200`` or ``€12.50`` into a raw amount.

    Raises:
        LedgerParseError: If the sign is unknown or the figure is invalid
    """
    params = params or CurrencyParams()
    try:
        ident = params.ident_for_sign(token[:1])
    except KeyError:
        raise LedgerParseError(
            f"Unknown currency sign in amount {token!r}, "
            f"expected one of {' '.join(params.signs.values())}",
            key="buckets",
        ) from None

    try:
        return RawAmount(currency=ident, figure=to_figure(token[1:]))
    except ValueError as e:
        raise LedgerParseError(f"Invalid amount {token!r}: {e}", key="buckets") from e


def parse_raw_amount(raw: Any, params: Optional[CurrencyParams] = None) -> RawAmount:
    """Parse an amount written either as ``{currency, figure}`` or as ``¥200``."""
    if isinstance(raw, str):
        return parse_signed_amount(raw.strip(), params)
    if isinstance(raw, dict):
        try:
            return RawAmount(currency=str(raw["currency"]), figure=to_figure(raw["figure"]))
        except KeyError as e:
            raise LedgerParseError(f"Amount is missing {e.args[0]}", key="buckets") from e
        except ValueError as e:
            raise LedgerParseError(f"Invalid amount figure: {e}", key="buckets") from e

    raise LedgerParseError(f"Cannot read an amount from {raw!r}", key="buckets")


def _parse_text_line(raw: str, params: Optional[CurrencyParams]) -> LedgerLine:
    tokens = raw.split()
    if len(tokens) < 3:
        raise LedgerParseError(f"Ledger line too short: {raw!r}", key="buckets")

    line_date = parse_date(tokens[0])
    code = tokens[1].upper()
    amount = parse_signed_amount(tokens[2], params)

    if code == TARGET_CODE:
        if len(tokens) != 4:
            raise LedgerParseError(f"Target line needs a target date: {raw!r}", key="buckets")
        return SetTarget(date=line_date, amount=amount, target_date=parse_date(tokens[3]))

    if len(tokens) != 3:
        raise LedgerParseError(f"Unexpected trailing values in ledger line: {raw!r}", key="buckets")
    if code == DEPOSIT_CODE:
        return Deposit(date=line_date, amount=amount)
    if code == CANCELLATION_CODE:
        return DepositCancellation(date=line_date, amount=amount)

    raise LedgerParseError(
        f"Unknown ledger action {tokens[1]!r}, "
        f"expected {DEPOSIT_CODE}, {CANCELLATION_CODE} or {TARGET_CODE}",
        key="buckets",
    )


def _parse_mapping_line(raw: dict[str, Any], params: Optional[CurrencyParams]) -> LedgerLine:
    try:
        line_date = parse_date(raw["date"])
        action = str(raw["action"]).lower()
        amount = parse_raw_amount(raw["amount"], params)
    except KeyError as e:
        raise LedgerParseError(f"Ledger line is missing {e.args[0]}", key="buckets") from e

    if action == DEPOSIT_ACTION:
        return Deposit(date=line_date, amount=amount)
    if action == CANCELLATION_ACTION:
        return DepositCancellation(date=line_date, amount=amount)
    if action == TARGET_ACTION:
        if "target_date" not in raw:
            raise LedgerParseError("Target line is missing target_date", key="buckets")
        return SetTarget(date=line_date, amount=amount, target_date=parse_date(raw["target_date"]))

    raise LedgerParseError(
        f"Unknown ledger action {raw['action']!r}, "
        f"expected {DEPOSIT_ACTION}, {CANCELLATION_ACTION} or {TARGET_ACTION}",
        key="buckets",
    )


def parse_ledger_line(raw: Any, params: Optional[CurrencyParams] = None) -> LedgerLine:
    """
    Parse one ledger line from either vault format.

    Raises:
        LedgerParseError: If the line cannot be decoded
    """
    try:
        if isinstance(raw, str):
            return _parse_text_line(raw, params)
        if isinstance(raw, dict):
            return _parse_mapping_line(raw, params)
    except ValueError as e:
        # Date parsing failures
        raise LedgerParseError(f"Invalid ledger line {raw!r}: {e}", key="buckets") from e

    raise LedgerParseError(f"Cannot read a ledger line from {raw!r}", key="buckets")


def parse_bucket(raw: dict[str, Any], params: Optional[CurrencyParams] = None) -> Bucket:
    """
    Parse a ``{name, lines}`` bucket definition.

    Lines keep the order they were written in; ordering is validated when the
    bucket is evaluated.
    """
    if not isinstance(raw, dict) or "name" not in raw:
        raise LedgerParseError(f"Bucket definition needs a name: {raw!r}", key="buckets")

    name = str(raw["name"])
    try:
        lines = tuple(parse_ledger_line(line, params) for line in raw.get("lines") or [])
    except LedgerParseError as e:
        raise LedgerParseError(f"Bucket '{name}': {e}", key="buckets") from e

    return Bucket(name=name, lines=lines)
