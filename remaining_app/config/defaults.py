"""Default configuration parameters for the remaining operation."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN


def _default_signs() -> dict[str, str]:
    return {
        "EUR": "€",
        "JPY": "¥",
    }


@dataclass(frozen=True)
class CurrencyParams:
    """Supported currencies and their display signs."""
    # Closed allow-list: identifiers outside of it are rejected
    signs: dict[str, str] = field(default_factory=_default_signs)
    default_target_currency: str = "EUR"

    @property
    def supported(self) -> list[str]:
        return sorted(self.signs)

    def ident_for_sign(self, sign: str) -> str:
        """Reverse lookup of a currency identifier from its sign."""
        for ident, currency_sign in self.signs.items():
            if currency_sign == sign:
                return ident
        raise KeyError(sign)


@dataclass(frozen=True)
class AmountParams:
    """Rounding applied to every amount figure."""
    decimal_places: int = 2
    rounding: str = ROUND_HALF_EVEN


@dataclass(frozen=True)
class PeriodParams:
    """Period policy used when the vault does not specify one."""
    default_type: str = "monthly"


@dataclass(frozen=True)
class VaultParams:
    """Vault layout."""
    config_file: str = "config.yaml"
    accounts_dir: str = "accounts"


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    currency: CurrencyParams
    amount: AmountParams
    period: PeriodParams
    vault: VaultParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        currency=CurrencyParams(),
        amount=AmountParams(),
        period=PeriodParams(),
        vault=VaultParams(),
    )
