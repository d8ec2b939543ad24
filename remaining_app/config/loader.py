"""Vault loader: reads the budgeting configuration and ledgers from YAML files."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml

from ..amounts import ExchangeRates
from ..buckets import Bucket, parse_bucket
from ..engine import RemainingOperation
from ..errors import ConfigurationError
from ..logging.config import get_logger
from ..operation import (
    AccountOperandBuilder,
    BucketOperandBuilder,
    IgnoredTransactionOperandBuilder,
    PredictedIncomeOperandBuilder,
)
from ..period import PeriodPolicy, policy_from_config
from .defaults import DefaultConfig, get_default_config
from .validation import ConfigValidator

logger = get_logger(__name__)

PERIODS_KEY = "periods_configuration"
BUCKETS_KEY = "buckets"
IGNORED_TRANSACTIONS_KEY = "ignored_transactions"
PREDICTED_INCOME_KEY = "predicted_income"

ACCOUNT_SUFFIXES = (".yaml", ".yml", ".json")

ACCOUNTS_GROUP = "Accounts"
BUCKETS_GROUP = "Buckets"
IGNORED_TRANSACTIONS_GROUP = "Ignored transactions"
PREDICTED_INCOME_GROUP = "Predicted Income"


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read file {path}: {e}", source=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse file {path}: {e}", source=str(path)) from e


@dataclass(frozen=True)
class VaultLoader:
    """Reads vault values from a directory holding ``config.yaml`` and ``accounts/``."""

    vault_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, vault_dir: Optional[Path] = None) -> "VaultLoader":
        """Create a VaultLoader instance, defaulting to the working directory."""
        if vault_dir is None:
            vault_dir = Path.cwd()

        return cls(
            vault_dir=Path(vault_dir),
            defaults=get_default_config(),
        )

    @property
    def config_file(self) -> Path:
        return self.vault_dir / self.defaults.vault.config_file

    @property
    def accounts_dir(self) -> Path:
        return self.vault_dir / self.defaults.vault.accounts_dir

    def load_config(self) -> dict[str, Any]:
        """
        Load and validate the whole ``config.yaml`` mapping.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if not self.config_file.exists():
            raise ConfigurationError(
                f"Vault configuration not found: {self.config_file}",
                source=str(self.config_file),
            )

        config = _read_yaml(self.config_file)
        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Vault configuration must be a mapping: {self.config_file}",
                source=str(self.config_file),
            )

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{e.field}: {e.message} ({e.value!r})" for e in errors)
            raise ConfigurationError(
                f"Invalid vault configuration {self.config_file}: {details}",
                key=errors[0].field,
                source=str(self.config_file),
            )
        return config

    def load_section(
        self,
        key: str,
        required: bool = True,
        config: Optional[dict[str, Any]] = None
    ) -> Any:
        """
        Load one top-level value of ``config.yaml``.

        ``config`` is an already loaded mapping; the file is read when omitted.

        Raises:
            ConfigurationError: If a required key is missing
        """
        if config is None:
            config = self.load_config()
        if key not in config:
            if required:
                raise ConfigurationError(
                    f"Could not read {key} from vault: key not found",
                    key=key,
                    source=str(self.config_file),
                )
            return None
        return config[key]

    def load_period_policy(self, config: Optional[dict[str, Any]] = None) -> PeriodPolicy:
        raw = self.load_section(PERIODS_KEY, required=False, config=config)
        if raw is None:
            raw = {"type": self.defaults.period.default_type}
        return policy_from_config(raw)

    def load_accounts(self) -> list[AccountOperandBuilder]:
        """Load every account file of the ``accounts`` directory, sorted by file name."""
        if not self.accounts_dir.is_dir():
            raise ConfigurationError(
                f"Could not read the Accounts directory: {self.accounts_dir}",
                source=str(self.accounts_dir),
            )

        accounts = []
        for path in sorted(self.accounts_dir.iterdir()):
            if not path.is_file() or path.suffix.lower() not in ACCOUNT_SUFFIXES:
                continue
            raw = _read_yaml(path)
            try:
                accounts.append(AccountOperandBuilder.from_config(raw))
            except ConfigurationError as e:
                raise ConfigurationError(
                    f"Could not parse account for file {path}: {e}", source=str(path)
                ) from e

        logger.debug("Loaded accounts", count=len(accounts), directory=str(self.accounts_dir))
        return accounts

    def load_buckets(self, config: Optional[dict[str, Any]] = None) -> list[Bucket]:
        raw = self.load_section(BUCKETS_KEY, required=False, config=config) or []
        return [parse_bucket(item, self.defaults.currency) for item in raw]

    def load_ignored_transactions(
        self,
        config: Optional[dict[str, Any]] = None
    ) -> list[IgnoredTransactionOperandBuilder]:
        raw = self.load_section(IGNORED_TRANSACTIONS_KEY, required=False, config=config) or []
        return [IgnoredTransactionOperandBuilder.from_config(item) for item in raw]

    def load_predicted_income(
        self,
        config: Optional[dict[str, Any]] = None
    ) -> PredictedIncomeOperandBuilder:
        return PredictedIncomeOperandBuilder.from_config(
            self.load_section(PREDICTED_INCOME_KEY, config=config)
        )

    def build_operation(
        self,
        exchange_rates: ExchangeRates,
        today: Optional[date] = None,
        include_predicted_income: bool = False
    ) -> RemainingOperation:
        """
        Assemble a remaining operation from the vault.

        Groups are added in a fixed order: accounts, buckets, ignored
        transactions and, when requested, predicted income. ``config.yaml``
        is read once for all of them.
        """
        config = self.load_config()
        policy = self.load_period_policy(config)
        operation = RemainingOperation(policy, exchange_rates, today)

        operation.add_group(ACCOUNTS_GROUP, self.load_accounts())
        operation.add_group(
            BUCKETS_GROUP,
            [BucketOperandBuilder(bucket=bucket, policy=policy) for bucket in self.load_buckets(config)],
        )
        operation.add_group(IGNORED_TRANSACTIONS_GROUP, self.load_ignored_transactions(config))
        if include_predicted_income:
            operation.add_group(PREDICTED_INCOME_GROUP, [self.load_predicted_income(config)])

        logger.info(
            "Built remaining operation from vault",
            vault=str(self.vault_dir),
            groups=[group.name for group in operation.groups],
        )
        return operation
