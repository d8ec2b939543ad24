"""Unit tests for configuration management."""

import pytest
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import yaml

from remaining_app.amounts import ExchangeRates
from remaining_app.config.defaults import get_default_config
from remaining_app.config.loader import VaultLoader, _read_yaml
from remaining_app.config.validation import ConfigValidator
from remaining_app.errors import ConfigurationError
from remaining_app.period import CalendarMonthPolicy, FixedLengthPolicy

VAULT_CONFIG = {
    "periods_configuration": {"type": "monthly"},
    "buckets": [
        {
            "name": "Goal must commit",
            "lines": ["2023/07/01 TARG ¥200 2023/08/31", "2023/07/18 DEPO ¥150"],
        },
    ],
    "ignored_transactions": [
        {"name": "Ignored incoming", "currency": "EUR", "amount": 200, "date": "2023-08-15"},
    ],
    "predicted_income": {"currency": "JPY", "figure": 400},
}


def write_vault(root: Path, config, accounts=None) -> Path:
    """Write ``config.yaml`` and account files under ``root``."""
    (root / "config.yaml").write_text(yaml.safe_dump(config, allow_unicode=True), encoding="utf-8")
    accounts_dir = root / "accounts"
    accounts_dir.mkdir()
    for file_name, content in (accounts or {}).items():
        (accounts_dir / file_name).write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def vault(tmp_path) -> Path:
    return write_vault(tmp_path, VAULT_CONFIG, {
        "main.yaml": (
            "name: Main\n"
            "currency: EUR\n"
            "amounts:\n"
            "  - {date: 2023-07-01, amount: 1000}\n"
            "  - {date: 2023-08-03, amount: 2200}\n"
        ),
        "savings.json": (
            '{"name": "Savings", "currency": "JPY",'
            ' "amounts": [{"date": "2023-07-02", "amount": 700}]}'
        ),
        "notes.txt": "not an account",
    })


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.currency.supported == ["EUR", "JPY"]
        assert config.currency.ident_for_sign("¥") == "JPY"
        assert config.amount.decimal_places == 2
        assert config.period.default_type == "monthly"
        assert config.vault.config_file == "config.yaml"


class TestVaultLoader:
    """Test suite for the vault loader."""

    def test_loader_creation(self) -> None:
        """Test that VaultLoader defaults to the working directory."""
        loader = VaultLoader.create()
        assert loader.vault_dir == Path.cwd()

    def test_missing_config_file(self, tmp_path) -> None:
        loader = VaultLoader.create(tmp_path)

        with pytest.raises(ConfigurationError, match="Vault configuration not found"):
            loader.load_config()

    def test_invalid_yaml(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text("buckets: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Could not parse file"):
            VaultLoader.create(tmp_path).load_config()

    def test_missing_required_key(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {"buckets": []}))

        with pytest.raises(ConfigurationError) as exc_info:
            loader.load_predicted_income()

        assert str(exc_info.value).startswith("Could not read predicted_income from vault")
        assert exc_info.value.key == "predicted_income"

    def test_string_period_length_rejected(self, tmp_path) -> None:
        """A quoted length is rejected when the vault is loaded."""
        loader = VaultLoader.create(write_vault(tmp_path, {
            "periods_configuration": {
                "type": "fixed_length",
                "start_date": "2023-04-11",
                "period_in_days": "7",
            },
        }))

        message = "period_in_days: Must be a positive integer"
        with pytest.raises(ConfigurationError, match=message) as exc_info:
            loader.load_config()

        assert exc_info.value.key == "period_in_days"
        assert exc_info.value.source == str(loader.config_file)

        with pytest.raises(ConfigurationError, match="period_in_days"):
            loader.build_operation(ExchangeRates.build([("EUR", 1)]), today=date(2023, 8, 20))

    def test_wrong_section_shape_rejected(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {"buckets": {"name": "Holidays"}}))

        with pytest.raises(ConfigurationError, match="buckets: Must be a list"):
            loader.load_buckets()

    def test_null_periods_configuration_uses_default(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {"periods_configuration": None}))
        assert isinstance(loader.load_period_policy(), CalendarMonthPolicy)

    def test_default_period_policy(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {}))
        assert isinstance(loader.load_period_policy(), CalendarMonthPolicy)

    def test_fixed_length_period_policy(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {
            "periods_configuration": {
                "type": "fixed_length",
                "start_date": "2023-04-11",
                "period_in_days": 14,
            },
        }))

        assert loader.load_period_policy() == FixedLengthPolicy(date(2023, 4, 11), 14)

    def test_load_accounts(self, vault) -> None:
        accounts = VaultLoader.create(vault).load_accounts()

        assert [a.name for a in accounts] == ["Main", "Savings"]
        assert accounts[0].amounts[0] == (date(2023, 7, 1), Decimal(1000))

    def test_missing_accounts_dir(self, tmp_path) -> None:
        (tmp_path / "config.yaml").write_text("{}", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Accounts directory"):
            VaultLoader.create(tmp_path).load_accounts()

    def test_invalid_account_names_the_file(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {}, {"broken.yaml": "currency: EUR\n"}))

        with pytest.raises(ConfigurationError, match="broken.yaml"):
            loader.load_accounts()

    def test_load_buckets(self, vault) -> None:
        buckets = VaultLoader.create(vault).load_buckets()

        assert [b.name for b in buckets] == ["Goal must commit"]
        assert len(buckets[0].lines) == 2

    def test_optional_sections_default_to_empty(self, tmp_path) -> None:
        loader = VaultLoader.create(write_vault(tmp_path, {}))

        assert loader.load_buckets() == []
        assert loader.load_ignored_transactions() == []

    def test_build_operation(self, vault) -> None:
        rates = ExchangeRates.build([("EUR", 1), ("JPY", 2)])
        operation = VaultLoader.create(vault).build_operation(
            rates, today=date(2023, 8, 20), include_predicted_income=True
        )

        screen = operation.execute("EUR")

        assert [g.name for g in screen.groups] == [
            "Accounts", "Buckets", "Ignored transactions", "Predicted Income",
        ]
        # 1200 + 0 - 25 + 200 + 200
        assert screen.remaining == rates.new_amount("EUR", "1575")

    def test_build_operation_reads_config_once(self, vault) -> None:
        rates = ExchangeRates.build([("EUR", 1), ("JPY", 2)])
        loader = VaultLoader.create(vault)

        with patch("remaining_app.config.loader._read_yaml", wraps=_read_yaml) as read:
            loader.build_operation(rates, today=date(2023, 8, 20), include_predicted_income=True)

        config_reads = [c for c in read.call_args_list if c.args[0] == loader.config_file]
        assert len(config_reads) == 1

    def test_build_operation_without_predicted_income(self, vault) -> None:
        rates = ExchangeRates.build([("EUR", 1), ("JPY", 2)])
        operation = VaultLoader.create(vault).build_operation(rates, today=date(2023, 8, 20))

        assert [g.name for g in operation.groups] == [
            "Accounts", "Buckets", "Ignored transactions",
        ]


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_monthly(self) -> None:
        assert ConfigValidator.validate_periods_configuration({"type": "monthly"}) == []

    def test_valid_fixed_length(self) -> None:
        errors = ConfigValidator.validate_periods_configuration({
            "type": "fixed_length", "start_date": "2023-04-11", "period_in_days": 14,
        })
        assert errors == []

    def test_invalid_fixed_length(self) -> None:
        errors = ConfigValidator.validate_periods_configuration({
            "type": "fixed_length", "start_date": "11/04/2023", "period_in_days": 0,
        })

        assert {error.field for error in errors} == {"period_in_days", "start_date"}

    def test_unknown_type(self) -> None:
        errors = ConfigValidator.validate_periods_configuration({"type": "weekly"})

        assert len(errors) == 1
        assert errors[0].field == "type"
        assert errors[0].value == "weekly"

    def test_exchange_rates(self) -> None:
        errors = ConfigValidator.validate_exchange_rates(["EUR:1", "JPY:abc", "USD:1", "EUR:0"])

        assert [error.value for error in errors] == ["JPY:abc", "USD:1", "EUR:0"]

    def test_validate_config(self) -> None:
        assert ConfigValidator.validate_config(VAULT_CONFIG) == []

    @pytest.mark.parametrize("value", ["7", True, 7.5, -1])
    def test_period_length_must_be_an_integer(self, value) -> None:
        errors = ConfigValidator.validate_periods_configuration({
            "type": "fixed_length", "start_date": "2023-04-11", "period_in_days": value,
        })

        assert [error.field for error in errors] == ["period_in_days"]

    def test_validate_config_null_periods(self) -> None:
        assert ConfigValidator.validate_config({"periods_configuration": None}) == []

    def test_validate_config_wrong_shapes(self) -> None:
        errors = ConfigValidator.validate_config({
            "periods_configuration": "monthly",
            "buckets": {"name": "not a list"},
            "predicted_income": 400,
        })

        assert [error.field for error in errors] == [
            "periods_configuration", "buckets", "predicted_income",
        ]
