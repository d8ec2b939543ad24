"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..amounts import parse_exchange_rate
from ..errors import ConfigurationError
from ..period import CALENDAR_MONTH, FIXED_LENGTH
from ..utils.time import parse_date
from .defaults import CurrencyParams


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates vault configuration values before they reach the engine."""

    @staticmethod
    def validate_periods_configuration(params: Any) -> list[ValidationError]:
        """Validate the periods configuration section."""
        errors = []

        if not isinstance(params, dict):
            return [ValidationError(
                field="periods_configuration",
                message="Must be a mapping",
                value=params
            )]

        # Validate type
        policy_type = params.get("type")
        if policy_type not in (FIXED_LENGTH, CALENDAR_MONTH):
            errors.append(ValidationError(
                field="type",
                message=f"Must be '{FIXED_LENGTH}' or '{CALENDAR_MONTH}'",
                value=policy_type
            ))

        if policy_type != FIXED_LENGTH:
            return errors

        # Validate period_in_days
        value = params.get("period_in_days")
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            errors.append(ValidationError(
                field="period_in_days",
                message="Must be a positive integer",
                value=value
            ))

        # Validate start_date
        value = params.get("start_date")
        try:
            parse_date(value)
        except ValueError:
            errors.append(ValidationError(
                field="start_date",
                message="Must be a date formatted YYYY-MM-DD",
                value=value
            ))

        return errors

    @staticmethod
    def validate_exchange_rates(
        pairs: Iterable[str],
        params: Optional[CurrencyParams] = None
    ) -> list[ValidationError]:
        """Validate ``CURRENCY:RATE`` pairs."""
        params = params or CurrencyParams()
        errors = []

        for text in pairs:
            try:
                ident, rate = parse_exchange_rate(text)
            except ConfigurationError as e:
                errors.append(ValidationError(
                    field="exchange_rates",
                    message=str(e),
                    value=text
                ))
                continue

            if ident not in params.signs:
                errors.append(ValidationError(
                    field="exchange_rates",
                    message=f"Unsupported currency, expected one of {', '.join(params.supported)}",
                    value=text
                ))
            elif rate <= 0:
                errors.append(ValidationError(
                    field="exchange_rates",
                    message="Rate must be a positive number",
                    value=text
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        # A null section falls back to the default policy
        if config.get("periods_configuration") is not None:
            errors.extend(
                ConfigValidator.validate_periods_configuration(config["periods_configuration"])
            )

        for key in ("buckets", "ignored_transactions"):
            if key in config and config[key] is not None and not isinstance(config[key], list):
                errors.append(ValidationError(
                    field=key,
                    message="Must be a list",
                    value=config[key]
                ))

        if "predicted_income" in config and not isinstance(config["predicted_income"], dict):
            errors.append(ValidationError(
                field="predicted_income",
                message="Must be a mapping with currency and figure",
                value=config["predicted_income"]
            ))

        return errors
