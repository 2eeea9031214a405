"""Configuration management for lendbook."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from lendbook.exceptions import ConfigurationError


@dataclass
class ValidationConfig:
    """Limits applied by the loan and repayment validators."""

    max_principal: Decimal = Decimal("1000000000")
    overpayment_tolerance: Decimal = Decimal("1.1")
    large_amount_threshold: Decimal = Decimal("100000")
    max_interest_rate: Decimal = Decimal("100")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict of strings."""
        return {
            "max_principal": str(self.max_principal),
            "overpayment_tolerance": str(self.overpayment_tolerance),
            "large_amount_threshold": str(self.large_amount_threshold),
            "max_interest_rate": str(self.max_interest_rate),
        }


@dataclass
class DashboardConfig:
    """Due-date windows used to bucket loans on the dashboard."""

    due_soon_days: int = 7
    due_later_days: int = 30

    def __post_init__(self) -> None:
        if self.due_soon_days < 0 or self.due_later_days < self.due_soon_days:
            raise ConfigurationError(
                f"Invalid due windows: soon={self.due_soon_days}, later={self.due_later_days}"
            )


@dataclass
class LendbookConfig:
    """Main configuration for lendbook."""

    validation: ValidationConfig = field(default_factory=ValidationConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    currency: str = "USD"  # display label only, never converted
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LendbookConfig":
        """Create config from environment variables."""
        import os

        validation = ValidationConfig(
            max_principal=_decimal_env("LENDBOOK_MAX_PRINCIPAL", "1000000000"),
            overpayment_tolerance=_decimal_env("LENDBOOK_OVERPAYMENT_TOLERANCE", "1.1"),
            large_amount_threshold=_decimal_env("LENDBOOK_LARGE_AMOUNT", "100000"),
        )

        dashboard = DashboardConfig(
            due_soon_days=_int_env("LENDBOOK_DUE_SOON_DAYS", "7"),
            due_later_days=_int_env("LENDBOOK_DUE_LATER_DAYS", "30"),
        )

        log_format = os.getenv("LENDBOOK_LOG_FORMAT", "standard")
        if log_format not in ("standard", "json"):
            raise ConfigurationError(f"Unknown log format: {log_format}")

        return cls(
            validation=validation,
            dashboard=dashboard,
            currency=os.getenv("LENDBOOK_CURRENCY", "USD").upper(),
            seed=_int_env("LENDBOOK_SEED", None) if os.getenv("LENDBOOK_SEED") else None,
            log_level=os.getenv("LENDBOOK_LOG_LEVEL", "INFO"),
            log_format=log_format,
        )


def _decimal_env(name: str, default: str) -> Decimal:
    import os

    raw = os.getenv(name, default)
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if not value.is_finite() or value <= 0:
        raise ConfigurationError(f"{name} must be a positive number, got {raw!r}")
    return value


def _int_env(name: str, default: str | None) -> int:
    import os

    raw = os.getenv(name, default)
    try:
        return int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
