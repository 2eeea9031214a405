"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable

import pytest

from lendbook.models import (
    CompoundingFrequency,
    InterestType,
    Loan,
    PaymentMethod,
    Repayment,
    Transaction,
    TransactionType,
    ValuationStrategy,
)

AS_OF = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def as_of() -> datetime:
    """Fixed evaluation instant."""
    return AS_OF


@pytest.fixture
def make_loan() -> Callable[..., Loan]:
    """Factory for loans started 100 days before the evaluation instant."""
    counter = iter(range(1, 10_000))

    def _make(**overrides: Any) -> Loan:
        fields: dict[str, Any] = {
            "loan_id": f"loan-test-{next(counter):03d}",
            "lender_name": "Alice",
            "borrower_name": "Bob",
            "principal_amount": Decimal("1000"),
            "start_date": AS_OF - timedelta(days=100),
            "due_date": None,
            "interest_type": InterestType.NONE,
            "interest_rate": Decimal("0"),
            "compounding_frequency": None,
            "is_user_lender": True,
        }
        fields.update(overrides)
        return Loan(**fields)

    return _make


@pytest.fixture
def make_repayment() -> Callable[..., Repayment]:
    """Factory for repayments paid 10 days before the evaluation instant."""
    counter = iter(range(1, 10_000))

    def _make(loan: Loan, amount: str | Decimal, **overrides: Any) -> Repayment:
        fields: dict[str, Any] = {
            "repayment_id": f"rep-test-{next(counter):03d}",
            "loan_id": loan.loan_id,
            "payment_amount": Decimal(amount),
            "payment_date": AS_OF - timedelta(days=10),
            "payment_method": PaymentMethod.CASH,
        }
        fields.update(overrides)
        return Repayment(**fields)

    return _make


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Factory for ledger entries; amounts default to zero."""
    counter = iter(range(1, 10_000))

    def _make(
        loan: Loan,
        transaction_type: TransactionType,
        balance_after: str | Decimal,
        days_ago: int = 10,
        **overrides: Any,
    ) -> Transaction:
        fields: dict[str, Any] = {
            "transaction_id": f"tx-test-{next(counter):03d}",
            "loan_id": loan.loan_id,
            "transaction_date": AS_OF - timedelta(days=days_ago),
            "transaction_type": transaction_type,
            "particulars": transaction_type.value,
            "principal_change": Decimal("0"),
            "interest_portion": Decimal("0"),
            "paid_amount": Decimal("0"),
            "balance_after": Decimal(balance_after),
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make


@pytest.fixture
def ledger_loan(make_loan: Callable[..., Loan]) -> Loan:
    """Loan valued from its transaction ledger."""
    return make_loan(valuation_strategy=ValuationStrategy.LEDGER)


@pytest.fixture
def compound_loan(make_loan: Callable[..., Loan]) -> Loan:
    """12% monthly-compounded loan started exactly one year ago."""
    return make_loan(
        start_date=AS_OF - timedelta(days=365),
        interest_type=InterestType.COMPOUND,
        interest_rate=Decimal("12"),
        compounding_frequency=CompoundingFrequency.MONTHLY,
    )
