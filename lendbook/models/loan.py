"""Loan and repayment models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from lendbook.models.enums import (
    CompoundingFrequency,
    InterestType,
    LoanStatus,
    PaymentMethod,
    ValuationStrategy,
)


@dataclass
class Loan:
    """A single lending agreement between the user and a counterparty."""

    loan_id: str
    lender_name: str
    borrower_name: str
    principal_amount: Decimal
    start_date: datetime
    due_date: datetime | None  # None for open-ended loans
    interest_type: InterestType = InterestType.NONE
    interest_rate: Decimal = Decimal("0")  # Annual percent (5 for 5%)
    compounding_frequency: CompoundingFrequency | None = None
    is_user_lender: bool = True
    status: LoanStatus = LoanStatus.ACTIVE  # Derived, see calculations.status
    valuation_strategy: ValuationStrategy = ValuationStrategy.FLAT_REPAYMENT
    notes: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def counterparty_name(self) -> str:
        """Name of the other party from the user's point of view."""
        return self.borrower_name if self.is_user_lender else self.lender_name


@dataclass
class Repayment:
    """A payment against a loan's flat running balance."""

    repayment_id: str
    loan_id: str
    payment_amount: Decimal
    payment_date: datetime
    payment_method: PaymentMethod
    transaction_reference: str = ""
    notes: str = ""
    created_at: datetime | None = None
