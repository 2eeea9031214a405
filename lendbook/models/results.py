"""Derived, never-persisted results of loan evaluation."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from lendbook.models.loan import Loan, Repayment


@dataclass(frozen=True)
class LoanCalculation:
    """Snapshot of what is owed on a loan at one instant.

    Interest accrues with wall-clock time, so a calculation is only valid
    for ``as_of`` and must not be cached across decisions.
    """

    principal: Decimal
    interest_amount: Decimal
    total_amount_due: Decimal
    current_outstanding: Decimal
    total_repaid: Decimal
    as_of: datetime


@dataclass(frozen=True)
class LedgerSummary:
    """Valuation of a loan from its transaction ledger."""

    current_principal: Decimal
    current_outstanding: Decimal
    total_interest_accrued: Decimal
    total_paid: Decimal
    principal_outstanding: Decimal
    interest_outstanding: Decimal


@dataclass
class DashboardMetrics:
    """Portfolio-wide totals and due-date buckets."""

    total_lent: Decimal
    total_borrowed: Decimal
    net_balance: Decimal
    overdue_loans: list[Loan] = field(default_factory=list)
    loans_due_7_days: list[Loan] = field(default_factory=list)
    loans_due_30_days: list[Loan] = field(default_factory=list)
    as_of: datetime | None = None


@dataclass(frozen=True)
class LoanActivity:
    """Most recent thing that happened on a loan."""

    loan: Loan
    activity_date: datetime | None
    repayment: Repayment | None = None
