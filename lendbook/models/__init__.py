"""Domain models for loans, repayments and ledger transactions."""

from lendbook.models.enums import (
    CompoundingFrequency,
    InterestType,
    LoanStatus,
    PaymentMethod,
    Severity,
    TransactionType,
    ValuationStrategy,
)
from lendbook.models.loan import Loan, Repayment
from lendbook.models.results import (
    DashboardMetrics,
    LedgerSummary,
    LoanActivity,
    LoanCalculation,
)
from lendbook.models.transaction import Transaction

__all__ = [
    "CompoundingFrequency",
    "DashboardMetrics",
    "InterestType",
    "LedgerSummary",
    "Loan",
    "LoanActivity",
    "LoanCalculation",
    "LoanStatus",
    "PaymentMethod",
    "Repayment",
    "Severity",
    "Transaction",
    "TransactionType",
    "ValuationStrategy",
]
