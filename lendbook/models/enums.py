"""Enumeration types for loan domain entities."""

from enum import Enum


class InterestType(str, Enum):
    NONE = "none"
    SIMPLE = "simple"
    COMPOUND = "compound"


class CompoundingFrequency(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def periods_per_year(self) -> int:
        """Number of compounding periods in a year."""
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    CompoundingFrequency.DAILY: 365,
    CompoundingFrequency.MONTHLY: 12,
    CompoundingFrequency.QUARTERLY: 4,
    CompoundingFrequency.YEARLY: 1,
}


class LoanStatus(str, Enum):
    ACTIVE = "active"
    OVERDUE = "overdue"
    CLOSED = "closed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    UPI = "upi"
    CHECK = "check"
    OTHER = "other"


class TransactionType(str, Enum):
    PAYMENT = "payment"
    PRINCIPAL_INCREASE = "principal_increase"
    PRINCIPAL_DECREASE = "principal_decrease"
    INTEREST_ACCRUAL = "interest_accrual"


class ValuationStrategy(str, Enum):
    """Which record model a loan is valued against for its whole lifetime."""

    FLAT_REPAYMENT = "flat_repayment"
    LEDGER = "ledger"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
