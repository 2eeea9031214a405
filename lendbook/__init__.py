"""lendbook - financial engine for informal loans between individuals.

Interest accrual, loan valuation from repayments or a transaction ledger,
status derivation, input validation and dashboard aggregation. All
functions are pure over their inputs; "now" is always passed in or read
from a clock.
"""

from lendbook.calculations import (
    aggregate,
    compute_interest,
    current_outstanding,
    evaluate_loan,
    evaluate_loan_from_ledger,
    repayment_progress,
    resolve_status,
)
from lendbook.clock import FixedClock, SystemClock
from lendbook.config import LendbookConfig
from lendbook.store import LoanBook
from lendbook.validation import (
    check_loan,
    check_repayment,
    validate_loan,
    validate_repayment,
)

__version__ = "0.1.0"

__all__ = [
    "FixedClock",
    "LendbookConfig",
    "LoanBook",
    "SystemClock",
    "aggregate",
    "check_loan",
    "check_repayment",
    "compute_interest",
    "current_outstanding",
    "evaluate_loan",
    "evaluate_loan_from_ledger",
    "repayment_progress",
    "resolve_status",
    "validate_loan",
    "validate_repayment",
]
