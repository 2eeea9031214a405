"""Interest, valuation, status and portfolio calculations."""

from lendbook.calculations.aggregation import aggregate, recent_activity
from lendbook.calculations.interest import (
    calculate_compound_interest,
    calculate_loan_interest,
    calculate_simple_interest,
    compute_interest,
    days_between,
)
from lendbook.calculations.ledger import (
    build_transaction,
    evaluate_loan_from_ledger,
    interest_up_to,
)
from lendbook.calculations.status import resolve_status, status_transition
from lendbook.calculations.valuation import (
    current_outstanding,
    evaluate_loan,
    repayment_progress,
)

__all__ = [
    "aggregate",
    "build_transaction",
    "calculate_compound_interest",
    "calculate_loan_interest",
    "calculate_simple_interest",
    "compute_interest",
    "current_outstanding",
    "days_between",
    "evaluate_loan",
    "evaluate_loan_from_ledger",
    "interest_up_to",
    "recent_activity",
    "repayment_progress",
    "resolve_status",
    "status_transition",
]
