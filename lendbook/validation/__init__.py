"""Sanitization and validation of user input."""

from lendbook.validation.sanitize import (
    sanitize_loan_data,
    sanitize_repayment_data,
    sanitize_search_query,
    sanitize_transaction_data,
)
from lendbook.validation.validators import (
    ValidationIssue,
    ValidationReport,
    check_loan,
    check_repayment,
    check_transaction,
    validate_loan,
    validate_repayment,
    validate_transaction,
)

__all__ = [
    "ValidationIssue",
    "ValidationReport",
    "check_loan",
    "check_repayment",
    "check_transaction",
    "sanitize_loan_data",
    "sanitize_repayment_data",
    "sanitize_search_query",
    "sanitize_transaction_data",
    "validate_loan",
    "validate_repayment",
    "validate_transaction",
]
