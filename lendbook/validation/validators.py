"""Business validation of loan, repayment and ledger entry input.

Validators never raise. They collect every problem into a
``ValidationReport`` so a form can show all of them at once. Errors block
submission; warnings (an unusually large principal, a payment slightly
above the outstanding balance) only ask the user to confirm.

Raw form mappings go through the matching sanitizer first, so markup-only
names count as blank and out-of-range rates are clamped. Typed records are
checked as they are.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from lendbook.calculations.interest import as_datetime, to_decimal
from lendbook.config import ValidationConfig
from lendbook.models.enums import (
    CompoundingFrequency,
    InterestType,
    PaymentMethod,
    Severity,
    TransactionType,
)
from lendbook.models.loan import Loan
from lendbook.validation.sanitize import (
    sanitize_date,
    sanitize_loan_data,
    sanitize_repayment_data,
    sanitize_transaction_data,
)

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in a candidate record."""

    field: str
    message: str
    severity: Severity = Severity.ERROR


@dataclass
class ValidationReport:
    """All issues found in one candidate record."""

    issues: list[ValidationIssue] = field(default_factory=list)

    def error(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message, Severity.ERROR))

    def warn(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message, Severity.WARNING))

    @property
    def errors(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        """True when there are no errors; warnings may remain."""
        return not self.errors

    @property
    def needs_confirmation(self) -> bool:
        return self.is_valid and bool(self.warnings)


def _prepared(
    candidate: Any,
    sanitizer: Callable[[Mapping[str, Any]], dict[str, Any]],
) -> Mapping[str, Any]:
    """Typed records are checked as they are; raw forms are sanitized first."""
    if is_dataclass(candidate) and not isinstance(candidate, type):
        return {f.name: getattr(candidate, f.name) for f in fields(candidate)}
    return sanitizer(candidate)


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _amount(value: Any) -> Decimal | None:
    """Decimal from user input, or None when missing or not a finite number."""
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        number = to_decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return number if number.is_finite() else None


def _choice(enum_cls: type[E], value: Any) -> E | None:
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _options(enum_cls: type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


def check_loan(candidate: Any, rules: ValidationConfig | None = None) -> ValidationReport:
    """Validate a loan candidate (mapping or ``Loan``).

    Parameters
    ----------
    candidate : Any
        Raw form data, sanitized before checking, or a ``Loan``.
    rules : ValidationConfig | None
        Limits; defaults apply when omitted.

    Returns
    -------
    ValidationReport
        Errors and warnings, empty when the candidate is acceptable.
    """
    rules = rules or ValidationConfig()
    data = _prepared(candidate, sanitize_loan_data)
    report = ValidationReport()

    if not _text(data.get("lender_name")):
        report.error("lender_name", "Lender name is required")

    if not _text(data.get("borrower_name")):
        report.error("borrower_name", "Borrower name is required")

    principal = _amount(data.get("principal_amount"))
    if principal is None or principal <= 0:
        report.error("principal_amount", "Principal amount must be greater than 0")
    elif principal > rules.max_principal:
        report.error("principal_amount", "Principal amount exceeds maximum allowed value")
    elif principal > rules.large_amount_threshold:
        report.warn(
            "principal_amount",
            f"Principal amount {principal} is unusually large, please confirm",
        )

    start_date = sanitize_date(data.get("start_date"))
    due_date = sanitize_date(data.get("due_date"))
    if start_date is None:
        report.error("start_date", "Start date is required")
    elif due_date is not None and due_date < start_date:
        report.error("due_date", "Due date must be on or after start date")

    raw_type = data.get("interest_type")
    interest_type = InterestType.NONE if raw_type in (None, "") else _choice(InterestType, raw_type)
    rate = _amount(data.get("interest_rate"))
    if interest_type is None:
        report.error("interest_type", f"Interest type must be one of: {_options(InterestType)}")
    elif interest_type != InterestType.NONE:
        if rate is None or rate < 0 or rate > rules.max_interest_rate:
            report.error("interest_rate", "Interest rate must be between 0 and 100")
    elif rate:
        report.warn("interest_rate", "Interest rate is ignored for loans without interest")

    if interest_type == InterestType.COMPOUND:
        if _choice(CompoundingFrequency, data.get("compounding_frequency")) is None:
            report.error(
                "compounding_frequency",
                "Compounding frequency is required for compound interest",
            )

    return report


def check_repayment(
    candidate: Any,
    loan: Loan,
    current_outstanding: Decimal,
    rules: ValidationConfig | None = None,
) -> ValidationReport:
    """Validate a repayment candidate against its loan.

    A payment above the outstanding balance but within the overpayment
    tolerance is a warning; beyond the tolerance it is an error.
    """
    current_outstanding = to_decimal(current_outstanding)
    rules = rules or ValidationConfig()
    data = _prepared(candidate, sanitize_repayment_data)
    report = ValidationReport()

    amount = _amount(data.get("payment_amount"))
    if amount is None or amount <= 0:
        report.error("payment_amount", "Payment amount must be greater than 0")
    elif amount > current_outstanding * rules.overpayment_tolerance:
        report.error(
            "payment_amount",
            "Payment amount significantly exceeds outstanding balance",
        )
    elif amount > current_outstanding:
        report.warn(
            "payment_amount",
            f"Payment amount ({amount}) exceeds outstanding balance ({current_outstanding})",
        )

    payment_date = sanitize_date(data.get("payment_date"))
    if payment_date is None:
        report.error("payment_date", "Payment date is required")
    elif payment_date < as_datetime(loan.start_date):
        report.error("payment_date", "Payment date cannot be before loan start date")

    if _choice(PaymentMethod, data.get("payment_method")) is None:
        report.error("payment_method", "Payment method is required")

    return report


def check_transaction(candidate: Any, loan: Loan) -> ValidationReport:
    """Validate a ledger entry form before ``build_transaction`` runs."""
    data = _prepared(candidate, sanitize_transaction_data)
    report = ValidationReport()

    transaction_type = _choice(TransactionType, data.get("transaction_type"))
    if transaction_type is None:
        report.error(
            "transaction_type",
            f"Transaction type must be one of: {_options(TransactionType)}",
        )

    amount = _amount(data.get("amount"))
    if amount is None or amount <= 0:
        report.error("amount", "Amount must be greater than 0")

    interest_portion = _amount(data.get("interest_portion"))
    if interest_portion is not None:
        if interest_portion < 0:
            report.error("interest_portion", "Interest portion cannot be negative")
        elif (
            transaction_type == TransactionType.PAYMENT
            and amount is not None
            and interest_portion > amount
        ):
            report.error("interest_portion", "Interest portion cannot exceed the paid amount")

    if not _text(data.get("particulars")):
        report.error("particulars", "Particulars are required")

    transaction_date = sanitize_date(data.get("transaction_date"))
    if transaction_date is None:
        report.error("transaction_date", "Transaction date is required")
    elif transaction_date < as_datetime(loan.start_date):
        report.error("transaction_date", "Transaction date cannot be before loan start date")

    return report


def validate_loan(candidate: Any, rules: ValidationConfig | None = None) -> list[str]:
    """Error messages for a loan candidate; empty when valid."""
    return check_loan(candidate, rules).errors


def validate_repayment(
    candidate: Any,
    loan: Loan,
    current_outstanding: Decimal,
    rules: ValidationConfig | None = None,
) -> list[str]:
    """Error messages for a repayment candidate; empty when valid."""
    return check_repayment(candidate, loan, current_outstanding, rules).errors


def validate_transaction(candidate: Any, loan: Loan) -> list[str]:
    """Error messages for a ledger entry candidate; empty when valid."""
    return check_transaction(candidate, loan).errors
