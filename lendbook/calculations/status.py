"""Loan lifecycle status derived from outstanding balance and due date."""

from datetime import date, datetime
from decimal import Decimal

from lendbook.calculations.interest import as_datetime, days_between
from lendbook.clock import resolve_now
from lendbook.models.enums import LoanStatus
from lendbook.models.loan import Loan


def resolve_status(
    loan: Loan,
    current_outstanding: Decimal,
    as_of: datetime | None = None,
) -> LoanStatus:
    """Determine a loan's status.

    A settled loan is closed whatever its due date. An unsettled loan
    without a due date stays active; with one, it is overdue once the
    evaluation instant is strictly after the due date.
    """
    if current_outstanding <= 0:
        return LoanStatus.CLOSED

    if loan.due_date is None:
        return LoanStatus.ACTIVE

    if resolve_now(as_of) > as_datetime(loan.due_date):
        return LoanStatus.OVERDUE

    return LoanStatus.ACTIVE


def status_transition(
    loan: Loan,
    current_outstanding: Decimal,
    as_of: datetime | None = None,
    reopen: bool = False,
) -> LoanStatus | None:
    """Return the new status if it differs from the stored one, else None.

    A closed loan stays closed unless ``reopen`` is set. Only an edit to
    the loan's terms or to its records may set it; interest that keeps
    accruing after payoff never reopens a loan by itself.
    """
    if loan.status == LoanStatus.CLOSED and not reopen:
        return None
    new_status = resolve_status(loan, current_outstanding, as_of)
    if new_status == loan.status:
        return None
    return new_status


def days_until_due(due_date: date | None, as_of: datetime) -> int | None:
    """Whole days from ``as_of`` until the due date; None when open-ended."""
    if due_date is None:
        return None
    return days_between(as_of, due_date)


def is_overdue(loan: Loan, as_of: datetime) -> bool:
    """Whether the due date has passed (outstanding balance not considered)."""
    return loan.due_date is not None and as_of > as_datetime(loan.due_date)


def is_due_within_days(due_date: date | None, days: int, as_of: datetime) -> bool:
    """Whether the due date falls within the next ``days`` whole days."""
    remaining = days_until_due(due_date, as_of)
    if remaining is None:
        return False
    return 0 <= remaining <= days
