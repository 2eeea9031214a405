"""Portfolio roll-ups for the dashboard."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from lendbook.calculations.interest import ZERO, as_datetime
from lendbook.calculations.status import is_due_within_days, is_overdue
from lendbook.calculations.valuation import current_outstanding
from lendbook.clock import resolve_now
from lendbook.config import DashboardConfig
from lendbook.models.loan import Loan, Repayment
from lendbook.models.results import DashboardMetrics, LoanActivity
from lendbook.models.transaction import Transaction

logger = logging.getLogger(__name__)


def aggregate(
    loans: Iterable[Loan],
    repayments_by_loan: Mapping[str, Sequence[Repayment]],
    as_of: datetime | None = None,
    transactions_by_loan: Mapping[str, Sequence[Transaction]] | None = None,
    windows: DashboardConfig | None = None,
) -> DashboardMetrics:
    """Roll loans up into dashboard metrics.

    Only loans with a positive outstanding balance count. Their balance is
    added to ``total_lent`` when the user is the lender and to
    ``total_borrowed`` otherwise. Each such loan lands in at most one
    due-date bucket, checked in order: overdue, due within the short
    window, due within the long window.

    Parameters
    ----------
    loans : Iterable[Loan]
        The whole portfolio.
    repayments_by_loan : Mapping[str, Sequence[Repayment]]
        Repayments keyed by loan id; loans without an entry have none.
    as_of : datetime | None
        Evaluation instant; the system clock when omitted.
    transactions_by_loan : Mapping[str, Sequence[Transaction]] | None
        Ledger entries keyed by loan id, used by ledger-valued loans.
    windows : DashboardConfig | None
        Bucket windows in days (7 and 30 by default).

    Returns
    -------
    DashboardMetrics
        Totals, net balance and the three disjoint buckets.
    """
    now = resolve_now(as_of)
    windows = windows or DashboardConfig()
    transactions_by_loan = transactions_by_loan or {}

    total_lent = ZERO
    total_borrowed = ZERO
    overdue: list[Loan] = []
    due_soon: list[Loan] = []
    due_later: list[Loan] = []

    for loan in loans:
        outstanding = current_outstanding(
            loan,
            repayments_by_loan.get(loan.loan_id, ()),
            transactions_by_loan.get(loan.loan_id, ()),
            now,
        )
        if outstanding <= 0:
            continue

        if loan.is_user_lender:
            total_lent += outstanding
        else:
            total_borrowed += outstanding

        if is_overdue(loan, now):
            overdue.append(loan)
        elif is_due_within_days(loan.due_date, windows.due_soon_days, now):
            due_soon.append(loan)
        elif is_due_within_days(loan.due_date, windows.due_later_days, now):
            due_later.append(loan)

    logger.debug(
        "Aggregated portfolio: lent=%s borrowed=%s overdue=%d soon=%d later=%d",
        total_lent,
        total_borrowed,
        len(overdue),
        len(due_soon),
        len(due_later),
    )

    return DashboardMetrics(
        total_lent=total_lent,
        total_borrowed=total_borrowed,
        net_balance=total_lent - total_borrowed,
        overdue_loans=overdue,
        loans_due_7_days=due_soon,
        loans_due_30_days=due_later,
        as_of=now,
    )


def recent_activity(
    loans: Iterable[Loan],
    repayments_by_loan: Mapping[str, Sequence[Repayment]],
) -> list[LoanActivity]:
    """Latest repayment of each loan, or its creation when it has none.

    The result follows the order of ``loans``; sorting by activity date is
    left to the caller.
    """
    activities = []
    for loan in loans:
        repayments = repayments_by_loan.get(loan.loan_id, ())
        if repayments:
            latest = max(repayments, key=lambda r: as_datetime(r.payment_date))
            activities.append(LoanActivity(loan, latest.payment_date, latest))
        else:
            activities.append(LoanActivity(loan, loan.created_at))
    return activities
