"""Tests for dashboard aggregation and recent activity."""

from datetime import datetime, timedelta
from decimal import Decimal

from lendbook.calculations.aggregation import aggregate, recent_activity
from lendbook.config import DashboardConfig
from lendbook.models import TransactionType


class TestAggregate:
    """Tests for portfolio metrics."""

    def test_one_loan_per_bucket(self, make_loan, as_of: datetime) -> None:
        overdue = make_loan(due_date=as_of - timedelta(days=2))
        due_soon = make_loan(due_date=as_of + timedelta(days=3))
        due_later = make_loan(due_date=as_of + timedelta(days=20))

        metrics = aggregate([overdue, due_soon, due_later], {}, as_of)

        assert metrics.overdue_loans == [overdue]
        assert metrics.loans_due_7_days == [due_soon]
        assert metrics.loans_due_30_days == [due_later]
        assert metrics.total_lent == Decimal("3000")
        assert metrics.total_borrowed == 0
        assert metrics.net_balance == Decimal("3000")
        assert metrics.as_of == as_of

    def test_buckets_disjoint_for_recently_overdue(self, make_loan, as_of: datetime) -> None:
        loan = make_loan(due_date=as_of - timedelta(hours=12))

        metrics = aggregate([loan], {}, as_of)

        assert metrics.overdue_loans == [loan]
        assert metrics.loans_due_7_days == []
        assert metrics.loans_due_30_days == []

    def test_closed_loan_ignored(self, make_loan, make_repayment, as_of: datetime) -> None:
        closed = make_loan(due_date=as_of - timedelta(days=5))
        borrowed = make_loan(is_user_lender=False, due_date=as_of + timedelta(days=1))

        metrics = aggregate(
            [closed, borrowed],
            {closed.loan_id: [make_repayment(closed, "1000")]},
            as_of,
        )

        assert metrics.total_lent == 0
        assert metrics.total_borrowed == Decimal("1000")
        assert metrics.net_balance == Decimal("-1000")
        assert metrics.overdue_loans == []
        assert metrics.loans_due_7_days == [borrowed]

    def test_outstanding_not_principal_is_summed(self, make_loan, make_repayment, as_of: datetime) -> None:
        loan = make_loan()

        metrics = aggregate([loan], {loan.loan_id: [make_repayment(loan, "400")]}, as_of)

        assert metrics.total_lent == Decimal("600")

    def test_unbucketed_loans_still_counted(self, make_loan, as_of: datetime) -> None:
        open_ended = make_loan(due_date=None)
        far_off = make_loan(due_date=as_of + timedelta(days=45))

        metrics = aggregate([open_ended, far_off], {}, as_of)

        assert metrics.total_lent == Decimal("2000")
        assert metrics.overdue_loans == []
        assert metrics.loans_due_7_days == []
        assert metrics.loans_due_30_days == []

    def test_ledger_loans_use_transactions(self, ledger_loan, make_transaction, as_of: datetime) -> None:
        tx = make_transaction(ledger_loan, TransactionType.PAYMENT, "150", paid_amount=Decimal("850"))

        metrics = aggregate([ledger_loan], {}, as_of, transactions_by_loan={ledger_loan.loan_id: [tx]})

        assert metrics.total_lent == Decimal("150")

    def test_custom_windows(self, make_loan, as_of: datetime) -> None:
        loan = make_loan(due_date=as_of + timedelta(days=10))

        metrics = aggregate([loan], {}, as_of, windows=DashboardConfig(due_soon_days=14, due_later_days=60))

        assert metrics.loans_due_7_days == [loan]

    def test_empty_portfolio(self, as_of: datetime) -> None:
        metrics = aggregate([], {}, as_of)

        assert metrics.total_lent == 0
        assert metrics.total_borrowed == 0
        assert metrics.net_balance == 0


class TestRecentActivity:
    """Tests for per-loan latest activity."""

    def test_latest_repayment_chosen(self, make_loan, make_repayment, as_of: datetime) -> None:
        loan = make_loan()
        older = make_repayment(loan, "100", payment_date=as_of - timedelta(days=20))
        newer = make_repayment(loan, "100", payment_date=as_of - timedelta(days=2))

        [activity] = recent_activity([loan], {loan.loan_id: [newer, older]})

        assert activity.repayment is newer
        assert activity.activity_date == newer.payment_date

    def test_falls_back_to_creation(self, make_loan, as_of: datetime) -> None:
        loan = make_loan(created_at=as_of - timedelta(days=50))

        [activity] = recent_activity([loan], {})

        assert activity.repayment is None
        assert activity.activity_date == loan.created_at

    def test_keeps_input_order(self, make_loan, make_repayment, as_of: datetime) -> None:
        quiet = make_loan(created_at=as_of - timedelta(days=300))
        busy = make_loan(created_at=as_of - timedelta(days=200))
        repayments = {busy.loan_id: [make_repayment(busy, "10", payment_date=as_of)]}

        activities = recent_activity([quiet, busy], repayments)

        assert [a.loan for a in activities] == [quiet, busy]
