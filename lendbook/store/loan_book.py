"""In-memory loan book with referential integrity and status upkeep."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from lendbook.calculations.aggregation import aggregate, recent_activity
from lendbook.calculations.ledger import build_transaction, evaluate_loan_from_ledger
from lendbook.calculations.status import status_transition
from lendbook.calculations.valuation import current_outstanding, evaluate_loan
from lendbook.clock import Clock, SystemClock
from lendbook.config import DashboardConfig
from lendbook.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from lendbook.models.enums import LoanStatus, TransactionType, ValuationStrategy
from lendbook.models.loan import Loan, Repayment
from lendbook.models.results import (
    DashboardMetrics,
    LedgerSummary,
    LoanActivity,
    LoanCalculation,
)
from lendbook.models.transaction import Transaction

logger = logging.getLogger(__name__)

EDITABLE_LOAN_FIELDS = frozenset({
    "lender_name",
    "borrower_name",
    "principal_amount",
    "start_date",
    "due_date",
    "interest_type",
    "interest_rate",
    "compounding_frequency",
    "is_user_lender",
    "notes",
    "tags",
})
# Edits to these may reopen a closed loan; names, notes and tags may not
LOAN_TERM_FIELDS = frozenset({
    "principal_amount",
    "start_date",
    "due_date",
    "interest_type",
    "interest_rate",
    "compounding_frequency",
})
EDITABLE_REPAYMENT_FIELDS = frozenset({
    "payment_amount",
    "payment_date",
    "payment_method",
    "transaction_reference",
    "notes",
})
EDITABLE_TRANSACTION_FIELDS = frozenset({
    "transaction_date",
    "particulars",
    "interest_portion",
    "paid_amount",
    "balance_after",
    "payment_method",
    "notes",
})


def _apply_changes(record: Any, changes: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidEntityStateError(
            f"Cannot edit {', '.join(sorted(unknown))} on {type(record).__name__}"
        )
    for name, value in changes.items():
        setattr(record, name, value)


@dataclass
class LoanBook:
    """Loans with their repayments or ledger entries.

    Every mutation that can change what is owed (a repayment or ledger
    entry written or edited, a term edit) re-derives the loan's status from
    the freshly updated records and stores it only when it changed.
    """

    clock: Clock = field(default_factory=SystemClock)

    loans: dict[str, Loan] = field(default_factory=dict)
    repayments: dict[str, Repayment] = field(default_factory=dict)
    transactions: dict[str, Transaction] = field(default_factory=dict)

    # Relationship indexes
    _loan_repayments: dict[str, list[str]] = field(default_factory=dict)
    _loan_transactions: dict[str, list[str]] = field(default_factory=dict)

    # Loans
    def add_loan(self, loan: Loan) -> LoanStatus | None:
        """Add a loan and derive its initial status."""
        if loan.loan_id in self.loans:
            raise InvalidEntityStateError(f"Loan {loan.loan_id} already exists")

        if loan.created_at is None:
            loan.created_at = self.clock.now()
        self.loans[loan.loan_id] = loan
        self._loan_repayments[loan.loan_id] = []
        self._loan_transactions[loan.loan_id] = []
        return self.refresh_status(loan.loan_id, reopen=True)

    def update_loan(self, loan_id: str, **changes: Any) -> LoanStatus | None:
        """Edit a loan, then re-derive the status.

        Only a change to the loan terms can reopen a closed loan.
        """
        loan = self.get_loan(loan_id)
        _apply_changes(loan, changes, EDITABLE_LOAN_FIELDS)
        loan.updated_at = self.clock.now()
        return self.refresh_status(loan_id, reopen=not LOAN_TERM_FIELDS.isdisjoint(changes))

    def delete_loan(self, loan_id: str) -> None:
        """Remove a loan along with all of its repayments and ledger entries."""
        self.get_loan(loan_id)
        for repayment_id in self._loan_repayments.pop(loan_id, []):
            del self.repayments[repayment_id]
        for transaction_id in self._loan_transactions.pop(loan_id, []):
            del self.transactions[transaction_id]
        del self.loans[loan_id]
        logger.info("Deleted loan %s", loan_id)

    def get_loan(self, loan_id: str) -> Loan:
        """Get a loan by id."""
        try:
            return self.loans[loan_id]
        except KeyError:
            raise EntityNotFoundError(f"Loan {loan_id} not found") from None

    # Repayments
    def add_repayment(self, repayment: Repayment) -> LoanStatus | None:
        """Record a repayment and return the loan's new status if it changed."""
        loan = self._owning_loan(repayment.loan_id, ValuationStrategy.FLAT_REPAYMENT)

        if repayment.created_at is None:
            repayment.created_at = self.clock.now()
        self.repayments[repayment.repayment_id] = repayment
        self._loan_repayments[loan.loan_id].append(repayment.repayment_id)
        return self.refresh_status(loan.loan_id, reopen=True)

    def update_repayment(self, repayment_id: str, **changes: Any) -> LoanStatus | None:
        """Correct a repayment's amount, date or method."""
        repayment = self._get_repayment(repayment_id)
        _apply_changes(repayment, changes, EDITABLE_REPAYMENT_FIELDS)
        return self.refresh_status(repayment.loan_id, reopen=True)

    def delete_repayment(self, repayment_id: str) -> LoanStatus | None:
        """Remove a repayment; the loan may reopen."""
        repayment = self._get_repayment(repayment_id)
        self._loan_repayments[repayment.loan_id].remove(repayment_id)
        del self.repayments[repayment_id]
        return self.refresh_status(repayment.loan_id, reopen=True)

    def get_loan_repayments(self, loan_id: str) -> list[Repayment]:
        """Get all repayments for a loan."""
        ids = self._loan_repayments.get(loan_id, [])
        return [self.repayments[rid] for rid in ids]

    # Ledger entries
    def add_transaction(self, transaction: Transaction) -> LoanStatus | None:
        """Store a ledger entry as written, trusting its ``balance_after``."""
        loan = self._owning_loan(transaction.loan_id, ValuationStrategy.LEDGER)

        if transaction.created_at is None:
            transaction.created_at = self.clock.now()
        self.transactions[transaction.transaction_id] = transaction
        self._loan_transactions[loan.loan_id].append(transaction.transaction_id)
        return self.refresh_status(loan.loan_id, reopen=True)

    def record_transaction(
        self,
        loan_id: str,
        transaction_type: TransactionType,
        amount: Decimal,
        particulars: str,
        transaction_date: datetime | None = None,
        **kwargs: Any,
    ) -> Transaction:
        """Build the next ledger entry from the current balance and store it."""
        loan = self._owning_loan(loan_id, ValuationStrategy.LEDGER)
        transaction = build_transaction(
            loan,
            self.get_loan_transactions(loan_id),
            transaction_type,
            amount,
            transaction_date or self.clock.now(),
            particulars,
            **kwargs,
        )
        self.add_transaction(transaction)
        return transaction

    def update_transaction(self, transaction_id: str, **changes: Any) -> LoanStatus | None:
        """Correct a ledger entry."""
        transaction = self._get_transaction(transaction_id)
        _apply_changes(transaction, changes, EDITABLE_TRANSACTION_FIELDS)
        return self.refresh_status(transaction.loan_id, reopen=True)

    def get_loan_transactions(self, loan_id: str) -> list[Transaction]:
        """Get all ledger entries for a loan, in insertion order."""
        ids = self._loan_transactions.get(loan_id, [])
        return [self.transactions[tid] for tid in ids]

    # Valuation
    def get_loan_calculation(self, loan_id: str) -> LoanCalculation | None:
        """Flat valuation of a loan now, or None for an unknown loan."""
        loan = self.loans.get(loan_id)
        if loan is None:
            return None
        return evaluate_loan(loan, self.get_loan_repayments(loan_id), self.clock.now())

    def get_ledger_summary(self, loan_id: str) -> LedgerSummary | None:
        """Ledger valuation of a loan, or None for an unknown loan."""
        loan = self.loans.get(loan_id)
        if loan is None:
            return None
        return evaluate_loan_from_ledger(loan, self.get_loan_transactions(loan_id))

    def outstanding(self, loan_id: str) -> Decimal:
        """Outstanding balance under the loan's valuation strategy."""
        loan = self.get_loan(loan_id)
        return current_outstanding(
            loan,
            self.get_loan_repayments(loan_id),
            self.get_loan_transactions(loan_id),
            self.clock.now(),
        )

    def refresh_status(self, loan_id: str, reopen: bool = False) -> LoanStatus | None:
        """Re-derive a loan's status; store and return it only when it changed.

        A closed loan is left closed unless ``reopen`` is set by the
        mutation that triggered the refresh.
        """
        loan = self.get_loan(loan_id)
        now = self.clock.now()
        balance = self.outstanding(loan_id)
        new_status = status_transition(loan, balance, now, reopen=reopen)
        if new_status is None:
            return None

        old_status = loan.status
        loan.status = new_status
        loan.updated_at = now
        logger.info(
            "Loan %s status %s -> %s",
            loan_id,
            old_status.value,
            new_status.value,
            extra={"extra": {"loan_id": loan_id, "outstanding": balance}},
        )
        return new_status

    def refresh_all(self) -> dict[str, LoanStatus]:
        """Re-derive every status, e.g. after the clock crossed a due date."""
        changed = {}
        for loan_id in list(self.loans):
            new_status = self.refresh_status(loan_id)
            if new_status is not None:
                changed[loan_id] = new_status
        return changed

    # Dashboard
    def dashboard(self, windows: DashboardConfig | None = None) -> DashboardMetrics:
        """Portfolio metrics as of the book's clock."""
        return aggregate(
            self.loans.values(),
            {lid: self.get_loan_repayments(lid) for lid in self.loans},
            self.clock.now(),
            transactions_by_loan={lid: self.get_loan_transactions(lid) for lid in self.loans},
            windows=windows,
        )

    def recent_activity(self, limit: int | None = None) -> list[LoanActivity]:
        """Loans ordered by their latest activity, newest first."""
        activities = recent_activity(
            self.loans.values(),
            {lid: self.get_loan_repayments(lid) for lid in self.loans},
        )
        activities.sort(key=lambda a: a.activity_date or datetime.min, reverse=True)
        return activities[:limit] if limit is not None else activities

    def summary(self) -> dict[str, int]:
        """Return summary counts of all records."""
        return {
            "loans": len(self.loans),
            "repayments": len(self.repayments),
            "transactions": len(self.transactions),
        }

    def _owning_loan(self, loan_id: str, strategy: ValuationStrategy) -> Loan:
        loan = self.loans.get(loan_id)
        if loan is None:
            raise ReferentialIntegrityError(f"Loan {loan_id} not found")
        if loan.valuation_strategy != strategy:
            logger.warning(
                "Rejected %s record for loan %s valued by %s",
                strategy.value,
                loan_id,
                loan.valuation_strategy.value,
            )
            raise InvalidEntityStateError(
                f"Loan {loan_id} is valued by {loan.valuation_strategy.value}, "
                f"not {strategy.value}"
            )
        return loan

    def _get_repayment(self, repayment_id: str) -> Repayment:
        try:
            return self.repayments[repayment_id]
        except KeyError:
            raise EntityNotFoundError(f"Repayment {repayment_id} not found") from None

    def _get_transaction(self, transaction_id: str) -> Transaction:
        try:
            return self.transactions[transaction_id]
        except KeyError:
            raise EntityNotFoundError(f"Transaction {transaction_id} not found") from None
