"""Loan valuation from a transaction ledger.

Loans on the ledger strategy record every change to what is owed as a
``Transaction``: payments, principal top-ups and reductions, and interest
accruals. The outstanding balance is whatever the latest entry stored in
``balance_after`` when it was written; it is never recomputed from the
history. Principal, accrued interest and payments are replayed
independently from the same entries.
"""

import logging
import uuid
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal

from lendbook.calculations.interest import ZERO, as_datetime, compute_interest, to_decimal
from lendbook.models.enums import PaymentMethod, TransactionType
from lendbook.models.loan import Loan
from lendbook.models.results import LedgerSummary
from lendbook.models.transaction import Transaction

logger = logging.getLogger(__name__)


def chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Entries oldest first; entries sharing a date keep their input order."""
    return sorted(transactions, key=lambda tx: as_datetime(tx.transaction_date))


def calculate_outstanding_balance(loan: Loan, transactions: Sequence[Transaction]) -> Decimal:
    """Balance stored on the latest entry, or the principal for an empty ledger."""
    if not transactions:
        return loan.principal_amount
    latest = chronological(transactions)[-1]
    return max(ZERO, latest.balance_after)


def calculate_current_principal(loan: Loan, transactions: Sequence[Transaction]) -> Decimal:
    """Replay principal increases and decreases over the original principal."""
    principal = loan.principal_amount
    for tx in chronological(transactions):
        if tx.transaction_type == TransactionType.PRINCIPAL_INCREASE:
            principal += tx.principal_change
        elif tx.transaction_type == TransactionType.PRINCIPAL_DECREASE:
            principal -= tx.principal_change
    return max(ZERO, principal)


def calculate_total_interest_accrued(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of accrual entries only; interest inside payments is excluded."""
    return sum(
        (tx.interest_portion for tx in transactions
         if tx.transaction_type == TransactionType.INTEREST_ACCRUAL),
        ZERO,
    )


def calculate_total_paid(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of cash paid on payment entries."""
    return sum(
        (tx.paid_amount for tx in transactions
         if tx.transaction_type == TransactionType.PAYMENT),
        ZERO,
    )


def evaluate_loan_from_ledger(loan: Loan, transactions: Sequence[Transaction]) -> LedgerSummary:
    """Summarise a ledger-valued loan.

    Parameters
    ----------
    loan : Loan
        The loan the entries belong to.
    transactions : Sequence[Transaction]
        All ledger entries of the loan, in any order.

    Returns
    -------
    LedgerSummary
        Current principal, outstanding balance, accrued interest, total
        paid, and the split of what remains between principal and interest.
    """
    current_principal = calculate_current_principal(loan, transactions)
    total_interest_accrued = calculate_total_interest_accrued(transactions)
    total_paid = calculate_total_paid(transactions)
    outstanding = calculate_outstanding_balance(loan, transactions)

    total_due = current_principal + total_interest_accrued
    principal_outstanding = max(ZERO, current_principal - (total_paid - total_interest_accrued))
    interest_outstanding = max(ZERO, total_due - total_paid)

    return LedgerSummary(
        current_principal=current_principal,
        current_outstanding=outstanding,
        total_interest_accrued=total_interest_accrued,
        total_paid=total_paid,
        principal_outstanding=principal_outstanding,
        interest_outstanding=interest_outstanding,
    )


def interest_up_to(loan: Loan, current_principal: Decimal, as_of: datetime) -> Decimal:
    """Interest on the current principal from the loan start to ``as_of``.

    Used to propose the amount of an ``interest_accrual`` entry.
    """
    return compute_interest(
        current_principal,
        loan.interest_rate,
        loan.interest_type,
        loan.start_date,
        as_of,
        loan.compounding_frequency,
    )


def build_transaction(
    loan: Loan,
    transactions: Sequence[Transaction],
    transaction_type: TransactionType,
    amount: Decimal,
    transaction_date: datetime,
    particulars: str,
    interest_portion: Decimal = ZERO,
    payment_method: PaymentMethod | None = None,
    notes: str = "",
    transaction_id: str | None = None,
) -> Transaction:
    """Create the next ledger entry with its ``balance_after`` snapshot.

    The new balance starts from the ledger's current outstanding balance:
    payments and principal decreases lower it (never below zero), principal
    increases and interest accruals raise it.

    Parameters
    ----------
    loan : Loan
        Loan the entry is written against.
    transactions : Sequence[Transaction]
        The loan's existing entries.
    transaction_type : TransactionType
        Kind of entry.
    amount : Decimal
        Cash amount for payments and principal changes, accrued amount for
        interest accruals. Expected positive (see ``validate_transaction``).
    transaction_date : datetime
        When the entry takes effect.
    particulars : str
        Ledger description.
    interest_portion : Decimal
        Interest part of a payment. Ignored for other types.

    Returns
    -------
    Transaction
        The entry, not yet stored anywhere.
    """
    transaction_type = TransactionType(transaction_type)
    amount = to_decimal(amount)
    current = calculate_outstanding_balance(loan, transactions)

    principal_change = ZERO
    paid_amount = amount
    if transaction_type == TransactionType.PAYMENT:
        balance = max(ZERO, current - amount)
        interest_portion = to_decimal(interest_portion)
    elif transaction_type == TransactionType.PRINCIPAL_INCREASE:
        balance = current + amount
        principal_change = amount
        interest_portion = ZERO
    elif transaction_type == TransactionType.PRINCIPAL_DECREASE:
        balance = max(ZERO, current - amount)
        principal_change = amount
        interest_portion = ZERO
    else:  # INTEREST_ACCRUAL
        balance = current + amount
        interest_portion = amount
        paid_amount = ZERO

    logger.debug(
        "Ledger entry %s on loan %s: %s -> %s",
        transaction_type.value,
        loan.loan_id,
        current,
        balance,
    )

    return Transaction(
        transaction_id=transaction_id or str(uuid.uuid4()),
        loan_id=loan.loan_id,
        transaction_date=transaction_date,
        transaction_type=transaction_type,
        particulars=particulars,
        principal_change=principal_change,
        interest_portion=interest_portion,
        paid_amount=paid_amount,
        balance_after=balance,
        payment_method=payment_method,
        notes=notes,
    )
