"""Loan valuation against a flat list of repayments."""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal

from lendbook.calculations.interest import ZERO, calculate_loan_interest
from lendbook.calculations.ledger import calculate_outstanding_balance
from lendbook.clock import resolve_now
from lendbook.models.enums import ValuationStrategy
from lendbook.models.loan import Loan, Repayment
from lendbook.models.results import LoanCalculation
from lendbook.models.transaction import Transaction

logger = logging.getLogger(__name__)

ONE = Decimal("1")


def evaluate_loan(
    loan: Loan,
    repayments: Iterable[Repayment],
    as_of: datetime | None = None,
) -> LoanCalculation:
    """Compute what is owed on a loan at ``as_of``.

    Parameters
    ----------
    loan : Loan
        Loan terms.
    repayments : Iterable[Repayment]
        Every repayment recorded against the loan.
    as_of : datetime | None
        Evaluation instant; the system clock when omitted.

    Returns
    -------
    LoanCalculation
        Principal, interest to date, amount due, amount repaid and the
        outstanding balance. Overpayment leaves the outstanding at zero.
    """
    now = resolve_now(as_of)
    total_repaid = sum((r.payment_amount for r in repayments), ZERO)
    interest_amount = calculate_loan_interest(loan, now)
    total_amount_due = loan.principal_amount + interest_amount
    current_outstanding = max(ZERO, total_amount_due - total_repaid)

    return LoanCalculation(
        principal=loan.principal_amount,
        interest_amount=interest_amount,
        total_amount_due=total_amount_due,
        current_outstanding=current_outstanding,
        total_repaid=total_repaid,
        as_of=now,
    )


def repayment_progress(calculation: LoanCalculation) -> Decimal:
    """Share of the amount due already repaid, clamped to [0, 1]."""
    if calculation.total_amount_due <= 0:
        return ZERO
    ratio = calculation.total_repaid / calculation.total_amount_due
    return min(ONE, max(ZERO, ratio))


def current_outstanding(
    loan: Loan,
    repayments: Sequence[Repayment] = (),
    transactions: Sequence[Transaction] = (),
    as_of: datetime | None = None,
) -> Decimal:
    """Outstanding balance under the loan's own valuation strategy.

    The two record models are never combined: a ledger loan ignores
    repayments and a flat loan ignores transactions.
    """
    if loan.valuation_strategy == ValuationStrategy.LEDGER:
        if repayments:
            logger.warning(
                "Loan %s is ledger-valued; ignoring %d flat repayments",
                loan.loan_id,
                len(repayments),
            )
        return calculate_outstanding_balance(loan, transactions)

    if transactions:
        logger.warning(
            "Loan %s is valued from repayments; ignoring %d ledger entries",
            loan.loan_id,
            len(transactions),
        )
    return evaluate_loan(loan, repayments, as_of).current_outstanding
