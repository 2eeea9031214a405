#!/usr/bin/env python3
"""Generate a synthetic loan portfolio and print its dashboard.

Loans, repayments and ledger entries are generated with Faker, loaded into
a LoanBook frozen at the chosen instant, and the dashboard metrics, recent
activity and per-loan valuations are written as JSON.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from lendbook.calculations import evaluate_loan_from_ledger, repayment_progress
from lendbook.clock import FixedClock
from lendbook.config import LendbookConfig
from lendbook.exceptions import LendbookError
from lendbook.generators import LoanGenerator
from lendbook.logging import setup_logging
from lendbook.models.enums import ValuationStrategy
from lendbook.serialization import to_dict
from lendbook.store import LoanBook

logger = logging.getLogger("lendbook.scripts.generate_sample_data")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("-n", "--num-loans", type=int, default=20, help="Loans to generate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        default=None,
        help="Evaluation instant (ISO 8601), defaults to now",
    )
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write JSON here")
    return parser.parse_args(argv)


def build_book(num_loans: int, as_of: datetime, seed: int | None) -> LoanBook:
    """Generate loans and load them with their records into a book."""
    book = LoanBook(clock=FixedClock(as_of))
    generator = LoanGenerator(seed=seed)
    for loan, repayments, transactions in generator.generate_batch(num_loans, as_of):
        book.add_loan(loan)
        for repayment in repayments:
            book.add_repayment(repayment)
        for transaction in transactions:
            book.add_transaction(transaction)
    logger.info("Loaded %s", book.summary())
    return book


def loan_report(book: LoanBook, loan_id: str) -> dict:
    """Valuation of one loan under its own strategy."""
    loan = book.get_loan(loan_id)
    report = {
        "loan_id": loan.loan_id,
        "counterparty": loan.counterparty_name,
        "is_user_lender": loan.is_user_lender,
        "status": loan.status.value,
        "strategy": loan.valuation_strategy.value,
    }
    if loan.valuation_strategy == ValuationStrategy.LEDGER:
        report["ledger"] = to_dict(
            evaluate_loan_from_ledger(loan, book.get_loan_transactions(loan_id))
        )
    else:
        calculation = book.get_loan_calculation(loan_id)
        report["calculation"] = to_dict(calculation)
        report["progress"] = str(repayment_progress(calculation))
    return report


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = LendbookConfig.from_env()
    setup_logging(config)

    as_of = args.as_of or datetime.now()
    seed = args.seed if args.seed is not None else config.seed

    try:
        book = build_book(args.num_loans, as_of, seed)
    except LendbookError:
        logger.exception("Failed to build sample portfolio")
        return 1

    metrics = book.dashboard(config.dashboard)
    output = {
        "currency": config.currency,
        "dashboard": {
            "as_of": metrics.as_of.isoformat(),
            "total_lent": str(metrics.total_lent),
            "total_borrowed": str(metrics.total_borrowed),
            "net_balance": str(metrics.net_balance),
            "overdue": [loan.loan_id for loan in metrics.overdue_loans],
            "due_7_days": [loan.loan_id for loan in metrics.loans_due_7_days],
            "due_30_days": [loan.loan_id for loan in metrics.loans_due_30_days],
        },
        "recent_activity": [
            {
                "loan_id": activity.loan.loan_id,
                "activity_date": activity.activity_date.isoformat() if activity.activity_date else None,
                "repayment_id": activity.repayment.repayment_id if activity.repayment else None,
            }
            for activity in book.recent_activity(limit=10)
        ],
        "loans": [loan_report(book, loan_id) for loan_id in book.loans],
    }

    text = json.dumps(output, indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        print(f"Saved report for {len(book.loans)} loans to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
