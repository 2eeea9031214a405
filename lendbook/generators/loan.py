"""Loan generator producing loans with repayments or ledger entries."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterator

from lendbook.calculations.interest import round_money
from lendbook.calculations.ledger import (
    build_transaction,
    calculate_current_principal,
    calculate_outstanding_balance,
    calculate_total_interest_accrued,
    interest_up_to,
)
from lendbook.calculations.valuation import evaluate_loan
from lendbook.generators.base import BaseGenerator
from lendbook.models.enums import (
    CompoundingFrequency,
    InterestType,
    PaymentMethod,
    TransactionType,
    ValuationStrategy,
)
from lendbook.models.loan import Loan, Repayment
from lendbook.models.transaction import Transaction

LoanRecords = tuple[Loan, list[Repayment], list[Transaction]]


class LoanGenerator(BaseGenerator):
    """Generate synthetic informal loans between friends and family."""

    INTEREST_TYPES = list(InterestType)
    INTEREST_WEIGHTS = [0.55, 0.30, 0.15]

    # Annual percent
    RATE_RANGE = (1.0, 18.0)

    # Share of loans repaid in full / partly / not at all by the as-of date
    OUTCOMES = ["settled", "partial", "unpaid"]
    OUTCOME_WEIGHTS = [0.30, 0.50, 0.20]

    LEDGER_TYPES = [
        TransactionType.PAYMENT,
        TransactionType.PRINCIPAL_INCREASE,
        TransactionType.PRINCIPAL_DECREASE,
        TransactionType.INTEREST_ACCRUAL,
    ]
    LEDGER_WEIGHTS = [0.60, 0.15, 0.10, 0.15]

    def __init__(
        self,
        seed: int | None = None,
        user_name: str | None = None,
        ledger_share: float = 0.25,
    ) -> None:
        super().__init__(seed)
        self.user_name = user_name or self.fake.name()
        self.ledger_share = ledger_share

    def generate(self, as_of: datetime) -> Loan:
        """Generate a loan started before ``as_of``.

        Parameters
        ----------
        as_of : datetime
            Reference instant; the loan starts 10 to 720 days earlier and
            may already be past its due date.

        Returns
        -------
        Loan
            Generated loan with status left at its default.
        """
        start_date = as_of - timedelta(days=random.randint(10, 720), hours=random.randint(0, 23))
        due_date = None
        if random.random() < 0.8:
            due_date = start_date + timedelta(days=random.randint(30, 540))

        interest_type = random.choices(self.INTEREST_TYPES, weights=self.INTEREST_WEIGHTS, k=1)[0]
        interest_rate = Decimal("0")
        frequency = None
        if interest_type != InterestType.NONE:
            interest_rate = Decimal(str(round(random.uniform(*self.RATE_RANGE), 2)))
        if interest_type == InterestType.COMPOUND:
            frequency = random.choice(list(CompoundingFrequency))

        is_user_lender = random.random() < 0.6
        counterparty = self.fake.name()
        strategy = (
            ValuationStrategy.LEDGER
            if random.random() < self.ledger_share
            else ValuationStrategy.FLAT_REPAYMENT
        )

        return Loan(
            loan_id=self.fake.uuid4(),
            lender_name=self.user_name if is_user_lender else counterparty,
            borrower_name=counterparty if is_user_lender else self.user_name,
            principal_amount=Decimal(random.randint(2, 1000) * 50),
            start_date=start_date,
            due_date=due_date,
            interest_type=interest_type,
            interest_rate=interest_rate,
            compounding_frequency=frequency,
            is_user_lender=is_user_lender,
            valuation_strategy=strategy,
            notes=self.fake.sentence(nb_words=6) if random.random() < 0.3 else "",
            tags=random.sample(["family", "friend", "work", "emergency", "travel"], k=random.randint(0, 2)),
            created_at=start_date,
        )

    def generate_with_records(self, as_of: datetime) -> LoanRecords:
        """Generate a loan plus the records of its valuation strategy."""
        loan = self.generate(as_of)
        if loan.valuation_strategy == ValuationStrategy.LEDGER:
            return loan, [], self.generate_ledger(loan, as_of)
        return loan, self.generate_repayments(loan, as_of), []

    def generate_batch(self, count: int, as_of: datetime) -> Iterator[LoanRecords]:
        """Generate ``count`` loans with their records."""
        for _ in range(count):
            yield self.generate_with_records(as_of)

    def generate_repayments(self, loan: Loan, as_of: datetime) -> list[Repayment]:
        """Generate repayments that settle all, part or none of the loan by ``as_of``."""
        outcome = random.choices(self.OUTCOMES, weights=self.OUTCOME_WEIGHTS, k=1)[0]
        if outcome == "unpaid":
            return []

        total_due = evaluate_loan(loan, [], as_of).total_amount_due
        target = total_due
        if outcome == "partial":
            target = round_money(total_due * Decimal(str(round(random.uniform(0.1, 0.9), 2))))

        count = random.randint(1, 6)
        dates = self._dates_between(loan.start_date, as_of, count)
        amounts = self._split(target, count)

        return [
            Repayment(
                repayment_id=self.fake.uuid4(),
                loan_id=loan.loan_id,
                payment_amount=amount,
                payment_date=payment_date,
                payment_method=random.choice(list(PaymentMethod)),
                created_at=payment_date,
            )
            for amount, payment_date in zip(amounts, dates)
            if amount > 0
        ]

    def generate_ledger(self, loan: Loan, as_of: datetime) -> list[Transaction]:
        """Generate a chronological ledger, each entry built on the previous balance."""
        transactions: list[Transaction] = []
        for entry_date in self._dates_between(loan.start_date, as_of, random.randint(0, 8)):
            outstanding = calculate_outstanding_balance(loan, transactions)
            if outstanding <= 0:
                break

            tx_type = random.choices(self.LEDGER_TYPES, weights=self.LEDGER_WEIGHTS, k=1)[0]
            interest_portion = Decimal("0")
            if tx_type == TransactionType.INTEREST_ACCRUAL:
                principal = calculate_current_principal(loan, transactions)
                accrued = calculate_total_interest_accrued(transactions)
                amount = interest_up_to(loan, principal, entry_date) - accrued
                if amount <= 0:
                    continue
                particulars = "Interest accrued"
            elif tx_type == TransactionType.PRINCIPAL_INCREASE:
                amount = Decimal(random.randint(1, 20) * 50)
                particulars = "Additional amount lent"
            elif tx_type == TransactionType.PRINCIPAL_DECREASE:
                amount = round_money(outstanding * Decimal("0.1"))
                particulars = "Part of principal forgiven"
            else:
                amount = round_money(outstanding * Decimal(str(round(random.uniform(0.1, 1.0), 2))))
                interest_portion = round_money(amount * Decimal("0.1")) if loan.interest_rate else Decimal("0")
                particulars = "Repayment received"

            if amount <= 0:
                continue
            transactions.append(
                build_transaction(
                    loan,
                    transactions,
                    tx_type,
                    amount,
                    entry_date,
                    particulars,
                    interest_portion=interest_portion,
                    payment_method=random.choice(list(PaymentMethod)),
                    transaction_id=self.fake.uuid4(),
                )
            )
        return transactions

    def _dates_between(self, start: datetime, end: datetime, count: int) -> list[datetime]:
        """Sorted distinct instants in ``[start, end]``."""
        span = int((end - start).total_seconds())
        if span <= 0 or count <= 0:
            return []
        offsets = sorted(random.sample(range(span + 1), k=min(count, span + 1)))
        return [start + timedelta(seconds=offset) for offset in offsets]

    def _split(self, total: Decimal, parts: int) -> list[Decimal]:
        """Split an amount into ``parts`` cent amounts summing exactly to it."""
        weights = [random.uniform(0.5, 1.5) for _ in range(parts)]
        scale = sum(weights)
        amounts = [round_money(total * Decimal(str(w / scale))) for w in weights[:-1]]
        amounts.append(total - sum(amounts, Decimal("0")))
        return amounts
