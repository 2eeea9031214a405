"""Ledger transaction model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from lendbook.models.enums import PaymentMethod, TransactionType


@dataclass
class Transaction:
    """Ledger entry for loans valued with the ledger strategy."""

    transaction_id: str
    loan_id: str
    transaction_date: datetime
    transaction_type: TransactionType
    particulars: str  # Description shown in the ledger
    principal_change: Decimal  # Amount added to / removed from principal
    interest_portion: Decimal  # Interest part of a payment, or accrued amount
    paid_amount: Decimal  # Cash paid or received
    balance_after: Decimal  # Outstanding right after this entry, stored at write time
    payment_method: PaymentMethod | None = None
    notes: str = ""
    created_at: datetime | None = None
