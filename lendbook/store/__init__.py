"""In-memory record source for loans and their payment records."""

from lendbook.store.loan_book import LoanBook

__all__ = ["LoanBook"]
