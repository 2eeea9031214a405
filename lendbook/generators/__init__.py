"""Synthetic loan portfolio generators."""

from lendbook.generators.loan import LoanGenerator

__all__ = ["LoanGenerator"]
