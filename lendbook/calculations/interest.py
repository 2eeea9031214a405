"""Simple and compound interest over a date range.

Day counting follows the actual/365 convention: the elapsed time is the
number of whole calendar days between the two instants divided by 365,
with no adjustment for leap years or month lengths. Every result is
rounded to cents (ROUND_HALF_UP) at the point it is computed.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from lendbook.models.enums import CompoundingFrequency, InterestType
from lendbook.models.loan import Loan

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DAYS_PER_YEAR = Decimal(365)
ZERO = Decimal("0.00")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a numeric input to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def as_datetime(value: date) -> datetime:
    """Promote a bare date to midnight of that day."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end``, truncated toward zero.

    Negative when ``end`` is before ``start``.
    """
    delta = as_datetime(end) - as_datetime(start)
    if delta < timedelta(0):
        return -(-delta).days
    return delta.days


def calculate_simple_interest(
    principal: Decimal,
    rate: Decimal,
    start_date: date,
    end_date: date,
) -> Decimal:
    """Calculate simple interest: principal x rate x time.

    Parameters
    ----------
    principal : Decimal
        Principal amount.
    rate : Decimal
        Annual interest rate as a percentage (5 for 5%).
    start_date : date
        Loan start.
    end_date : date
        End of the accrual period, usually the evaluation instant.

    Returns
    -------
    Decimal
        Interest rounded to cents. Negative if ``end_date`` precedes
        ``start_date``; callers guard the range.
    """
    days = days_between(start_date, end_date)
    interest = to_decimal(principal) * to_decimal(rate) * days / (100 * DAYS_PER_YEAR)
    return round_money(interest)


def calculate_compound_interest(
    principal: Decimal,
    rate: Decimal,
    start_date: date,
    end_date: date,
    frequency: CompoundingFrequency,
) -> Decimal:
    """Calculate compound interest from A = P(1 + r/n)^(nt).

    The exponent ``n * days / 365`` may be fractional; partial periods
    compound continuously rather than waiting for a period boundary.

    Parameters
    ----------
    principal : Decimal
        Principal amount.
    rate : Decimal
        Annual interest rate as a percentage.
    start_date : date
        Loan start.
    end_date : date
        End of the accrual period.
    frequency : CompoundingFrequency
        Compounding frequency, mapped to periods per year.

    Returns
    -------
    Decimal
        Interest (A - P) rounded to cents.
    """
    days = days_between(start_date, end_date)
    p = to_decimal(principal)
    n = Decimal(CompoundingFrequency(frequency).periods_per_year)
    per_period = to_decimal(rate) / 100 / n
    exponent = n * days / DAYS_PER_YEAR
    amount = p * (1 + per_period) ** exponent
    return round_money(amount - p)


def compute_interest(
    principal: Decimal,
    rate: Decimal,
    interest_type: InterestType,
    start_date: date,
    end_date: date,
    frequency: CompoundingFrequency | None = None,
) -> Decimal:
    """Interest for any interest type.

    ``none`` always yields zero. A compound loan without a compounding
    frequency also yields zero, as it cannot be valued.
    """
    interest_type = InterestType(interest_type)
    if interest_type == InterestType.SIMPLE:
        return calculate_simple_interest(principal, rate, start_date, end_date)
    if interest_type == InterestType.COMPOUND:
        if frequency is None:
            logger.debug("Compound interest requested without a frequency, treating as zero")
            return ZERO
        return calculate_compound_interest(principal, rate, start_date, end_date, frequency)
    return ZERO


def calculate_loan_interest(loan: Loan, as_of: date) -> Decimal:
    """Interest accrued on a loan's original principal up to ``as_of``."""
    return compute_interest(
        loan.principal_amount,
        loan.interest_rate,
        loan.interest_type,
        loan.start_date,
        as_of,
        loan.compounding_frequency,
    )
