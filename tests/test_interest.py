"""Tests for the interest calculator."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from lendbook.calculations.interest import (
    as_datetime,
    calculate_compound_interest,
    calculate_loan_interest,
    calculate_simple_interest,
    compute_interest,
    days_between,
    round_money,
    to_decimal,
)
from lendbook.models import CompoundingFrequency, InterestType

START = datetime(2024, 1, 1, 9, 30)


def days_later(days: int) -> datetime:
    return START + timedelta(days=days)


class TestDayCount:
    """Tests for whole-day counting."""

    def test_whole_days(self) -> None:
        assert days_between(START, days_later(30)) == 30

    def test_partial_day_is_truncated(self) -> None:
        assert days_between(START, START + timedelta(hours=23, minutes=59)) == 0
        assert days_between(START, START + timedelta(days=2, hours=20)) == 2

    def test_negative_range_truncates_toward_zero(self) -> None:
        assert days_between(START, START - timedelta(hours=23)) == 0
        assert days_between(START, START - timedelta(days=3, hours=5)) == -3

    def test_leap_year_not_adjusted(self) -> None:
        """2024 has 366 days; the count is still actual days."""
        assert days_between(date(2024, 1, 1), date(2025, 1, 1)) == 366

    def test_dates_and_datetimes_mix(self) -> None:
        assert as_datetime(date(2024, 1, 2)) == datetime(2024, 1, 2)
        assert days_between(date(2024, 1, 1), datetime(2024, 1, 3, 12)) == 2


class TestRounding:
    """Tests for money rounding helpers."""

    def test_half_rounds_up(self) -> None:
        assert round_money(Decimal("0.005")) == Decimal("0.01")
        assert round_money(Decimal("2.675")) == Decimal("2.68")

    def test_float_input_has_no_binary_noise(self) -> None:
        assert to_decimal(0.1) == Decimal("0.1")


class TestSimpleInterest:
    """Tests for simple interest."""

    def test_one_year(self) -> None:
        result = calculate_simple_interest(Decimal("1000"), Decimal("5"), START, days_later(365))
        assert result == Decimal("50.00")

    def test_linear_in_days(self) -> None:
        p, r = Decimal("1000"), Decimal("10")
        single = calculate_simple_interest(p, r, START, days_later(73))
        double = calculate_simple_interest(p, r, START, days_later(146))

        assert single == Decimal("20.00")
        assert double == single * 2

    def test_rounded_to_cents(self) -> None:
        result = calculate_simple_interest(Decimal("1000"), Decimal("5"), START, days_later(1))
        assert result == Decimal("0.14")
        assert result.as_tuple().exponent == -2

    def test_standard_rounding_not_bankers(self) -> None:
        """36.5 x 1% x 5/365 is exactly 0.005."""
        result = calculate_simple_interest(Decimal("36.5"), Decimal("1"), START, days_later(5))
        assert result == Decimal("0.01")

    def test_inverted_range_is_negative(self) -> None:
        result = calculate_simple_interest(Decimal("1000"), Decimal("5"), START, START - timedelta(days=365))
        assert result == Decimal("-50.00")

    def test_same_day_is_zero(self) -> None:
        assert calculate_simple_interest(Decimal("1000"), Decimal("5"), START, START) == 0

    def test_accepts_plain_numbers(self) -> None:
        assert calculate_simple_interest(1000, 5.0, START, days_later(365)) == Decimal("50.00")


class TestCompoundInterest:
    """Tests for compound interest."""

    def test_yearly_one_year_equals_simple_rate(self) -> None:
        result = calculate_compound_interest(
            Decimal("1000"), Decimal("5"), START, days_later(365), CompoundingFrequency.YEARLY
        )
        assert result == Decimal("50.00")

    def test_monthly_one_year(self) -> None:
        """1000 x 1.01^12 = 1126.825..."""
        result = calculate_compound_interest(
            Decimal("1000"), Decimal("12"), START, days_later(365), CompoundingFrequency.MONTHLY
        )
        assert result == Decimal("126.83")

    def test_yearly_two_years_exceeds_simple(self) -> None:
        compound = calculate_compound_interest(
            Decimal("1000"), Decimal("10"), START, days_later(730), CompoundingFrequency.YEARLY
        )
        simple = calculate_simple_interest(Decimal("1000"), Decimal("10"), START, days_later(730))

        assert compound == Decimal("210.00")
        assert simple == Decimal("200.00")

    def test_fractional_period_is_compounded(self) -> None:
        """Half a yearly period accrues something, but less than simple interest."""
        compound = calculate_compound_interest(
            Decimal("1000"), Decimal("10"), START, days_later(182), CompoundingFrequency.YEARLY
        )
        simple = calculate_simple_interest(Decimal("1000"), Decimal("10"), START, days_later(182))

        assert Decimal("0") < compound < simple

    def test_more_frequent_compounding_accrues_more(self) -> None:
        results = [
            calculate_compound_interest(Decimal("1000"), Decimal("10"), START, days_later(365), freq)
            for freq in (
                CompoundingFrequency.YEARLY,
                CompoundingFrequency.QUARTERLY,
                CompoundingFrequency.MONTHLY,
                CompoundingFrequency.DAILY,
            )
        ]
        assert results == sorted(results)
        assert len(set(results)) == 4

    def test_frequency_accepts_wire_value(self) -> None:
        result = calculate_compound_interest(Decimal("1000"), Decimal("5"), START, days_later(365), "yearly")
        assert result == Decimal("50.00")

    def test_inverted_range_is_negative(self) -> None:
        result = calculate_compound_interest(
            Decimal("1000"), Decimal("5"), START, START - timedelta(days=365), CompoundingFrequency.YEARLY
        )
        assert result < 0


class TestComputeInterest:
    """Tests for interest type dispatch."""

    @pytest.mark.parametrize("interest_type", list(InterestType))
    @pytest.mark.parametrize("frequency", list(CompoundingFrequency))
    def test_zero_rate_is_zero(self, interest_type: InterestType, frequency: CompoundingFrequency) -> None:
        result = compute_interest(Decimal("5000"), Decimal("0"), interest_type, START, days_later(400), frequency)
        assert result == 0

    def test_none_ignores_rate(self) -> None:
        result = compute_interest(Decimal("1000"), Decimal("25"), InterestType.NONE, START, days_later(365))
        assert result == 0

    def test_simple(self) -> None:
        result = compute_interest(Decimal("1000"), Decimal("5"), "simple", START, days_later(365))
        assert result == Decimal("50.00")

    def test_compound_without_frequency_is_zero(self) -> None:
        result = compute_interest(Decimal("1000"), Decimal("5"), InterestType.COMPOUND, START, days_later(365))
        assert result == 0

    def test_deterministic(self) -> None:
        args = (Decimal("1234.56"), Decimal("7.5"), InterestType.COMPOUND, START, days_later(200), CompoundingFrequency.DAILY)
        assert compute_interest(*args) == compute_interest(*args)


class TestLoanInterest:
    """Tests for interest on a loan's terms."""

    def test_compound_loan(self, compound_loan, as_of: datetime) -> None:
        assert calculate_loan_interest(compound_loan, as_of) == Decimal("126.83")

    def test_interest_free_loan(self, make_loan, as_of: datetime) -> None:
        assert calculate_loan_interest(make_loan(), as_of) == 0
