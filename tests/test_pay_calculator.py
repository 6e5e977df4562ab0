"""Tests for the flat-rate pay calculator."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

import pytest
from hypothesis import given, settings, strategies as st

from payroll_console.calculators import (
    CompensationProfile,
    PayCalculator,
    PayPeriodInput,
    PayType,
    StubLineBuilder,
    calculate_pay,
)
from payroll_console.calculators.types import LineType
from payroll_console.errors import ValidationError

PERIOD_START = date(2024, 3, 1)
PERIOD_END = date(2024, 3, 15)


def period(regular="0", overtime="0", tips="0") -> PayPeriodInput:
    return PayPeriodInput(
        pay_period_start=PERIOD_START,
        pay_period_end=PERIOD_END,
        regular_hours=Decimal(regular),
        overtime_hours=Decimal(overtime),
        reported_tips=Decimal(tips),
    )


class TestHourlyPay:
    """Hourly employees are paid per hour, overtime at 1.5x."""

    def test_hourly_with_overtime_and_tips(self, hourly_profile):
        """75h regular + 10h overtime at $35 with $200 tips."""
        result = PayCalculator().calculate(hourly_profile, period("75", "10", "200"))

        assert result.regular_pay == Decimal("2625.00")
        assert result.overtime_pay == Decimal("525.00")
        assert result.tips == Decimal("200.00")
        assert result.gross_pay == Decimal("3350.00")
        assert result.deductions.tax == Decimal("670.00")
        assert result.deductions.retirement == Decimal("201.00")
        assert result.deductions.other == Decimal("0")
        assert result.net_pay == Decimal("2479.00")

    def test_zero_hours_gives_zero_pay(self, hourly_profile):
        result = PayCalculator().calculate(hourly_profile, period())

        assert result.gross_pay == Decimal("0")
        assert result.net_pay == Decimal("0")
        assert result.deductions.total == Decimal("0")

    def test_rounding_half_up(self):
        """Half a cent rounds up."""
        profile = CompensationProfile.build("hourly", "10.005", "0")
        result = PayCalculator().calculate(profile, period("1"))

        assert result.regular_pay == Decimal("10.01")
        assert result.gross_pay == Decimal("10.01")
        assert result.deductions.tax == Decimal("2.00")
        assert result.net_pay == Decimal("8.01")

    def test_gross_rounded_once_for_quarter_hours(self):
        """40.25h + 1.25h overtime at $18.75 is exactly 789.84375."""
        profile = CompensationProfile.build("hourly", "18.75", "0")
        result = PayCalculator().calculate(profile, period("40.25", "1.25"))

        assert result.gross_pay == Decimal("789.84")
        assert result.regular_pay == Decimal("754.69")
        assert result.overtime_pay == Decimal("35.15")
        assert result.tips == Decimal("0.00")
        assert StubLineBuilder.gross_from_lines(list(result.lines)) == result.gross_pay


class TestSalaryPay:
    """Salaried employees get 1/26 of the annual rate per period."""

    def test_salary_bi_weekly(self, salary_profile):
        result = PayCalculator().calculate(salary_profile, period("80"))

        assert result.regular_pay == Decimal("2884.62")
        assert result.gross_pay == Decimal("2884.62")
        assert result.deductions.tax == Decimal("576.92")
        assert result.deductions.retirement == Decimal("144.23")
        assert result.net_pay == Decimal("2163.47")

    def test_salary_ignores_overtime_hours(self, salary_profile):
        result = PayCalculator().calculate(salary_profile, period("80", "12"))

        assert result.overtime_pay == Decimal("0")
        assert result.gross_pay == Decimal("2884.62")
        assert not [line for line in result.lines if line.description == "Overtime"]

    def test_salary_tips_add_to_gross(self, salary_profile):
        result = PayCalculator().calculate(salary_profile, period("0", "0", "100"))

        assert result.gross_pay == Decimal("2984.62")


class TestFilingStatus:
    """Filing status is recorded but does not change withholding."""

    def test_tax_is_flat_for_every_status(self):
        results = {
            status: PayCalculator().calculate(
                CompensationProfile.build("hourly", "20", "0", status), period("40")
            )
            for status in ("single", "married", "head")
        }

        taxes = {r.deductions.tax for r in results.values()}
        assert taxes == {Decimal("160.00")}


class TestValidation:
    """Invalid figures are rejected before anything is computed."""

    def test_negative_hours_rejected(self, hourly_profile):
        bad = PayPeriodInput(
            pay_period_start=PERIOD_START,
            pay_period_end=PERIOD_END,
            regular_hours=Decimal("-1"),
        )
        with pytest.raises(ValidationError) as exc_info:
            PayCalculator().calculate(hourly_profile, bad)

        assert exc_info.value.field == "regular_hours"

    def test_negative_rate_rejected(self):
        profile = CompensationProfile(
            pay_type=PayType.HOURLY, pay_rate=Decimal("-5"), retirement_rate=Decimal("0")
        )
        with pytest.raises(ValidationError):
            PayCalculator().calculate(profile, period("1"))

    def test_retirement_rate_above_one_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CompensationProfile.build("hourly", "20", "1.5")

        assert exc_info.value.field == "retirement_rate"

    def test_period_end_before_start_rejected(self, hourly_profile):
        bad = PayPeriodInput(pay_period_start=PERIOD_END, pay_period_end=PERIOD_START)
        with pytest.raises(ValidationError):
            PayCalculator().calculate(hourly_profile, bad)

    def test_unknown_pay_type_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CompensationProfile.build("weekly", "20", "0")

        assert exc_info.value.field == "pay_type"

    def test_directly_built_inputs_are_coerced(self):
        """Floats, ints and strings in hand-built dataclasses are normalised."""
        profile = CompensationProfile(pay_type="hourly", pay_rate=35.0, retirement_rate=0.06)
        loose = PayPeriodInput(
            pay_period_start="2024-03-01",
            pay_period_end="2024-03-15",
            regular_hours=75,
            overtime_hours=10.0,
            reported_tips="200",
        )

        result = PayCalculator().calculate(profile, loose)

        assert result.gross_pay == Decimal("3350.00")
        assert result.deductions.retirement == Decimal("201.00")
        assert result.net_pay == Decimal("2479.00")

    def test_directly_built_unknown_pay_type_rejected(self):
        profile = CompensationProfile(pay_type="weekly", pay_rate=Decimal("20"), retirement_rate=0)

        with pytest.raises(ValidationError) as exc_info:
            PayCalculator().calculate(profile, period("1"))

        assert exc_info.value.field == "pay_type"

    def test_directly_built_non_numeric_rate_rejected(self):
        profile = CompensationProfile(pay_type=PayType.HOURLY, pay_rate="abc", retirement_rate=0)

        with pytest.raises(ValidationError) as exc_info:
            PayCalculator().calculate(profile, period("1"))

        assert exc_info.value.field == "pay_rate"


class TestStubLines:
    """The calculation carries the stub lines for its check."""

    def test_lines_reconcile_with_totals(self, hourly_profile):
        result = PayCalculator().calculate(hourly_profile, period("75", "10", "200"))
        lines = list(result.lines)

        assert [line.description for line in lines] == [
            "Regular",
            "Overtime",
            "Tips",
            "Federal Tax",
            "Retirement",
        ]
        assert StubLineBuilder.gross_from_lines(lines) == result.gross_pay
        assert StubLineBuilder.net_from_lines(lines) == result.net_pay
        assert StubLineBuilder.validate_line_signs(lines) == []

    def test_overtime_line_rate(self, hourly_profile):
        result = PayCalculator().calculate(hourly_profile, period("0", "2"))
        overtime = next(line for line in result.lines if line.description == "Overtime")

        assert overtime.line_type == LineType.EARNING
        assert overtime.rate == Decimal("52.50")
        assert overtime.hours == Decimal("2")


class TestFingerprint:
    """Identical inputs give identical fingerprints."""

    def test_deterministic(self, hourly_profile):
        calculator = PayCalculator()
        first = calculator.calculate(hourly_profile, period("80", "1.5"))
        second = calculator.calculate(hourly_profile, period("80.0", "1.50"))

        assert first.inputs_fingerprint == second.inputs_fingerprint
        assert len(first.inputs_fingerprint) == 32

    def test_changes_with_version(self, hourly_profile):
        first = PayCalculator("1.0.0").calculate(hourly_profile, period("80"))
        second = PayCalculator("2.0.0").calculate(hourly_profile, period("80"))

        assert first.inputs_fingerprint != second.inputs_fingerprint


class TestCalculatePay:
    """Undated convenience wrapper."""

    def test_matches_calculator(self, hourly_profile):
        result = calculate_pay(hourly_profile, regular_hours=75, overtime_hours=10, tips=200)

        assert result.gross_pay == Decimal("3350.00")
        assert result.net_pay == Decimal("2479.00")

    def test_rejects_negative_tips(self, hourly_profile):
        with pytest.raises(ValidationError):
            calculate_pay(hourly_profile, tips=-1)


amounts = st.decimals(min_value=0, max_value=10000, places=2, allow_nan=False, allow_infinity=False)
hours = st.decimals(min_value=0, max_value=200, places=2, allow_nan=False, allow_infinity=False)
rates = st.decimals(min_value=0, max_value=1, places=4, allow_nan=False, allow_infinity=False)


class TestCalculationProperties:
    """Invariants that hold for every valid input."""

    @given(
        pay_type=st.sampled_from(["hourly", "salary"]),
        pay_rate=amounts,
        retirement_rate=rates,
        regular=hours,
        overtime=hours,
        tips=amounts,
    )
    @settings(max_examples=200)
    def test_net_is_gross_minus_deductions(
        self, pay_type, pay_rate, retirement_rate, regular, overtime, tips
    ):
        profile = CompensationProfile.build(pay_type, pay_rate, retirement_rate)
        result = PayCalculator().calculate(profile, period(regular, overtime, tips))

        if pay_type == "hourly":
            exact = regular * pay_rate + overtime * pay_rate * Decimal("1.5") + tips
        else:
            exact = pay_rate / Decimal("26") + tips
        assert result.gross_pay == exact.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        assert result.gross_pay == result.regular_pay + result.overtime_pay + result.tips
        assert min(result.regular_pay, result.overtime_pay, result.tips) >= 0
        assert result.net_pay == result.gross_pay - result.deductions.total
        assert result.gross_pay >= 0
        assert result.deductions.tax >= 0
        assert result.deductions.retirement >= 0
        for value in (result.gross_pay, result.net_pay, result.deductions.tax):
            assert value == value.quantize(Decimal("0.01"))
