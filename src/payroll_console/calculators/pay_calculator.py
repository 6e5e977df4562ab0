"""Pay calculator - gross, deductions and net for one pay period."""

from __future__ import annotations

import hashlib
import json
from datetime import date
from decimal import Decimal
from typing import Any

from payroll_console.calculators.line_builder import StubLineBuilder
from payroll_console.calculators.types import (
    CompensationProfile,
    Deductions,
    PayCalculation,
    PayPeriodInput,
    PayType,
)
from payroll_console.calculators.validation import require_non_negative
from payroll_console.errors import ComputationError


class PayCalculator:
    """Flat-rate payroll calculator.

    Calculation pipeline (stable order):
    1) Regular pay: hourly hours x rate, salary rate / 26 (annual, bi-weekly)
    2) Overtime pay: hourly hours x rate x 1.5, salary always 0
    3) Gross = regular + overtime + tips, summed exactly and rounded once
    4) Tax = gross x 20%, filing status ignored
    5) Retirement = gross x retirement rate
    6) Other = 0
    7) Net = gross - tax - retirement - other

    The calculator is pure: no I/O, no clock, identical inputs give
    identical results and fingerprints.
    """

    SALARY_PERIODS_PER_YEAR = Decimal("26")
    OVERTIME_MULTIPLIER = StubLineBuilder.OVERTIME_MULTIPLIER
    FLAT_TAX_RATE = Decimal("0.20")

    def __init__(self, version: str = "1.0.0"):
        self.version = version

    def calculate(
        self, profile: CompensationProfile, period: PayPeriodInput
    ) -> PayCalculation:
        """Calculate pay for one employee and one pay period.

        Raises:
            ValidationError: If the profile or period carries invalid figures
            ComputationError: If the result is non-finite or does not reconcile
        """
        profile, period = self._validate(profile, period)
        round_to_cents = StubLineBuilder.round_to_cents

        if profile.pay_type == PayType.HOURLY:
            regular_exact = period.regular_hours * profile.pay_rate
            overtime_exact = period.overtime_hours * profile.pay_rate * self.OVERTIME_MULTIPLIER
        else:
            regular_exact = profile.pay_rate / self.SALARY_PERIODS_PER_YEAR
            overtime_exact = Decimal("0")

        # Round running totals so the components always sum to the rounded gross.
        gross_pay = round_to_cents(regular_exact + overtime_exact + period.reported_tips)
        regular_pay = round_to_cents(regular_exact)
        overtime_pay = round_to_cents(regular_exact + overtime_exact) - regular_pay
        tips = gross_pay - regular_pay - overtime_pay

        deductions = Deductions(
            tax=round_to_cents(gross_pay * self.FLAT_TAX_RATE),
            retirement=round_to_cents(gross_pay * profile.retirement_rate),
            other=Decimal("0.00"),
        )
        net_pay = gross_pay - deductions.tax - deductions.retirement - deductions.other

        lines = StubLineBuilder.earnings_lines(
            regular_pay,
            overtime_pay,
            tips,
            period.regular_hours,
            period.overtime_hours,
            profile.pay_rate,
        )
        lines.extend(StubLineBuilder.deduction_lines(deductions))

        self._check_result(gross_pay, net_pay, deductions)

        return PayCalculation(
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            tips=tips,
            gross_pay=gross_pay,
            deductions=deductions,
            net_pay=net_pay,
            lines=tuple(lines),
            inputs_fingerprint=self.compute_inputs_fingerprint(profile, period),
        )

    def compute_inputs_fingerprint(
        self, profile: CompensationProfile, period: PayPeriodInput
    ) -> str:
        """Fingerprint of every input that affects the result."""
        data: dict[str, Any] = {
            "calculator_version": self.version,
            "pay_type": profile.pay_type.value,
            "pay_rate": str(profile.pay_rate.normalize()),
            "retirement_rate": str(profile.retirement_rate.normalize()),
            **period.to_canonical_dict(),
        }
        json_str = json.dumps(data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @staticmethod
    def _validate(
        profile: CompensationProfile, period: PayPeriodInput
    ) -> tuple[CompensationProfile, PayPeriodInput]:
        """Return the inputs with every field coerced and checked.

        Dataclasses can be built directly, bypassing build(), so floats,
        strings and plain enum values are normalised here.
        """
        normalized_profile = CompensationProfile.build(
            profile.pay_type,
            profile.pay_rate,
            profile.retirement_rate,
            profile.filing_status,
        )
        normalized_period = PayPeriodInput.build(
            period.pay_period_start,
            period.pay_period_end,
            period.regular_hours,
            period.overtime_hours,
            period.reported_tips,
        )
        return normalized_profile, normalized_period

    @staticmethod
    def _check_result(gross_pay: Decimal, net_pay: Decimal, deductions: Deductions) -> None:
        figures = {
            "gross_pay": gross_pay,
            "net_pay": net_pay,
            "tax": deductions.tax,
            "retirement": deductions.retirement,
            "other": deductions.other,
        }
        for name, value in figures.items():
            if not value.is_finite():
                raise ComputationError(f"Calculated {name} is not finite: {value}")
        if gross_pay < 0:
            raise ComputationError(f"Negative gross pay: {gross_pay}")
        if net_pay != gross_pay - deductions.total:
            raise ComputationError(
                f"Net pay {net_pay} does not equal gross {gross_pay} "
                f"minus deductions {deductions.total}"
            )


def calculate_pay(
    profile: CompensationProfile,
    regular_hours: Any = 0,
    overtime_hours: Any = 0,
    tips: Any = 0,
) -> PayCalculation:
    """Calculate pay from raw hours and tips without a dated period.

    Convenience wrapper for previews where no period has been chosen yet.
    """
    undated = date.min
    period = PayPeriodInput(
        pay_period_start=undated,
        pay_period_end=undated,
        regular_hours=require_non_negative(regular_hours, "regular_hours"),
        overtime_hours=require_non_negative(overtime_hours, "overtime_hours"),
        reported_tips=require_non_negative(tips, "reported_tips"),
    )
    return PayCalculator().calculate(profile, period)
