"""Pay stub line builder."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from payroll_console.calculators.types import Deductions, LineType, StubLine


class StubLineBuilder:
    """Builds the lines printed on a check stub.

    Sign conventions:
    - EARNING: positive
    - TAX (employee withholding): negative
    - DEDUCTION: negative

    Rounding:
    - USD to 2 decimals, ROUND_HALF_UP
    """

    OUTPUT_PRECISION = Decimal("0.01")
    OVERTIME_MULTIPLIER = Decimal("1.5")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(StubLineBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_earning_line(
        description: str,
        amount: Decimal,
        hours: Decimal | None = None,
        rate: Decimal | None = None,
    ) -> StubLine:
        """Create an earning line (positive amount)."""
        return StubLine(
            line_type=LineType.EARNING,
            description=description,
            amount=StubLineBuilder.round_to_cents(abs(amount)),
            hours=hours,
            rate=rate,
        )

    @staticmethod
    def create_tax_line(description: str, amount: Decimal) -> StubLine:
        """Create a withholding line (negative amount)."""
        return StubLine(
            line_type=LineType.TAX,
            description=description,
            amount=-StubLineBuilder.round_to_cents(abs(amount)),
        )

    @staticmethod
    def create_deduction_line(description: str, amount: Decimal) -> StubLine:
        """Create a deduction line (negative amount)."""
        return StubLine(
            line_type=LineType.DEDUCTION,
            description=description,
            amount=-StubLineBuilder.round_to_cents(abs(amount)),
        )

    @classmethod
    def earnings_lines(
        cls,
        regular_pay: Decimal,
        overtime_pay: Decimal,
        tips: Decimal,
        regular_hours: Decimal,
        overtime_hours: Decimal,
        pay_rate: Decimal,
    ) -> list[StubLine]:
        """Regular, Overtime and Tips lines; empty lines are skipped.

        Salaried regular pay is printed whenever it is non-zero, even with no
        hours entered. Salaried overtime hours never produce a line.
        """
        lines: list[StubLine] = []
        if regular_hours > 0 or regular_pay > 0:
            lines.append(
                cls.create_earning_line("Regular", regular_pay, hours=regular_hours, rate=pay_rate)
            )
        if overtime_hours > 0 and overtime_pay > 0:
            lines.append(
                cls.create_earning_line(
                    "Overtime",
                    overtime_pay,
                    hours=overtime_hours,
                    rate=cls.round_to_cents(pay_rate * cls.OVERTIME_MULTIPLIER),
                )
            )
        if tips > 0:
            lines.append(cls.create_earning_line("Tips", tips))
        return lines

    @classmethod
    def deduction_lines(cls, deductions: Deductions) -> list[StubLine]:
        """Federal Tax and Retirement lines, plus Other when non-zero."""
        lines = [
            cls.create_tax_line("Federal Tax", deductions.tax),
            cls.create_deduction_line("Retirement", deductions.retirement),
        ]
        if deductions.other:
            lines.append(cls.create_deduction_line("Other", deductions.other))
        return lines

    @staticmethod
    def gross_from_lines(lines: list[StubLine]) -> Decimal:
        """GROSS = Σ(EARNING)"""
        gross = Decimal("0")
        for line in lines:
            if line.line_type == LineType.EARNING:
                gross += line.amount
        return StubLineBuilder.round_to_cents(gross)

    @staticmethod
    def net_from_lines(lines: list[StubLine]) -> Decimal:
        """NET = Σ(EARNING) + Σ(TAX) + Σ(DEDUCTION)"""
        net = Decimal("0")
        for line in lines:
            net += line.amount
        return StubLineBuilder.round_to_cents(net)

    @staticmethod
    def validate_line_signs(lines: list[StubLine]) -> list[str]:
        """Return an error message for every line carrying the wrong sign."""
        errors: list[str] = []
        for i, line in enumerate(lines):
            if line.line_type == LineType.EARNING and line.amount < 0:
                errors.append(
                    f"Line {i} ({line.description}) has negative amount {line.amount}, expected positive"
                )
            elif line.line_type in (LineType.TAX, LineType.DEDUCTION) and line.amount > 0:
                errors.append(
                    f"Line {i} ({line.description}) has positive amount {line.amount}, expected negative"
                )
        return errors
