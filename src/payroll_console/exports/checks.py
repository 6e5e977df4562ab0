"""Check data for printing a pay check and its stub.

Only the content is prepared here; rendering to PDF or paper is left to
the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_console.calculators.line_builder import StubLineBuilder
from payroll_console.calculators.pay_calculator import PayCalculator
from payroll_console.calculators.types import (
    CompensationProfile,
    EmployeeRef,
    PayPeriodInput,
    PayrollRecordData,
    StubLine,
)
from payroll_console.exports.csv_export import format_date

ONES = [
    "", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
    "seventeen", "eighteen", "nineteen",
]
TENS = [
    "", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety",
]
SCALES = ["", "thousand", "million", "billion"]


def _two_digits(num: int) -> str:
    if num < 20:
        return ONES[num]
    tens, ones = divmod(num, 10)
    return TENS[tens] + (f"-{ONES[ones]}" if ones else "")


def _group_words(num: int, tail: bool) -> list[str]:
    # One group of three digits; "and" joins a trailing tens part to what precedes it.
    words: list[str] = []
    hundreds, rest = divmod(num, 100)
    if hundreds:
        words += [ONES[hundreds], "hundred"]
    if rest:
        if words or tail:
            words.append("and")
        words.append(_two_digits(rest))
    return words


def amount_in_words(amount: Decimal) -> str:
    """Spell out a dollar amount the way it is written on a check.

    >>> amount_in_words(Decimal("2479.00"))
    'Two thousand four hundred and seventy-nine dollars'
    >>> amount_in_words(Decimal("12.05"))
    'Twelve dollars and five cents'
    """
    cents_total = int(StubLineBuilder.round_to_cents(abs(amount)) * 100)
    dollars, cents = divmod(cents_total, 100)

    if dollars == 0:
        words = ["zero"]
    else:
        groups: list[int] = []
        remaining = dollars
        while remaining:
            remaining, group = divmod(remaining, 1000)
            groups.append(group)
        if len(groups) > len(SCALES):
            raise ValueError(f"Amount too large to spell out: {amount}")

        words = []
        for scale in range(len(groups) - 1, -1, -1):
            group = groups[scale]
            if not group:
                continue
            # Only the last group may need "and" without its own hundreds.
            words += _group_words(group, tail=bool(words) and scale == 0)
            if SCALES[scale]:
                words.append(SCALES[scale])

    text = " ".join(words) + " dollars"
    if cents:
        text += f" and {_two_digits(cents)} cents"
    return text[0].upper() + text[1:]


@dataclass(frozen=True)
class CheckData:
    """Everything printed on a pay check and its stub."""

    company_name: str
    payee: str
    amount: Decimal
    amount_in_words: str
    date: date
    memo: str
    lines: tuple[StubLine, ...]
    gross_pay: Decimal
    net_pay: Decimal


def build_check(
    record: PayrollRecordData,
    employee: EmployeeRef,
    company_name: str,
    profile: CompensationProfile | None = None,
) -> CheckData:
    """Prepare check data for a stored payroll record.

    Earnings lines are derived from the employee's compensation profile when
    one is given and they add up to the stored gross pay; otherwise the stub
    shows a single gross earnings line. Deduction lines and the totals always
    come from the stored record.
    """
    lines: list[StubLine] = []
    if profile is not None:
        period = PayPeriodInput(
            pay_period_start=record.pay_period_start,
            pay_period_end=record.pay_period_end,
            regular_hours=record.regular_hours,
            overtime_hours=record.overtime_hours,
            reported_tips=record.reported_tips,
        )
        calculation = PayCalculator().calculate(profile, period)
        lines = StubLineBuilder.earnings_lines(
            calculation.regular_pay,
            calculation.overtime_pay,
            calculation.tips,
            record.regular_hours,
            record.overtime_hours,
            profile.pay_rate,
        )
        # Backend figures or a changed pay rate no longer match the profile.
        if StubLineBuilder.gross_from_lines(lines) != record.gross_pay:
            lines = []
    if not lines:
        lines = [StubLineBuilder.create_earning_line("Gross Pay", record.gross_pay)]
    lines.extend(StubLineBuilder.deduction_lines(record.deductions))

    return CheckData(
        company_name=company_name,
        payee=employee.full_name,
        amount=record.net_pay,
        amount_in_words=amount_in_words(record.net_pay),
        date=record.pay_period_end,
        memo=(
            f"Pay Period: {format_date(record.pay_period_start)} - "
            f"{format_date(record.pay_period_end)}"
        ),
        lines=tuple(lines),
        gross_pay=record.gross_pay,
        net_pay=record.net_pay,
    )
