"""Type definitions for the calculation and reporting core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_console.calculators.validation import (
    parse_date,
    require_date_order,
    require_fraction,
    require_non_negative,
)
from payroll_console.errors import ValidationError


class PayType(str, Enum):
    """How an employee's pay rate is interpreted."""

    HOURLY = "hourly"
    SALARY = "salary"


class FilingStatus(str, Enum):
    """Tax filing status. Carried on the profile, not used by flat withholding."""

    SINGLE = "single"
    MARRIED = "married"
    HEAD_OF_HOUSEHOLD = "head"


class RecordStatus(str, Enum):
    """Payroll record status values."""

    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"


class RecordSource(str, Enum):
    """Where a record's computed figures came from."""

    CALCULATED = "calculated"
    BACKEND = "backend"


class LineType(str, Enum):
    """Pay stub line types."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"
    TAX = "TAX"


@dataclass(frozen=True)
class CompensationProfile:
    """The pay-relevant subset of an employee."""

    pay_type: PayType
    pay_rate: Decimal
    retirement_rate: Decimal
    filing_status: FilingStatus = FilingStatus.SINGLE

    @classmethod
    def build(
        cls,
        pay_type: str | PayType,
        pay_rate: Any,
        retirement_rate: Any,
        filing_status: str | FilingStatus = FilingStatus.SINGLE,
    ) -> CompensationProfile:
        """Build a validated profile from loosely typed input."""
        try:
            pay_type = PayType(pay_type)
        except ValueError:
            raise ValidationError(f"Unknown pay type: {pay_type!r}", field="pay_type")
        try:
            filing_status = FilingStatus(filing_status)
        except ValueError:
            raise ValidationError(
                f"Unknown filing status: {filing_status!r}", field="filing_status"
            )
        return cls(
            pay_type=pay_type,
            pay_rate=require_non_negative(pay_rate, "pay_rate"),
            retirement_rate=require_fraction(retirement_rate, "retirement_rate"),
            filing_status=filing_status,
        )


@dataclass(frozen=True)
class PayPeriodInput:
    """Hours and tips for one pay period, as entered or imported."""

    pay_period_start: date
    pay_period_end: date
    regular_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    reported_tips: Decimal = Decimal("0")

    @classmethod
    def build(
        cls,
        pay_period_start: Any,
        pay_period_end: Any,
        regular_hours: Any = 0,
        overtime_hours: Any = 0,
        reported_tips: Any = 0,
    ) -> PayPeriodInput:
        """Build a validated period input from loosely typed input."""
        start = parse_date(pay_period_start, "pay_period_start")
        end = parse_date(pay_period_end, "pay_period_end")
        require_date_order(start, end)
        return cls(
            pay_period_start=start,
            pay_period_end=end,
            regular_hours=require_non_negative(regular_hours, "regular_hours"),
            overtime_hours=require_non_negative(overtime_hours, "overtime_hours"),
            reported_tips=require_non_negative(reported_tips, "reported_tips"),
        )

    def to_canonical_dict(self) -> dict[str, str]:
        """Return canonical dict for fingerprinting."""
        return {
            "pay_period_start": self.pay_period_start.isoformat(),
            "pay_period_end": self.pay_period_end.isoformat(),
            "regular_hours": str(self.regular_hours.normalize()),
            "overtime_hours": str(self.overtime_hours.normalize()),
            "reported_tips": str(self.reported_tips.normalize()),
        }


@dataclass(frozen=True)
class Deductions:
    """Deduction breakdown for one record."""

    tax: Decimal = Decimal("0")
    retirement: Decimal = Decimal("0")
    other: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.tax + self.retirement + self.other


@dataclass
class StubLine:
    """A single pay stub line."""

    line_type: LineType
    description: str
    amount: Decimal  # Signed: earnings positive, deductions and taxes negative
    hours: Decimal | None = None
    rate: Decimal | None = None


@dataclass(frozen=True)
class PayCalculation:
    """Result of calculating one pay period for one employee."""

    regular_pay: Decimal
    overtime_pay: Decimal
    tips: Decimal
    gross_pay: Decimal
    deductions: Deductions
    net_pay: Decimal
    lines: tuple[StubLine, ...] = ()
    inputs_fingerprint: str = ""


@dataclass(frozen=True)
class PayrollRecordData:
    """A persisted payroll record, detached from storage."""

    id: int
    employee_id: int
    pay_period_start: date
    pay_period_end: date
    regular_hours: Decimal
    overtime_hours: Decimal
    reported_tips: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    deductions: Deductions
    status: RecordStatus = RecordStatus.PENDING
    created_at: datetime | None = None
    source: RecordSource = RecordSource.CALCULATED


@dataclass(frozen=True)
class EmployeeRef:
    """What reporting and exports need to know about a record's owner."""

    id: int
    department_id: int | None
    first_name: str = ""
    last_name: str = ""
    employee_number: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class DepartmentRef:
    """Department id and display name."""

    id: int
    name: str


@dataclass
class ChartSeries:
    """Labelled series for dashboard charts."""

    labels: list[str] = field(default_factory=list)
    datasets: dict[str, list[Decimal]] = field(default_factory=dict)
