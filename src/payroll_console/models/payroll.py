"""Payroll record model."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_console.calculators.types import (
    Deductions,
    PayrollRecordData,
    RecordSource,
    RecordStatus,
)
from payroll_console.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_console.models.employee import Employee


class PayrollRecord(Base, TimestampMixin):
    """One employee's pay for one pay period.

    Immutable after creation except for status.
    """

    __tablename__ = "payroll_record"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    regular_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    reported_tips: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    tax_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    retirement_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    other_deduction: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default=RecordStatus.PENDING.value)
    source: Mapped[str] = mapped_column(
        String, nullable=False, default=RecordSource.CALCULATED.value
    )
    idempotency_key: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    inputs_fingerprint: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'processed', 'paid')",
            name="payroll_record_status_check",
        ),
        CheckConstraint(
            "source IN ('calculated', 'backend')",
            name="payroll_record_source_check",
        ),
        CheckConstraint("pay_period_start <= pay_period_end", name="payroll_record_period_order"),
        CheckConstraint("gross_pay >= 0", name="payroll_record_gross_non_negative"),
        {"sqlite_autoincrement": True},
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="payroll_records")

    @property
    def deductions(self) -> Deductions:
        return Deductions(
            tax=self.tax_deduction,
            retirement=self.retirement_deduction,
            other=self.other_deduction,
        )

    def to_data(self) -> PayrollRecordData:
        """Detach into the domain record used by reporting and exports."""
        return PayrollRecordData(
            id=self.id,
            employee_id=self.employee_id,
            pay_period_start=self.pay_period_start,
            pay_period_end=self.pay_period_end,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            reported_tips=self.reported_tips,
            gross_pay=self.gross_pay,
            net_pay=self.net_pay,
            deductions=self.deductions,
            status=RecordStatus(self.status),
            created_at=self.created_at,
            source=RecordSource(self.source),
        )
