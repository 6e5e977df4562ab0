"""Employee model."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_console.calculators.types import CompensationProfile, EmployeeRef
from payroll_console.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_console.models.company import Department
    from payroll_console.models.payroll import PayrollRecord


class Employee(Base, TimestampMixin):
    """Employee record with its compensation profile."""

    __tablename__ = "employee"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    department_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("department.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    employee_number: Mapped[str] = mapped_column(String, nullable=False, index=True)
    pay_type: Mapped[str] = mapped_column(String, nullable=False, default="hourly")
    pay_rate: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False)
    filing_status: Mapped[str] = mapped_column(String, nullable=False, default="single")
    retirement_rate: Mapped[Decimal] = mapped_column(
        Numeric(6, 4), nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        CheckConstraint("pay_type IN ('hourly', 'salary')", name="employee_pay_type_check"),
        CheckConstraint("pay_rate >= 0", name="employee_pay_rate_non_negative"),
        CheckConstraint(
            "retirement_rate >= 0 AND retirement_rate <= 1",
            name="employee_retirement_rate_fraction",
        ),
        {"sqlite_autoincrement": True},
    )

    # Relationships
    department: Mapped[Department] = relationship(back_populates="employees")
    payroll_records: Mapped[list[PayrollRecord]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    def to_profile(self) -> CompensationProfile:
        return CompensationProfile.build(
            pay_type=self.pay_type,
            pay_rate=self.pay_rate,
            retirement_rate=self.retirement_rate,
            filing_status=self.filing_status,
        )

    def to_ref(self) -> EmployeeRef:
        return EmployeeRef(
            id=self.id,
            department_id=self.department_id,
            first_name=self.first_name,
            last_name=self.last_name,
            employee_number=self.employee_number,
        )
