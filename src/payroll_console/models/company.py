"""Company and organizational structure models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_console.calculators.types import DepartmentRef
from payroll_console.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from payroll_console.models.employee import Employee


class Company(Base, TimestampMixin):
    """A client company whose payroll is administered."""

    __tablename__ = "company"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    location: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = {"sqlite_autoincrement": True}

    # Relationships
    departments: Mapped[list[Department]] = relationship(back_populates="company")
    custom_columns: Mapped[list[CustomColumn]] = relationship(back_populates="company")


class Department(Base, TimestampMixin):
    """Department within a company."""

    __tablename__ = "department"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("company.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("company_id", "name", name="department_company_name_unique"),
        {"sqlite_autoincrement": True},
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="departments")
    employees: Mapped[list[Employee]] = relationship(back_populates="department")

    def to_ref(self) -> DepartmentRef:
        return DepartmentRef(id=self.id, name=self.name)


class CustomColumn(Base):
    """Company-defined payroll column (bonus, health insurance, parking...)."""

    __tablename__ = "custom_column"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("company.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    column_type: Mapped[str] = mapped_column(String, nullable=False, default="number")
    is_deduction: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    include_in_payroll: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    not_subject_to_withholding: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    __table_args__ = (
        CheckConstraint(
            "column_type IN ('number', 'percentage', 'text')",
            name="custom_column_type_check",
        ),
        {"sqlite_autoincrement": True},
    )

    # Relationships
    company: Mapped[Company] = relationship(back_populates="custom_columns")
