"""Tests for backend record normalisation."""

from datetime import date
from decimal import Decimal

import pytest

from payroll_console.calculators.types import RecordStatus
from payroll_console.errors import DataIntegrityError, ValidationError
from payroll_console.services.backend_records import normalize_backend_record


def payload(**overrides):
    data = {
        "employee_id": 7,
        "pay_period_start": "2024-03-01",
        "pay_period_end": "2024-03-15",
        "regular_hours": "80",
        "overtime_hours": "0",
        "reported_tips": "0",
        "gross_pay": "2000.00",
        "net_pay": "1450.00",
        "withholding_tax": "400.00",
        "retirement_payment": "80.00",
        "roth_retirement_payment": "20.00",
        "total_deductions": "550.00",
        "status": "processed",
    }
    data.update(overrides)
    return data


class TestNormalizeBackendRecord:
    """Backend figures map onto tax, retirement and other."""

    def test_other_is_the_remainder(self):
        record = normalize_backend_record(payload())

        assert record.employee_id == 7
        assert record.period.pay_period_end == date(2024, 3, 15)
        assert record.gross_pay == Decimal("2000.00")
        assert record.net_pay == Decimal("1450.00")
        assert record.deductions.tax == Decimal("400.00")
        assert record.deductions.retirement == Decimal("100.00")
        assert record.deductions.other == Decimal("50.00")
        assert record.status == RecordStatus.PROCESSED

    def test_roth_payment_optional(self):
        record = normalize_backend_record(
            payload(roth_retirement_payment=None, total_deductions="480.00", net_pay="1520.00")
        )

        assert record.deductions.retirement == Decimal("80.00")
        assert record.deductions.other == Decimal("0.00")

    def test_missing_status_defaults_to_pending(self):
        record = normalize_backend_record(payload(status=None))

        assert record.status == RecordStatus.PENDING

    def test_numbers_accepted(self):
        record = normalize_backend_record(
            payload(gross_pay=2000, net_pay=1450.0, withholding_tax=400, total_deductions=550)
        )

        assert record.deductions.other == Decimal("50")


class TestIntegrityFailures:
    """Figures that do not reconcile are never stored."""

    def test_negative_other_rejected(self):
        """Total deductions smaller than tax plus retirement."""
        with pytest.raises(DataIntegrityError) as exc_info:
            normalize_backend_record(payload(total_deductions="450.00", net_pay="1550.00"))

        assert "other" in str(exc_info.value)
        assert exc_info.value.code == "DATA_INTEGRITY_ERROR"

    def test_nan_rejected(self):
        with pytest.raises(DataIntegrityError):
            normalize_backend_record(payload(total_deductions="NaN"))

    def test_missing_figure_rejected(self):
        data = payload()
        del data["gross_pay"]
        with pytest.raises(DataIntegrityError, match="gross_pay"):
            normalize_backend_record(data)

    def test_non_numeric_rejected(self):
        with pytest.raises(DataIntegrityError):
            normalize_backend_record(payload(withholding_tax="lots"))

    def test_net_mismatch_rejected(self):
        with pytest.raises(DataIntegrityError) as exc_info:
            normalize_backend_record(payload(net_pay="1500.00"))

        assert exc_info.value.context["net_pay"] == Decimal("1500.00")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            normalize_backend_record(payload(status="void"))

    def test_missing_employee_rejected(self):
        with pytest.raises(ValidationError):
            normalize_backend_record(payload(employee_id=None))
