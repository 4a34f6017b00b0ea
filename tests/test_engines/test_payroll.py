"""Tests for payroll deductions and employer health tax."""

from decimal import Decimal

import pytest

from ccpc.engines.payroll import (
    calculate_cpp,
    calculate_cpp2,
    calculate_ei,
    calculate_employer_health_tax,
    calculate_payroll,
    calculate_qpip,
)
from ccpc.engines.tax_years import get_tax_year_data

HUGE_SALARY = Decimal("10000000")


class TestCaps:
    def test_cpp_capped(self, on_2025):
        assert calculate_cpp(HUGE_SALARY, on_2025) == Decimal("4034.10")

    def test_cpp2_capped(self, on_2025):
        assert calculate_cpp2(HUGE_SALARY, on_2025) == Decimal("396.00")

    def test_ei_capped(self, on_2025):
        assert calculate_ei(HUGE_SALARY, on_2025) == Decimal("1077.48")

    @pytest.mark.parametrize("year", [2025, 2026, 2028, 2035])
    def test_caps_hold_in_projected_years(self, year):
        data = get_tax_year_data(year, "ON")
        payroll = calculate_payroll(HUGE_SALARY, data)
        assert payroll.cpp == data.cpp.max_contribution
        assert payroll.cpp2 == data.cpp2.max_contribution
        assert payroll.ei == data.ei.max_premium


class TestCpp:
    def test_below_basic_exemption(self, on_2025):
        assert calculate_cpp(Decimal("3000"), on_2025) == Decimal("0")

    def test_mid_salary(self, on_2025):
        # (50000 - 3500) * 5.95%
        assert calculate_cpp(Decimal("50000"), on_2025) == Decimal("2766.75")

    def test_cpp2_zero_at_ympe(self, on_2025):
        assert calculate_cpp2(Decimal("71300"), on_2025) == Decimal("0")

    def test_cpp2_between_ceilings(self, on_2025):
        assert calculate_cpp2(Decimal("76300"), on_2025) == Decimal("200.00")


class TestCalculatePayroll:
    def test_zero_salary(self, on_2025):
        payroll = calculate_payroll(Decimal("0"), on_2025)
        assert payroll.employee_total == Decimal("0")
        assert payroll.employer_total == Decimal("0")

    def test_employer_match(self, on_2025):
        payroll = calculate_payroll(HUGE_SALARY, on_2025)
        assert payroll.employer_cpp == payroll.cpp
        assert payroll.employer_cpp2 == payroll.cpp2
        assert payroll.employer_ei == Decimal("1077.48") * Decimal("1.4")
        assert payroll.qpip == Decimal("0")

    def test_quebec_uses_qpp_and_qpip(self, qc_2025):
        payroll = calculate_payroll(HUGE_SALARY, qc_2025)
        assert payroll.cpp == Decimal("4339.20")
        assert payroll.ei == qc_2025.ei.max_premium
        assert payroll.qpip == Decimal("484.12")
        assert payroll.employer_qpip == Decimal("678.16")

    def test_qpip_zero_outside_quebec(self, on_2025):
        assert calculate_qpip(HUGE_SALARY, on_2025) == (Decimal("0"), Decimal("0"))


class TestEmployerHealthTax:
    def test_no_levy_in_ontario(self):
        assert calculate_employer_health_tax(Decimal("5000000"), "ON", 2025) == Decimal("0")

    def test_bc_below_exemption(self):
        assert calculate_employer_health_tax(Decimal("1000000"), "BC", 2025) == Decimal("0")

    def test_bc_notch_band(self):
        # (1,200,000 - 1,000,000) * 5.85%
        assert calculate_employer_health_tax(Decimal("1200000"), "BC", 2025) == Decimal("11700")

    def test_bc_continuity_at_upper_threshold(self):
        at = calculate_employer_health_tax(Decimal("1500000"), "BC", 2025)
        above = calculate_employer_health_tax(Decimal("1500000.01"), "BC", 2025)
        assert at == Decimal("29250")
        assert abs(above - at) < Decimal("0.01")

    def test_mb_continuity_at_upper_threshold(self):
        at = calculate_employer_health_tax(Decimal("4500000"), "MB", 2025)
        assert at == Decimal("96750")
        assert at == Decimal("4500000") * Decimal("0.0215")

    def test_mb_2026_thresholds(self):
        assert calculate_employer_health_tax(Decimal("2400000"), "MB", 2026) == Decimal("0")
        assert calculate_employer_health_tax(Decimal("5000000"), "MB", 2026) == Decimal("107500")

    def test_bc_flat_rate_above_threshold(self):
        assert calculate_employer_health_tax(Decimal("2000000"), "BC", 2025) == Decimal("39000")
