"""Payroll deduction calculator.

Implements:
  - CPP / QPP first-tier contributions (employee and matching employer share)
  - CPP2 / QPP2 second-tier contributions on earnings between YMPE and YAMPE
  - EI premiums (reduced Quebec rate), employer share at 1.4x
  - QPIP premiums (Quebec only)
  - Employer health tax (BC EHT, Manitoba HE levy) with notch formulas

Quebec rates are already substituted into ``TaxYearData`` by the resolver, so
the only province-specific branch here is whether a QPIP table is present.
"""

from decimal import Decimal

from ccpc.engines.provinces import get_employer_health_tax_schedule, resolve_province
from ccpc.models.enums import ProvinceCode
from ccpc.models.results import PayrollDeductions
from ccpc.models.tax_year import TaxYearData

ZERO = Decimal("0")


def calculate_cpp(salary: Decimal, tax_data: TaxYearData) -> Decimal:
    """First-tier CPP/QPP employee contribution."""
    cpp = tax_data.cpp
    if salary <= cpp.basic_exemption:
        return ZERO
    pensionable = max(min(salary, cpp.max_pensionable_earnings) - cpp.basic_exemption, ZERO)
    return min(pensionable * cpp.rate, cpp.max_contribution)


def calculate_cpp2(salary: Decimal, tax_data: TaxYearData) -> Decimal:
    """Second-tier CPP2/QPP2 employee contribution."""
    cpp2 = tax_data.cpp2
    if salary <= cpp2.first_ceiling:
        return ZERO
    earnings = max(min(salary, cpp2.second_ceiling) - cpp2.first_ceiling, ZERO)
    return min(earnings * cpp2.rate, cpp2.max_contribution)


def calculate_ei(salary: Decimal, tax_data: TaxYearData) -> Decimal:
    """EI employee premium."""
    ei = tax_data.ei
    insurable = min(max(salary, ZERO), ei.max_insurable_earnings)
    return min(insurable * ei.rate, ei.max_premium)


def calculate_qpip(salary: Decimal, tax_data: TaxYearData) -> tuple[Decimal, Decimal]:
    """QPIP (employee, employer) premiums; zero outside Quebec."""
    qpip = tax_data.qpip
    if qpip is None:
        return ZERO, ZERO
    insurable = min(max(salary, ZERO), qpip.max_insurable_earnings)
    employee = min(insurable * qpip.employee_rate, qpip.max_employee_premium)
    employer = min(insurable * qpip.employer_rate, qpip.max_employer_premium)
    return employee, employer


def calculate_payroll(salary: Decimal, tax_data: TaxYearData) -> PayrollDeductions:
    """All employee and employer payroll amounts for one salary."""
    if salary <= ZERO:
        return PayrollDeductions()

    cpp = calculate_cpp(salary, tax_data)
    cpp2 = calculate_cpp2(salary, tax_data)
    ei = calculate_ei(salary, tax_data)
    qpip, employer_qpip = calculate_qpip(salary, tax_data)

    return PayrollDeductions(
        cpp=cpp,
        cpp2=cpp2,
        ei=ei,
        qpip=qpip,
        employer_cpp=cpp,
        employer_cpp2=cpp2,
        employer_ei=ei * tax_data.ei.employer_multiplier,
        employer_qpip=employer_qpip,
    )


def calculate_employer_health_tax(
    total_payroll: Decimal, province: str | ProvinceCode, year: int
) -> Decimal:
    """Provincial employer health levy on total remuneration.

    Zero for provinces without such a tax. Between the exemption and the upper
    threshold the notch rate applies to the excess only; above it the full
    rate applies to the entire payroll. Both formulas agree at the threshold.
    """
    schedule = get_employer_health_tax_schedule(resolve_province(province), year)
    if schedule is None or total_payroll <= ZERO:
        return ZERO
    if total_payroll <= schedule.exemption:
        return ZERO
    if total_payroll <= schedule.upper_threshold:
        return (total_payroll - schedule.exemption) * schedule.notch_rate
    return total_payroll * schedule.full_rate
