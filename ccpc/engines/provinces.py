"""Province and territory metadata.

Feature flags, top combined marginal rates, and employer health tax schedules
(BC Employer Health Tax, Manitoba Health and Post Secondary Education Tax Levy).
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from ccpc.exceptions import UnknownProvinceError
from ccpc.models.enums import ProvinceCode


class ProvinceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: ProvinceCode
    name: str
    has_surtax: bool = False
    has_health_premium: bool = False
    has_employer_health_tax: bool = False
    uses_qpp: bool = False
    has_qpip: bool = False
    top_combined_rate: Decimal


class EmployerHealthTaxSchedule(BaseModel):
    """Notch schedule: zero up to ``exemption``, ``notch_rate`` on the excess up
    to ``upper_threshold``, then ``full_rate`` on the whole payroll."""

    model_config = ConfigDict(frozen=True)

    exemption: Decimal
    upper_threshold: Decimal
    notch_rate: Decimal
    full_rate: Decimal


PROVINCES: dict[ProvinceCode, ProvinceInfo] = {
    info.code: info
    for info in [
        ProvinceInfo(code=ProvinceCode.AB, name="Alberta", top_combined_rate=Decimal("0.48")),
        ProvinceInfo(
            code=ProvinceCode.BC,
            name="British Columbia",
            has_employer_health_tax=True,
            top_combined_rate=Decimal("0.535"),
        ),
        ProvinceInfo(
            code=ProvinceCode.MB,
            name="Manitoba",
            has_employer_health_tax=True,
            top_combined_rate=Decimal("0.504"),
        ),
        ProvinceInfo(code=ProvinceCode.NB, name="New Brunswick", top_combined_rate=Decimal("0.525")),
        ProvinceInfo(
            code=ProvinceCode.NL,
            name="Newfoundland and Labrador",
            top_combined_rate=Decimal("0.548"),
        ),
        ProvinceInfo(code=ProvinceCode.NS, name="Nova Scotia", top_combined_rate=Decimal("0.54")),
        ProvinceInfo(
            code=ProvinceCode.NT,
            name="Northwest Territories",
            top_combined_rate=Decimal("0.4705"),
        ),
        ProvinceInfo(code=ProvinceCode.NU, name="Nunavut", top_combined_rate=Decimal("0.445")),
        ProvinceInfo(
            code=ProvinceCode.ON,
            name="Ontario",
            has_surtax=True,
            has_health_premium=True,
            top_combined_rate=Decimal("0.5353"),
        ),
        ProvinceInfo(
            code=ProvinceCode.PE,
            name="Prince Edward Island",
            has_surtax=True,
            top_combined_rate=Decimal("0.52"),
        ),
        ProvinceInfo(
            code=ProvinceCode.QC,
            name="Quebec",
            uses_qpp=True,
            has_qpip=True,
            top_combined_rate=Decimal("0.5331"),
        ),
        ProvinceInfo(code=ProvinceCode.SK, name="Saskatchewan", top_combined_rate=Decimal("0.475")),
        ProvinceInfo(code=ProvinceCode.YT, name="Yukon", top_combined_rate=Decimal("0.48")),
    ]
}

# Employer health tax thresholds are set by statute, not indexed.
# {province: [(first_year, schedule), ...]} with first_year ascending.
EMPLOYER_HEALTH_TAX: dict[ProvinceCode, list[tuple[int, EmployerHealthTaxSchedule]]] = {
    ProvinceCode.BC: [
        (
            2019,
            EmployerHealthTaxSchedule(
                exemption=Decimal("1000000"),
                upper_threshold=Decimal("1500000"),
                notch_rate=Decimal("0.0585"),
                full_rate=Decimal("0.0195"),
            ),
        ),
    ],
    ProvinceCode.MB: [
        (
            2024,
            EmployerHealthTaxSchedule(
                exemption=Decimal("2250000"),
                upper_threshold=Decimal("4500000"),
                notch_rate=Decimal("0.043"),
                full_rate=Decimal("0.0215"),
            ),
        ),
        (
            2026,
            EmployerHealthTaxSchedule(
                exemption=Decimal("2500000"),
                upper_threshold=Decimal("5000000"),
                notch_rate=Decimal("0.043"),
                full_rate=Decimal("0.0215"),
            ),
        ),
    ],
}


def resolve_province(code: str | ProvinceCode) -> ProvinceCode:
    """Normalize a province code, raising UnknownProvinceError if unrecognized."""
    try:
        return ProvinceCode(str(code).strip().upper())
    except ValueError:
        raise UnknownProvinceError(str(code)) from None


def get_province_info(code: str | ProvinceCode) -> ProvinceInfo:
    return PROVINCES[resolve_province(code)]


def get_employer_health_tax_schedule(
    province: ProvinceCode, year: int
) -> EmployerHealthTaxSchedule | None:
    """Schedule in force for ``year``; the earliest schedule applies to earlier years."""
    schedules = EMPLOYER_HEALTH_TAX.get(province)
    if not schedules:
        return None
    selected = schedules[0][1]
    for first_year, schedule in schedules:
        if year >= first_year:
            selected = schedule
    return selected
