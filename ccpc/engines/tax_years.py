"""Tax-year data resolver.

Returns every statutory constant needed to project one calendar year in one
jurisdiction. Known years come straight from ``tax_tables``; later years are
compounded forward from the latest known year, and earlier years backward from
the earliest, by ``(1 + inflation) ** years``.

Each indexed constant carries its own rounding convention (``INDEXATION_RULES``).
Rates are never indexed. Constants fixed by statute (CPP basic exemption,
Ontario Health Premium schedule, SBD limit and grind thresholds) are excluded.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import StrEnum
from functools import lru_cache

from ccpc.engines import tax_tables as t
from ccpc.engines.provinces import resolve_province
from ccpc.models.enums import ProvinceCode
from ccpc.models.tax_year import (
    ContributionLimits,
    CorporateRates,
    DividendTaxRates,
    HealthPremiumBracket,
    InsuranceRates,
    ParentalInsuranceRates,
    PensionPlanRates,
    SecondTierPensionRates,
    SurtaxTier,
    TaxBracket,
    TaxYearData,
)

CENT = Decimal("0.01")
YAMPE_FACTOR = Decimal("1.14")


class Rounding(StrEnum):
    DOLLAR = "DOLLAR"  # nearest dollar
    DOWN_TO_100 = "DOWN_TO_100"
    NEAREST_500 = "NEAREST_500"
    DOWN_TO_500 = "DOWN_TO_500"
    NEAREST_10 = "NEAREST_10"
    CENTS = "CENTS"  # recomputed from indexed ceilings, not compounded
    NOT_INDEXED = "NOT_INDEXED"


# Every indexed constant and how the authority rounds it.
INDEXATION_RULES: dict[str, Rounding] = {
    "federal_brackets.threshold": Rounding.DOLLAR,
    "federal_basic_personal_amount": Rounding.DOLLAR,
    "provincial_brackets.threshold": Rounding.DOLLAR,
    "provincial_basic_personal_amount": Rounding.DOLLAR,
    "provincial_surtax.threshold": Rounding.DOLLAR,
    "health_premium": Rounding.NOT_INDEXED,
    "cpp.max_pensionable_earnings": Rounding.DOWN_TO_100,
    "cpp.basic_exemption": Rounding.NOT_INDEXED,
    "cpp.max_contribution": Rounding.CENTS,
    "cpp2.second_ceiling": Rounding.DOWN_TO_100,  # 114% of YMPE
    "cpp2.max_contribution": Rounding.CENTS,
    "ei.max_insurable_earnings": Rounding.DOWN_TO_100,
    "ei.max_premium": Rounding.CENTS,
    "qpip.max_insurable_earnings": Rounding.NEAREST_500,
    "qpip.max_employee_premium": Rounding.CENTS,
    "qpip.max_employer_premium": Rounding.CENTS,
    "contributions.rrsp_dollar_limit": Rounding.NEAREST_10,
    "contributions.tfsa_annual_limit": Rounding.DOWN_TO_500,
    "corporate.small_business_limit": Rounding.NOT_INDEXED,
}


def _apply_rounding(value: Decimal, rule: Rounding) -> Decimal:
    match rule:
        case Rounding.DOLLAR:
            return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        case Rounding.DOWN_TO_100:
            return (value / 100).to_integral_value(rounding=ROUND_FLOOR) * 100
        case Rounding.NEAREST_500:
            return (value / 500).to_integral_value(rounding=ROUND_HALF_UP) * 500
        case Rounding.DOWN_TO_500:
            return (value / 500).to_integral_value(rounding=ROUND_FLOOR) * 500
        case Rounding.NEAREST_10:
            return (value / 10).to_integral_value(rounding=ROUND_HALF_UP) * 10
        case Rounding.CENTS:
            return value.quantize(CENT, rounding=ROUND_HALF_UP)
        case Rounding.NOT_INDEXED:
            return value


def _index(value: Decimal, factor: Decimal, field: str) -> Decimal:
    rule = INDEXATION_RULES[field]
    if rule == Rounding.NOT_INDEXED:
        return value
    return _apply_rounding(value * factor, rule)


def indexation_factor(inflation_rate: Decimal, years: int) -> Decimal:
    """(1 + inflation) ** years; negative ``years`` deflates."""
    return (Decimal("1") + inflation_rate) ** years


# ---------------------------------------------------------------------------
# Known years
# ---------------------------------------------------------------------------

def _brackets(rows: tuple[tuple[Decimal, Decimal], ...]) -> tuple[TaxBracket, ...]:
    return tuple(TaxBracket(threshold=threshold, rate=rate) for threshold, rate in rows)


def _known_year(year: int, province: ProvinceCode) -> TaxYearData:
    is_quebec = province == ProvinceCode.QC
    cpp = t.QPP[year] if is_quebec else t.CPP[year]
    cpp2 = t.QPP2[year] if is_quebec else t.CPP2[year]
    ei = t.QUEBEC_EI[year] if is_quebec else t.EI[year]
    eligible_credit, non_eligible_credit = t.PROVINCIAL_DIVIDEND_CREDITS[province]
    small_business, general = t.PROVINCIAL_CORPORATE_RATES[province]

    qpip = None
    if is_quebec:
        qpip = ParentalInsuranceRates(**t.QPIP[year])

    health_premium: tuple[HealthPremiumBracket, ...] = ()
    if province == ProvinceCode.ON:
        health_premium = tuple(
            HealthPremiumBracket(threshold=thr, base=base, rate=rate, max_premium=cap)
            for thr, base, rate, cap in t.ONTARIO_HEALTH_PREMIUM
        )

    return TaxYearData(
        year=year,
        province=province,
        federal_brackets=_brackets(t.FEDERAL_BRACKETS[year]),
        federal_basic_personal_amount=t.FEDERAL_BASIC_PERSONAL_AMOUNT[year],
        provincial_brackets=_brackets(t.PROVINCIAL_BRACKETS[year][province]),
        provincial_basic_personal_amount=t.PROVINCIAL_BASIC_PERSONAL_AMOUNT[year][province],
        provincial_surtax=tuple(
            SurtaxTier(threshold=thr, rate=rate)
            for thr, rate in t.PROVINCIAL_SURTAX[year].get(province, ())
        ),
        health_premium=health_premium,
        dividends=DividendTaxRates(
            eligible_gross_up=t.ELIGIBLE_GROSS_UP,
            eligible_federal_credit=t.ELIGIBLE_FEDERAL_CREDIT,
            eligible_provincial_credit=eligible_credit,
            non_eligible_gross_up=t.NON_ELIGIBLE_GROSS_UP,
            non_eligible_federal_credit=t.NON_ELIGIBLE_FEDERAL_CREDIT,
            non_eligible_provincial_credit=non_eligible_credit,
        ),
        corporate=CorporateRates(
            small_business_rate=t.FEDERAL_SMALL_BUSINESS_RATE + small_business,
            general_rate=t.FEDERAL_GENERAL_RATE + general,
            small_business_limit=t.SMALL_BUSINESS_LIMIT,
            investment_income_rate=t.INVESTMENT_INCOME_RATES[province],
            refundable_rate=t.REFUNDABLE_INVESTMENT_TAX_RATE,
            part_iv_rate=t.PART_IV_TAX_RATE,
            dividend_refund_rate=t.DIVIDEND_REFUND_RATE,
        ),
        cpp=PensionPlanRates(
            rate=cpp["rate"],
            max_pensionable_earnings=cpp["ympe"],
            basic_exemption=cpp["basic_exemption"],
            max_contribution=cpp["max_contribution"],
        ),
        cpp2=SecondTierPensionRates(**cpp2),
        ei=InsuranceRates(
            rate=ei["rate"],
            max_insurable_earnings=ei["max_insurable_earnings"],
            max_premium=ei["max_premium"],
            employer_multiplier=t.EI_EMPLOYER_MULTIPLIER,
        ),
        qpip=qpip,
        contributions=ContributionLimits(
            rrsp_rate=t.RRSP_CONTRIBUTION_RATE,
            rrsp_dollar_limit=t.RRSP_DOLLAR_LIMIT[year],
            tfsa_annual_limit=t.TFSA_ANNUAL_LIMIT[year],
        ),
    )


# ---------------------------------------------------------------------------
# Projected years
# ---------------------------------------------------------------------------

def _project(base: TaxYearData, year: int, factor: Decimal) -> TaxYearData:
    """Index ``base`` by ``factor`` following INDEXATION_RULES."""
    ympe = _index(base.cpp.max_pensionable_earnings, factor, "cpp.max_pensionable_earnings")
    exemption = _index(base.cpp.basic_exemption, factor, "cpp.basic_exemption")
    yampe = _apply_rounding(ympe * YAMPE_FACTOR, INDEXATION_RULES["cpp2.second_ceiling"])
    insurable = _index(base.ei.max_insurable_earnings, factor, "ei.max_insurable_earnings")

    qpip = None
    if base.qpip is not None:
        qpip_insurable = _index(
            base.qpip.max_insurable_earnings, factor, "qpip.max_insurable_earnings"
        )
        qpip = base.qpip.model_copy(
            update={
                "max_insurable_earnings": qpip_insurable,
                "max_employee_premium": _apply_rounding(
                    qpip_insurable * base.qpip.employee_rate, Rounding.CENTS
                ),
                "max_employer_premium": _apply_rounding(
                    qpip_insurable * base.qpip.employer_rate, Rounding.CENTS
                ),
            }
        )

    return base.model_copy(
        update={
            "year": year,
            "is_projected": True,
            "federal_brackets": tuple(
                TaxBracket(
                    threshold=_index(b.threshold, factor, "federal_brackets.threshold"),
                    rate=b.rate,
                )
                for b in base.federal_brackets
            ),
            "federal_basic_personal_amount": _index(
                base.federal_basic_personal_amount, factor, "federal_basic_personal_amount"
            ),
            "provincial_brackets": tuple(
                TaxBracket(
                    threshold=_index(b.threshold, factor, "provincial_brackets.threshold"),
                    rate=b.rate,
                )
                for b in base.provincial_brackets
            ),
            "provincial_basic_personal_amount": _index(
                base.provincial_basic_personal_amount, factor, "provincial_basic_personal_amount"
            ),
            "provincial_surtax": tuple(
                SurtaxTier(
                    threshold=_index(s.threshold, factor, "provincial_surtax.threshold"),
                    rate=s.rate,
                )
                for s in base.provincial_surtax
            ),
            "cpp": base.cpp.model_copy(
                update={
                    "max_pensionable_earnings": ympe,
                    "basic_exemption": exemption,
                    "max_contribution": _apply_rounding(
                        (ympe - exemption) * base.cpp.rate, Rounding.CENTS
                    ),
                }
            ),
            "cpp2": base.cpp2.model_copy(
                update={
                    "first_ceiling": ympe,
                    "second_ceiling": yampe,
                    "max_contribution": _apply_rounding(
                        (yampe - ympe) * base.cpp2.rate, Rounding.CENTS
                    ),
                }
            ),
            "ei": base.ei.model_copy(
                update={
                    "max_insurable_earnings": insurable,
                    "max_premium": _apply_rounding(insurable * base.ei.rate, Rounding.CENTS),
                }
            ),
            "qpip": qpip,
            "contributions": base.contributions.model_copy(
                update={
                    "rrsp_dollar_limit": _index(
                        base.contributions.rrsp_dollar_limit,
                        factor,
                        "contributions.rrsp_dollar_limit",
                    ),
                    "tfsa_annual_limit": _index(
                        base.contributions.tfsa_annual_limit,
                        factor,
                        "contributions.tfsa_annual_limit",
                    ),
                }
            ),
        }
    )


@lru_cache(maxsize=1024)
def _resolve(year: int, province: ProvinceCode, inflation_rate: Decimal) -> TaxYearData:
    if year in t.KNOWN_YEARS:
        return _known_year(year, province)
    base_year = t.LATEST_KNOWN_YEAR if year > t.LATEST_KNOWN_YEAR else t.EARLIEST_KNOWN_YEAR
    factor = indexation_factor(inflation_rate, year - base_year)
    return _project(_known_year(base_year, province), year, factor)


def get_tax_year_data(
    year: int,
    province: str | ProvinceCode = ProvinceCode.ON,
    inflation_rate: Decimal = t.DEFAULT_INFLATION_RATE,
    override: TaxYearData | None = None,
) -> TaxYearData:
    """Resolve all statutory constants for ``year`` in ``province``.

    ``override`` supplies a hand-verified table for a historical year; it is
    returned unchanged when its year and province match the query.

    Raises:
        UnknownProvinceError: ``province`` is not one of the 13 codes.
    """
    code = resolve_province(province)
    if override is not None and override.year == year and override.province == code:
        return override
    return _resolve(year, code, Decimal(str(inflation_rate)))
