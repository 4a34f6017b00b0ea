"""Statutory constants for one tax year and jurisdiction.

A ``TaxYearData`` value is produced by the tax-year resolver for a
(year, province, inflation) query and is never mutated afterwards. In Quebec
the ``cpp``/``cpp2``/``ei`` fields carry QPP, QPP2 and the reduced Quebec EI
rate, and ``qpip`` is populated.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ccpc.models.enums import ProvinceCode


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class TaxBracket(FrozenModel):
    """Marginal rate applying to income above ``threshold``."""

    threshold: Decimal
    rate: Decimal


class SurtaxTier(FrozenModel):
    """Surtax of ``rate`` on provincial tax above ``threshold``."""

    threshold: Decimal
    rate: Decimal


class HealthPremiumBracket(FrozenModel):
    threshold: Decimal
    base: Decimal
    rate: Decimal
    max_premium: Decimal


class PensionPlanRates(FrozenModel):
    """First-tier CPP/QPP contribution parameters (employee share)."""

    rate: Decimal
    max_pensionable_earnings: Decimal  # YMPE
    basic_exemption: Decimal
    max_contribution: Decimal


class SecondTierPensionRates(FrozenModel):
    """CPP2/QPP2 contribution parameters (employee share)."""

    rate: Decimal
    first_ceiling: Decimal  # YMPE
    second_ceiling: Decimal  # YAMPE
    max_contribution: Decimal


class InsuranceRates(FrozenModel):
    """Employment insurance premium parameters."""

    rate: Decimal
    max_insurable_earnings: Decimal
    max_premium: Decimal
    employer_multiplier: Decimal = Decimal("1.4")


class ParentalInsuranceRates(FrozenModel):
    """Quebec Parental Insurance Plan premiums."""

    employee_rate: Decimal
    employer_rate: Decimal
    max_insurable_earnings: Decimal
    max_employee_premium: Decimal
    max_employer_premium: Decimal


class DividendTaxRates(FrozenModel):
    """Gross-up and credit rates; credits are fractions of the grossed-up dividend."""

    eligible_gross_up: Decimal
    eligible_federal_credit: Decimal
    eligible_provincial_credit: Decimal
    non_eligible_gross_up: Decimal
    non_eligible_federal_credit: Decimal
    non_eligible_provincial_credit: Decimal


class CorporateRates(FrozenModel):
    """Combined federal + provincial corporate rates."""

    small_business_rate: Decimal
    general_rate: Decimal
    small_business_limit: Decimal = Decimal("500000")
    investment_income_rate: Decimal
    refundable_rate: Decimal = Decimal("0.3067")
    part_iv_rate: Decimal = Decimal("0.3833")
    dividend_refund_rate: Decimal = Decimal("0.3833")


class ContributionLimits(FrozenModel):
    rrsp_rate: Decimal = Decimal("0.18")
    rrsp_dollar_limit: Decimal
    tfsa_annual_limit: Decimal


class TaxYearData(FrozenModel):
    """All statutory constants needed to project one calendar year."""

    year: int
    province: ProvinceCode
    is_projected: bool = Field(
        default=False, description="True when indexed from a known year rather than legislated"
    )
    federal_brackets: tuple[TaxBracket, ...]
    federal_basic_personal_amount: Decimal
    provincial_brackets: tuple[TaxBracket, ...]
    provincial_basic_personal_amount: Decimal
    provincial_surtax: tuple[SurtaxTier, ...] = ()
    health_premium: tuple[HealthPremiumBracket, ...] = ()
    dividends: DividendTaxRates
    corporate: CorporateRates
    cpp: PensionPlanRates
    cpp2: SecondTierPensionRates
    ei: InsuranceRates
    qpip: ParentalInsuranceRates | None = None
    contributions: ContributionLimits
