"""Statutory tax tables for the known (legislated) years.

Federal and provincial/territorial brackets, basic personal amounts, dividend
tax credits, corporate rates, payroll ceilings and contribution limits.
Keyed by tax year and province. Never hardcode these in computation functions;
years outside the table are indexed by ``ccpc.engines.tax_years``.

Sources:
  - 2025: CRA T4127 Payroll Deductions Formulas (122nd ed.), TD1 2025 forms,
    Revenu Québec TP-1015.F-V (2025), CRA RRSP/TFSA limit tables
  - 2026: CRA T4127 (124th ed.), TD1 2026 forms, Revenu Québec TP-1015.F-V (2026)
"""

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType

from ccpc.models.enums import ProvinceCode


def _frozen(table: dict) -> MappingProxyType:
    """Read-only view of ``table``; nested dicts are frozen too."""
    return MappingProxyType(
        {k: _frozen(v) if isinstance(v, dict) else v for k, v in table.items()}
    )


KNOWN_YEARS: tuple[int, ...] = (2025, 2026)
EARLIEST_KNOWN_YEAR = KNOWN_YEARS[0]
LATEST_KNOWN_YEAR = KNOWN_YEARS[-1]

# CRA indexation factors by year; the latest is the default inflation assumption.
CRA_INDEXATION_FACTORS: Mapping[int, Decimal] = _frozen({
    2024: Decimal("0.047"),
    2025: Decimal("0.027"),
    2026: Decimal("0.020"),
})
DEFAULT_INFLATION_RATE = CRA_INDEXATION_FACTORS[max(CRA_INDEXATION_FACTORS)]

# ---------------------------------------------------------------------------
# Federal brackets: {year: ((threshold, rate), ...)}, first threshold is 0.
# 2025 lowest rate is the blended 14.5% (15% Jan-Jun, 14% Jul-Dec).
# ---------------------------------------------------------------------------
FEDERAL_BRACKETS: Mapping[int, tuple[tuple[Decimal, Decimal], ...]] = _frozen({
    2025: (
        (Decimal("0"), Decimal("0.145")),
        (Decimal("57375"), Decimal("0.205")),
        (Decimal("114750"), Decimal("0.26")),
        (Decimal("177882"), Decimal("0.29")),
        (Decimal("253414"), Decimal("0.33")),
    ),
    2026: (
        (Decimal("0"), Decimal("0.14")),
        (Decimal("58523"), Decimal("0.205")),
        (Decimal("117045"), Decimal("0.26")),
        (Decimal("181440"), Decimal("0.29")),
        (Decimal("258482"), Decimal("0.33")),
    ),
})

FEDERAL_BASIC_PERSONAL_AMOUNT: Mapping[int, Decimal] = _frozen({
    2025: Decimal("15705"),
    2026: Decimal("16452"),
})

# ---------------------------------------------------------------------------
# Federal dividend gross-up and credit (credit as a fraction of grossed-up amount)
# ---------------------------------------------------------------------------
ELIGIBLE_GROSS_UP = Decimal("0.38")
ELIGIBLE_FEDERAL_CREDIT = Decimal("0.150198")
NON_ELIGIBLE_GROSS_UP = Decimal("0.15")
NON_ELIGIBLE_FEDERAL_CREDIT = Decimal("0.090301")

# ---------------------------------------------------------------------------
# Federal corporate rates and refundable taxes
# ---------------------------------------------------------------------------
FEDERAL_SMALL_BUSINESS_RATE = Decimal("0.09")
FEDERAL_GENERAL_RATE = Decimal("0.15")
SMALL_BUSINESS_LIMIT = Decimal("500000")
REFUNDABLE_INVESTMENT_TAX_RATE = Decimal("0.3067")  # ITA 129(4), to nRDTOH
PART_IV_TAX_RATE = Decimal("0.3833")  # on portfolio dividends, to eRDTOH
DIVIDEND_REFUND_RATE = Decimal("0.3833")  # refund per dollar of taxable dividend

# Passive income grind (ITA 125(5.1)(b)); fixed by statute, not indexed.
GRIND_THRESHOLD = Decimal("50000")
GRIND_RATE = Decimal("5")

# ---------------------------------------------------------------------------
# CPP / CPP2 / EI: {year: {...}}
# ---------------------------------------------------------------------------
CPP: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "rate": Decimal("0.0595"),
        "ympe": Decimal("71300"),
        "basic_exemption": Decimal("3500"),
        "max_contribution": Decimal("4034.10"),
    },
    2026: {
        "rate": Decimal("0.0595"),
        "ympe": Decimal("74600"),
        "basic_exemption": Decimal("3500"),
        "max_contribution": Decimal("4230.45"),
    },
})

CPP2: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "rate": Decimal("0.04"),
        "first_ceiling": Decimal("71300"),
        "second_ceiling": Decimal("81200"),
        "max_contribution": Decimal("396.00"),
    },
    2026: {
        "rate": Decimal("0.04"),
        "first_ceiling": Decimal("74600"),
        "second_ceiling": Decimal("85000"),
        "max_contribution": Decimal("416.00"),
    },
})

EI: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "rate": Decimal("0.0164"),
        "max_insurable_earnings": Decimal("65700"),
        "max_premium": Decimal("1077.48"),
    },
    2026: {
        "rate": Decimal("0.0163"),
        "max_insurable_earnings": Decimal("68900"),
        "max_premium": Decimal("1123.07"),
    },
})
EI_EMPLOYER_MULTIPLIER = Decimal("1.4")

# ---------------------------------------------------------------------------
# Quebec: QPP / QPP2 / reduced EI / QPIP
# ---------------------------------------------------------------------------
QPP: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "rate": Decimal("0.064"),
        "ympe": Decimal("71300"),
        "basic_exemption": Decimal("3500"),
        "max_contribution": Decimal("4339.20"),
    },
    2026: {
        "rate": Decimal("0.064"),
        "ympe": Decimal("74600"),
        "basic_exemption": Decimal("3500"),
        "max_contribution": Decimal("4550.40"),
    },
})

QPP2: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "rate": Decimal("0.04"),
        "first_ceiling": Decimal("71300"),
        "second_ceiling": Decimal("81200"),
        "max_contribution": Decimal("396.00"),
    },
    2026: {
        "rate": Decimal("0.04"),
        "first_ceiling": Decimal("74600"),
        "second_ceiling": Decimal("85000"),
        "max_contribution": Decimal("416.00"),
    },
})

QUEBEC_EI: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "rate": Decimal("0.01278"),
        "max_insurable_earnings": Decimal("65700"),
        "max_premium": Decimal("839.64"),
    },
    2026: {
        "rate": Decimal("0.01264"),
        "max_insurable_earnings": Decimal("68900"),
        "max_premium": Decimal("870.90"),
    },
})

QPIP: Mapping[int, Mapping[str, Decimal]] = _frozen({
    2025: {
        "employee_rate": Decimal("0.00494"),
        "employer_rate": Decimal("0.00692"),
        "max_insurable_earnings": Decimal("98000"),
        "max_employee_premium": Decimal("484.12"),
        "max_employer_premium": Decimal("678.16"),
    },
    2026: {
        "employee_rate": Decimal("0.00494"),
        "employer_rate": Decimal("0.00692"),
        "max_insurable_earnings": Decimal("100000"),
        "max_employee_premium": Decimal("494.00"),
        "max_employer_premium": Decimal("692.00"),
    },
})

# ---------------------------------------------------------------------------
# Registered plan limits
# ---------------------------------------------------------------------------
RRSP_CONTRIBUTION_RATE = Decimal("0.18")
RRSP_DOLLAR_LIMIT: Mapping[int, Decimal] = _frozen({
    2025: Decimal("32490"),
    2026: Decimal("33810"),
})
TFSA_ANNUAL_LIMIT: Mapping[int, Decimal] = _frozen({
    2025: Decimal("7000"),
    2026: Decimal("7000"),
})

# IPP defined-benefit limit per year of service (about 2% of YMPE).
IPP_MAX_BENEFIT_PER_YEAR: Mapping[int, Decimal] = _frozen({
    2025: Decimal("3610.67"),
    2026: Decimal("3725.00"),
})

# ---------------------------------------------------------------------------
# Provincial / territorial brackets: {year: {province: ((threshold, rate), ...)}}
# ---------------------------------------------------------------------------
PROVINCIAL_BRACKETS: Mapping[int, Mapping[ProvinceCode, tuple[tuple[Decimal, Decimal], ...]]] = _frozen({
    2025: {
        ProvinceCode.AB: (
            (Decimal("0"), Decimal("0.10")),
            (Decimal("148269"), Decimal("0.12")),
            (Decimal("177922"), Decimal("0.13")),
            (Decimal("237230"), Decimal("0.14")),
            (Decimal("355845"), Decimal("0.15")),
        ),
        ProvinceCode.BC: (
            (Decimal("0"), Decimal("0.0506")),
            (Decimal("47937"), Decimal("0.077")),
            (Decimal("95875"), Decimal("0.105")),
            (Decimal("110076"), Decimal("0.1229")),
            (Decimal("133664"), Decimal("0.147")),
            (Decimal("181232"), Decimal("0.168")),
            (Decimal("252752"), Decimal("0.205")),
        ),
        ProvinceCode.MB: (
            (Decimal("0"), Decimal("0.108")),
            (Decimal("47000"), Decimal("0.1275")),
            (Decimal("100000"), Decimal("0.174")),
        ),
        ProvinceCode.NB: (
            (Decimal("0"), Decimal("0.094")),
            (Decimal("49958"), Decimal("0.14")),
            (Decimal("99916"), Decimal("0.16")),
            (Decimal("185064"), Decimal("0.195")),
        ),
        ProvinceCode.NL: (
            (Decimal("0"), Decimal("0.087")),
            (Decimal("43198"), Decimal("0.145")),
            (Decimal("86395"), Decimal("0.158")),
            (Decimal("154244"), Decimal("0.178")),
            (Decimal("215943"), Decimal("0.198")),
            (Decimal("275870"), Decimal("0.208")),
            (Decimal("551739"), Decimal("0.213")),
            (Decimal("1103478"), Decimal("0.218")),
        ),
        ProvinceCode.NS: (
            (Decimal("0"), Decimal("0.0879")),
            (Decimal("29590"), Decimal("0.1495")),
            (Decimal("59180"), Decimal("0.1667")),
            (Decimal("93000"), Decimal("0.175")),
            (Decimal("150000"), Decimal("0.21")),
        ),
        ProvinceCode.NT: (
            (Decimal("0"), Decimal("0.059")),
            (Decimal("50597"), Decimal("0.086")),
            (Decimal("101198"), Decimal("0.122")),
            (Decimal("164525"), Decimal("0.1405")),
        ),
        ProvinceCode.NU: (
            (Decimal("0"), Decimal("0.04")),
            (Decimal("53268"), Decimal("0.07")),
            (Decimal("106537"), Decimal("0.09")),
            (Decimal("173205"), Decimal("0.115")),
        ),
        ProvinceCode.ON: (
            (Decimal("0"), Decimal("0.0505")),
            (Decimal("51446"), Decimal("0.0915")),
            (Decimal("102894"), Decimal("0.1116")),
            (Decimal("150000"), Decimal("0.1216")),
            (Decimal("220000"), Decimal("0.1316")),
        ),
        ProvinceCode.PE: (
            (Decimal("0"), Decimal("0.0965")),
            (Decimal("32656"), Decimal("0.1363")),
            (Decimal("64313"), Decimal("0.1665")),
        ),
        ProvinceCode.QC: (
            (Decimal("0"), Decimal("0.14")),
            (Decimal("51780"), Decimal("0.19")),
            (Decimal("103545"), Decimal("0.24")),
            (Decimal("126000"), Decimal("0.2575")),
        ),
        ProvinceCode.SK: (
            (Decimal("0"), Decimal("0.105")),
            (Decimal("52057"), Decimal("0.125")),
            (Decimal("148734"), Decimal("0.145")),
        ),
        ProvinceCode.YT: (
            (Decimal("0"), Decimal("0.064")),
            (Decimal("55867"), Decimal("0.09")),
            (Decimal("111733"), Decimal("0.109")),
            (Decimal("173205"), Decimal("0.128")),
            (Decimal("500000"), Decimal("0.15")),
        ),
    },
    2026: {
        ProvinceCode.AB: (
            (Decimal("0"), Decimal("0.10")),
            (Decimal("151234"), Decimal("0.12")),
            (Decimal("181480"), Decimal("0.13")),
            (Decimal("241975"), Decimal("0.14")),
            (Decimal("362962"), Decimal("0.15")),
        ),
        ProvinceCode.BC: (
            (Decimal("0"), Decimal("0.0506")),
            (Decimal("48896"), Decimal("0.077")),
            (Decimal("97792"), Decimal("0.105")),
            (Decimal("112278"), Decimal("0.1229")),
            (Decimal("136337"), Decimal("0.147")),
            (Decimal("184857"), Decimal("0.168")),
            (Decimal("257807"), Decimal("0.205")),
        ),
        ProvinceCode.MB: (
            (Decimal("0"), Decimal("0.108")),
            (Decimal("47940"), Decimal("0.1275")),
            (Decimal("102000"), Decimal("0.174")),
        ),
        ProvinceCode.NB: (
            (Decimal("0"), Decimal("0.094")),
            (Decimal("50957"), Decimal("0.14")),
            (Decimal("101914"), Decimal("0.16")),
            (Decimal("188765"), Decimal("0.195")),
        ),
        ProvinceCode.NL: (
            (Decimal("0"), Decimal("0.087")),
            (Decimal("44062"), Decimal("0.145")),
            (Decimal("88123"), Decimal("0.158")),
            (Decimal("157329"), Decimal("0.178")),
            (Decimal("220262"), Decimal("0.198")),
            (Decimal("281387"), Decimal("0.208")),
            (Decimal("562774"), Decimal("0.213")),
            (Decimal("1125547"), Decimal("0.218")),
        ),
        ProvinceCode.NS: (
            (Decimal("0"), Decimal("0.0879")),
            (Decimal("30182"), Decimal("0.1495")),
            (Decimal("60364"), Decimal("0.1667")),
            (Decimal("94860"), Decimal("0.175")),
            (Decimal("153000"), Decimal("0.21")),
        ),
        ProvinceCode.NT: (
            (Decimal("0"), Decimal("0.059")),
            (Decimal("51609"), Decimal("0.086")),
            (Decimal("103222"), Decimal("0.122")),
            (Decimal("167816"), Decimal("0.1405")),
        ),
        ProvinceCode.NU: (
            (Decimal("0"), Decimal("0.04")),
            (Decimal("54333"), Decimal("0.07")),
            (Decimal("108668"), Decimal("0.09")),
            (Decimal("176669"), Decimal("0.115")),
        ),
        ProvinceCode.ON: (
            (Decimal("0"), Decimal("0.0505")),
            (Decimal("52475"), Decimal("0.0915")),
            (Decimal("104952"), Decimal("0.1116")),
            (Decimal("153000"), Decimal("0.1216")),
            (Decimal("224400"), Decimal("0.1316")),
        ),
        ProvinceCode.PE: (
            (Decimal("0"), Decimal("0.0965")),
            (Decimal("33309"), Decimal("0.1363")),
            (Decimal("65599"), Decimal("0.1665")),
        ),
        ProvinceCode.QC: (
            (Decimal("0"), Decimal("0.14")),
            (Decimal("52816"), Decimal("0.19")),
            (Decimal("105616"), Decimal("0.24")),
            (Decimal("128520"), Decimal("0.2575")),
        ),
        ProvinceCode.SK: (
            (Decimal("0"), Decimal("0.105")),
            (Decimal("53098"), Decimal("0.125")),
            (Decimal("151709"), Decimal("0.145")),
        ),
        ProvinceCode.YT: (
            (Decimal("0"), Decimal("0.064")),
            (Decimal("56984"), Decimal("0.09")),
            (Decimal("113968"), Decimal("0.109")),
            (Decimal("176669"), Decimal("0.128")),
            (Decimal("510000"), Decimal("0.15")),
        ),
    },
})

PROVINCIAL_BASIC_PERSONAL_AMOUNT: Mapping[int, Mapping[ProvinceCode, Decimal]] = _frozen({
    2025: {
        ProvinceCode.AB: Decimal("21003"),
        ProvinceCode.BC: Decimal("12932"),
        ProvinceCode.MB: Decimal("15780"),
        ProvinceCode.NB: Decimal("13396"),
        ProvinceCode.NL: Decimal("10818"),
        ProvinceCode.NS: Decimal("8481"),
        ProvinceCode.NT: Decimal("17373"),
        ProvinceCode.NU: Decimal("18767"),
        ProvinceCode.ON: Decimal("12399"),
        ProvinceCode.PE: Decimal("13500"),
        ProvinceCode.QC: Decimal("18056"),
        ProvinceCode.SK: Decimal("18491"),
        ProvinceCode.YT: Decimal("15705"),
    },
    2026: {
        ProvinceCode.AB: Decimal("21423"),
        ProvinceCode.BC: Decimal("13191"),
        ProvinceCode.MB: Decimal("16096"),
        ProvinceCode.NB: Decimal("13664"),
        ProvinceCode.NL: Decimal("11034"),
        ProvinceCode.NS: Decimal("8651"),
        ProvinceCode.NT: Decimal("17720"),
        ProvinceCode.NU: Decimal("19142"),
        ProvinceCode.ON: Decimal("12647"),
        ProvinceCode.PE: Decimal("13770"),
        ProvinceCode.QC: Decimal("18417"),
        ProvinceCode.SK: Decimal("18861"),
        ProvinceCode.YT: Decimal("16019"),
    },
})

# Provincial dividend tax credits: {province: (eligible, non_eligible)}, as a
# fraction of the grossed-up dividend. Unchanged between 2025 and 2026.
PROVINCIAL_DIVIDEND_CREDITS: Mapping[ProvinceCode, tuple[Decimal, Decimal]] = _frozen({
    ProvinceCode.AB: (Decimal("0.0812"), Decimal("0.0218")),
    ProvinceCode.BC: (Decimal("0.12"), Decimal("0.0196")),
    ProvinceCode.MB: (Decimal("0.08"), Decimal("0.007835")),
    ProvinceCode.NB: (Decimal("0.14"), Decimal("0.0275")),
    ProvinceCode.NL: (Decimal("0.063"), Decimal("0.032")),
    ProvinceCode.NS: (Decimal("0.0885"), Decimal("0.0299")),
    ProvinceCode.NT: (Decimal("0.115"), Decimal("0.06")),
    ProvinceCode.NU: (Decimal("0.0551"), Decimal("0.0261")),
    ProvinceCode.ON: (Decimal("0.10"), Decimal("0.029863")),
    ProvinceCode.PE: (Decimal("0.105"), Decimal("0.0128")),
    ProvinceCode.QC: (Decimal("0.117"), Decimal("0.0342")),
    ProvinceCode.SK: (Decimal("0.11"), Decimal("0.02105")),
    ProvinceCode.YT: (Decimal("0.1212"), Decimal("0.0218")),
})

# Provincial corporate rates: {province: (small_business, general)}.
PROVINCIAL_CORPORATE_RATES: Mapping[ProvinceCode, tuple[Decimal, Decimal]] = _frozen({
    ProvinceCode.AB: (Decimal("0.02"), Decimal("0.08")),
    ProvinceCode.BC: (Decimal("0.02"), Decimal("0.12")),
    ProvinceCode.MB: (Decimal("0"), Decimal("0.12")),
    ProvinceCode.NB: (Decimal("0.025"), Decimal("0.14")),
    ProvinceCode.NL: (Decimal("0.03"), Decimal("0.15")),
    ProvinceCode.NS: (Decimal("0.025"), Decimal("0.14")),
    ProvinceCode.NT: (Decimal("0.02"), Decimal("0.115")),
    ProvinceCode.NU: (Decimal("0.03"), Decimal("0.12")),
    ProvinceCode.ON: (Decimal("0.032"), Decimal("0.115")),
    ProvinceCode.PE: (Decimal("0.01"), Decimal("0.16")),
    ProvinceCode.QC: (Decimal("0.032"), Decimal("0.115")),
    ProvinceCode.SK: (Decimal("0.01"), Decimal("0.12")),
    ProvinceCode.YT: (Decimal("0"), Decimal("0.12")),
})

# Combined federal + provincial rate on a CCPC's aggregate investment income.
INVESTMENT_INCOME_RATES: Mapping[ProvinceCode, Decimal] = _frozen({
    ProvinceCode.AB: Decimal("0.4667"),
    ProvinceCode.BC: Decimal("0.5067"),
    ProvinceCode.MB: Decimal("0.5067"),
    ProvinceCode.NB: Decimal("0.5267"),
    ProvinceCode.NL: Decimal("0.5367"),
    ProvinceCode.NS: Decimal("0.5267"),
    ProvinceCode.NT: Decimal("0.5017"),
    ProvinceCode.NU: Decimal("0.5067"),
    ProvinceCode.ON: Decimal("0.5017"),
    ProvinceCode.PE: Decimal("0.5467"),
    ProvinceCode.QC: Decimal("0.5017"),
    ProvinceCode.SK: Decimal("0.5067"),
    ProvinceCode.YT: Decimal("0.5067"),
})

# ---------------------------------------------------------------------------
# Surtaxes on provincial tax: {year: {province: ((threshold, rate), ...)}}
# ---------------------------------------------------------------------------
PROVINCIAL_SURTAX: Mapping[int, Mapping[ProvinceCode, tuple[tuple[Decimal, Decimal], ...]]] = _frozen({
    2025: {
        ProvinceCode.ON: (
            (Decimal("5710"), Decimal("0.20")),
            (Decimal("7307"), Decimal("0.36")),
        ),
        ProvinceCode.PE: (
            (Decimal("12500"), Decimal("0.10")),
        ),
    },
    2026: {
        ProvinceCode.ON: (
            (Decimal("5824"), Decimal("0.20")),
            (Decimal("7453"), Decimal("0.36")),
        ),
        ProvinceCode.PE: (
            (Decimal("12750"), Decimal("0.10")),
        ),
    },
})

# Ontario Health Premium: ((threshold, base, rate, max_premium), ...).
# Thresholds are fixed by statute and are not indexed.
ONTARIO_HEALTH_PREMIUM: tuple[tuple[Decimal, Decimal, Decimal, Decimal], ...] = (
    (Decimal("20000"), Decimal("0"), Decimal("0.06"), Decimal("300")),
    (Decimal("25000"), Decimal("300"), Decimal("0.06"), Decimal("450")),
    (Decimal("36000"), Decimal("450"), Decimal("0.25"), Decimal("600")),
    (Decimal("38500"), Decimal("600"), Decimal("0.25"), Decimal("750")),
    (Decimal("48000"), Decimal("750"), Decimal("0.25"), Decimal("900")),
    (Decimal("72000"), Decimal("900"), Decimal("0.25"), Decimal("900")),
    (Decimal("200600"), Decimal("900"), Decimal("0"), Decimal("900")),
)
HEALTH_PREMIUM_EXEMPT_INCOME = Decimal("20000")
