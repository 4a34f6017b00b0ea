"""Enumerations for the CCPC compensation planner."""

from enum import StrEnum


class ProvinceCode(StrEnum):
    AB = "AB"
    BC = "BC"
    MB = "MB"
    NB = "NB"
    NL = "NL"
    NS = "NS"
    NT = "NT"
    NU = "NU"
    ON = "ON"
    PE = "PE"
    QC = "QC"
    SK = "SK"
    YT = "YT"


class SalaryStrategy(StrEnum):
    DYNAMIC = "dynamic"
    FIXED = "fixed"
    DIVIDENDS_ONLY = "dividends-only"


class NotionalAccount(StrEnum):
    CDA = "CDA"
    ERDTOH = "eRDTOH"
    NRDTOH = "nRDTOH"
    GRIP = "GRIP"
    CORPORATE_INVESTMENTS = "corporateInvestments"


class DividendType(StrEnum):
    CAPITAL = "CAPITAL"
    ELIGIBLE = "ELIGIBLE"
    NON_ELIGIBLE = "NON_ELIGIBLE"
