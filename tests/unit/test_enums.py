"""Tests for econ_common.enums: all enum values must match DB CHECK constraints."""

from src.econ_common.enums import (
    AccountStatus,
    CharacterClass,
    CompanySector,
    ImpactType,
    InvestmentType,
    LoanPurpose,
    PaymentType,
    TransactionType,
    WorldEventType,
)


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    def test_account_status_is_str(self) -> None:
        assert isinstance(AccountStatus.ACTIVE, str)
        assert AccountStatus.ACTIVE == "ACTIVE"

    def test_payment_type_is_str(self) -> None:
        assert PaymentType.INVESTMENT_BACKED == "INVESTMENT_BACKED"


class TestTransactionType:
    def test_all_values(self) -> None:
        expected = {
            "DEPOSIT", "WITHDRAWAL", "LOAN", "INTEREST",
            "INVESTMENT", "STOCK_TRADE", "SERVICE_PAYMENT",
        }
        assert {t.value for t in TransactionType} == expected


class TestCharacterClass:
    def test_all_values(self) -> None:
        assert {c.value for c in CharacterClass} == {"NOVICE", "WARRIOR", "MAGE", "ARCHER", "ROGUE"}


class TestCompanySector:
    def test_six_sectors(self) -> None:
        assert len(CompanySector) == 6


class TestWorldEventType:
    def test_all_values(self) -> None:
        expected = {
            "DISASTER", "POLITICAL", "INVASION", "DISCOVERY",
            "TRADE", "ECONOMIC", "TECHNOLOGICAL", "MAGICAL",
        }
        assert {e.value for e in WorldEventType} == expected


class TestImpactType:
    def test_all_values(self) -> None:
        assert {i.value for i in ImpactType} == {"IMMEDIATE", "GRADUAL", "DELAYED"}


class TestInvestmentAndLoanEnums:
    def test_investment_types(self) -> None:
        assert len(InvestmentType) == 6

    def test_loan_purposes(self) -> None:
        assert {p.value for p in LoanPurpose} == {"JOB_CHANGE", "EQUIPMENT", "BUSINESS", "INVESTMENT"}
