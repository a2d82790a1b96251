"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class AccountType(str, Enum):
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    BUSINESS = "BUSINESS"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    CLOSED = "CLOSED"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    # Disbursement (+) and repayment (-) share one type, sign tells them apart
    LOAN = "LOAN"
    # Savings interest and stock dividends
    INTEREST = "INTEREST"
    # Investment purchase (-), liquidation / maturity (+)
    INVESTMENT = "INVESTMENT"
    STOCK_TRADE = "STOCK_TRADE"
    SERVICE_PAYMENT = "SERVICE_PAYMENT"


class CharacterClass(str, Enum):
    NOVICE = "NOVICE"
    WARRIOR = "WARRIOR"
    MAGE = "MAGE"
    ARCHER = "ARCHER"
    ROGUE = "ROGUE"


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAID_OFF = "PAID_OFF"
    # Reserved: no automatic transition yet
    DEFAULTED = "DEFAULTED"
    OVERDUE = "OVERDUE"


class LoanPurpose(str, Enum):
    JOB_CHANGE = "JOB_CHANGE"
    EQUIPMENT = "EQUIPMENT"
    BUSINESS = "BUSINESS"
    INVESTMENT = "INVESTMENT"


class InvestmentType(str, Enum):
    FIXED_DEPOSIT = "FIXED_DEPOSIT"
    MUTUAL_FUND = "MUTUAL_FUND"
    GOVERNMENT_BOND = "GOVERNMENT_BOND"
    CORPORATE_BOND = "CORPORATE_BOND"
    LIFE_INSURANCE = "LIFE_INSURANCE"
    INVESTMENT_INSURANCE = "INVESTMENT_INSURANCE"


class RiskLevel(str, Enum):
    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class InvestmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    MATURED = "MATURED"
    CANCELLED = "CANCELLED"
    LIQUIDATED = "LIQUIDATED"


class CompanySector(str, Enum):
    RESOURCES = "RESOURCES"
    TRANSPORT = "TRANSPORT"
    TECHNOLOGY = "TECHNOLOGY"
    SERVICES = "SERVICES"
    FINANCE = "FINANCE"
    MANUFACTURING = "MANUFACTURING"


class StockTradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class WorldEventType(str, Enum):
    DISASTER = "DISASTER"
    POLITICAL = "POLITICAL"
    INVASION = "INVASION"
    DISCOVERY = "DISCOVERY"
    TRADE = "TRADE"
    ECONOMIC = "ECONOMIC"
    TECHNOLOGICAL = "TECHNOLOGICAL"
    MAGICAL = "MAGICAL"


class ImpactType(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    GRADUAL = "GRADUAL"
    DELAYED = "DELAYED"


class ItemQuality(str, Enum):
    POOR = "POOR"
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    ARTIFACT = "ARTIFACT"


class PaymentType(str, Enum):
    FULL_PAYMENT = "FULL_PAYMENT"
    LOAN = "LOAN"
    INSTALLMENT = "INSTALLMENT"
    INVESTMENT_BACKED = "INVESTMENT_BACKED"
