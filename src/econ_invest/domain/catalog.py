"""Static investment product catalog.

Built once at import as an immutable tuple; lookups go through a read-only
mapping keyed by product id.
"""

from types import MappingProxyType

from src.econ_common.cents import gold_to_cents
from src.econ_invest.domain.models import InvestmentProduct

PRODUCTS: tuple[InvestmentProduct, ...] = (
    # Fixed deposits
    InvestmentProduct(
        id="fd-3m",
        investment_type="FIXED_DEPOSIT",
        name="3-Month Fixed Deposit",
        description="Short, guaranteed return",
        min_amount=gold_to_cents(1_000),
        max_amount=gold_to_cents(100_000),
        annual_return=3.5,
        term_months=3,
        risk_level="VERY_LOW",
    ),
    InvestmentProduct(
        id="fd-12m",
        investment_type="FIXED_DEPOSIT",
        name="12-Month Fixed Deposit",
        description="One-year deposit with a steady return",
        min_amount=gold_to_cents(5_000),
        max_amount=gold_to_cents(500_000),
        annual_return=5.0,
        term_months=12,
        risk_level="VERY_LOW",
    ),
    InvestmentProduct(
        id="fd-60m",
        investment_type="FIXED_DEPOSIT",
        name="5-Year Fixed Deposit",
        description="Long deposit with the best guaranteed rate",
        min_amount=gold_to_cents(10_000),
        max_amount=gold_to_cents(1_000_000),
        annual_return=8.0,
        term_months=60,
        risk_level="VERY_LOW",
    ),
    # Government bonds
    InvestmentProduct(
        id="gov-bond-1y",
        investment_type="GOVERNMENT_BOND",
        name="Crown Bond 1-Year",
        description="Issued by the realm treasury",
        min_amount=gold_to_cents(10_000),
        max_amount=gold_to_cents(2_000_000),
        annual_return=4.0,
        term_months=12,
        risk_level="LOW",
    ),
    InvestmentProduct(
        id="gov-bond-10y",
        investment_type="GOVERNMENT_BOND",
        name="Crown Bond 10-Year",
        description="Long-dated treasury bond",
        min_amount=gold_to_cents(50_000),
        max_amount=gold_to_cents(5_000_000),
        annual_return=6.0,
        term_months=120,
        risk_level="LOW",
    ),
    # Corporate bonds
    InvestmentProduct(
        id="corp-bond-aa",
        investment_type="CORPORATE_BOND",
        name="AA Guild Bond",
        description="High-grade guild debt",
        min_amount=gold_to_cents(25_000),
        max_amount=gold_to_cents(1_000_000),
        annual_return=7.5,
        term_months=24,
        risk_level="MEDIUM",
        min_credit_score=600,
        min_level=15,
    ),
    InvestmentProduct(
        id="corp-bond-bbb",
        investment_type="CORPORATE_BOND",
        name="BBB Guild Bond",
        description="High-yield guild debt",
        min_amount=gold_to_cents(50_000),
        max_amount=gold_to_cents(500_000),
        annual_return=12.0,
        term_months=36,
        risk_level="HIGH",
        min_credit_score=650,
        min_level=25,
    ),
    # Mutual funds (return is the expected drift, value moves with the market)
    InvestmentProduct(
        id="mutual-balanced",
        investment_type="MUTUAL_FUND",
        name="Balanced Fund",
        description="Mixed stocks and bonds",
        min_amount=gold_to_cents(5_000),
        max_amount=gold_to_cents(2_000_000),
        annual_return=6.5,
        term_months=None,
        risk_level="MEDIUM",
        min_credit_score=550,
        min_level=10,
    ),
    InvestmentProduct(
        id="mutual-growth",
        investment_type="MUTUAL_FUND",
        name="Growth Fund",
        description="Equity-heavy growth strategy",
        min_amount=gold_to_cents(10_000),
        max_amount=gold_to_cents(1_000_000),
        annual_return=10.0,
        term_months=None,
        risk_level="HIGH",
        min_credit_score=600,
        min_level=20,
    ),
    InvestmentProduct(
        id="mutual-aggressive",
        investment_type="MUTUAL_FUND",
        name="Aggressive Fund",
        description="Maximum risk, maximum upside",
        min_amount=gold_to_cents(25_000),
        max_amount=gold_to_cents(500_000),
        annual_return=15.0,
        term_months=None,
        risk_level="VERY_HIGH",
        min_credit_score=700,
        min_level=30,
    ),
    # Insurance
    InvestmentProduct(
        id="life-insurance",
        investment_type="LIFE_INSURANCE",
        name="Whole Life Policy",
        description="Protection with a savings component",
        min_amount=gold_to_cents(12_000),
        max_amount=gold_to_cents(600_000),
        annual_return=2.5,
        term_months=None,
        risk_level="VERY_LOW",
    ),
    InvestmentProduct(
        id="invest-insurance",
        investment_type="INVESTMENT_INSURANCE",
        name="Unit-Linked Policy",
        description="Protection with market-linked growth",
        min_amount=gold_to_cents(24_000),
        max_amount=gold_to_cents(1_200_000),
        annual_return=5.5,
        term_months=None,
        risk_level="MEDIUM",
        min_credit_score=550,
        min_level=15,
    ),
)

_BY_ID = MappingProxyType({product.id: product for product in PRODUCTS})


def get_product(product_id: str) -> InvestmentProduct | None:
    return _BY_ID.get(product_id)


def available_products(level: int, credit_score: int) -> list[InvestmentProduct]:
    return [product for product in PRODUCTS if product.admits(level, credit_score)]
